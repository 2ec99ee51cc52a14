"""Input module for LST air temperature calibration."""

from .raster_reader import DailyRasterReader
from .modis_reader import ModisLSTReader
from .era5_reader import ReanalysisLoader
from .boundary_reader import read_boundaries, list_region_names, select_region

__all__ = [
    'DailyRasterReader',
    'ModisLSTReader',
    'ReanalysisLoader',
    'read_boundaries',
    'list_region_names',
    'select_region',
]
