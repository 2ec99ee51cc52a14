"""
LST Air Temperature - near-surface air temperature from MODIS LST.

Daily MODIS land surface temperature rasters are quality filtered,
converted to Celsius and blended toward same-day ERA5 2 m air temperature
over a region. The calibrated series are aggregated over the window and
reported as regional statistics, maps, charts and GeoTIFF exports.

This package provides tools for:
- Selecting a region from a vector boundary dataset
- Loading MOD11A1 LST and ERA5 daily air temperature rasters
- Quality filtering and rescaling LST
- Calibrating LST to air temperature and aggregating over time
- Regional statistics, charts, maps and exports

Version: 1.0.0
"""

__version__ = "1.0.0"

# Core modules
from lst_airtemp.core import (
    RasterObservation,
    RasterSeries,
    Region,
)

# IO modules
from lst_airtemp.io import (
    ModisLSTReader,
    ReanalysisLoader,
    select_region,
)

# Preprocessing modules
from lst_airtemp.preprocess import (
    LSTExtractor,
    QualityFilter,
    rescale_lst,
)

# Calibration
from lst_airtemp.calibration import (
    AirTemperatureCalibrator,
    MonthlyAggregates,
    aggregate,
    calibrate_pixels,
)

# Output
from lst_airtemp.output import (
    RasterExporter,
    RegionalStatistic,
    Visualization,
    reduce_region,
    regional_statistics,
    regional_time_series,
)

# Configuration and pipeline
from lst_airtemp.config import RunConfig
from lst_airtemp.pipeline import AirTempPipeline

__all__ = [
    "RasterObservation",
    "RasterSeries",
    "Region",
    "ModisLSTReader",
    "ReanalysisLoader",
    "select_region",
    "LSTExtractor",
    "QualityFilter",
    "rescale_lst",
    "AirTemperatureCalibrator",
    "MonthlyAggregates",
    "aggregate",
    "calibrate_pixels",
    "RasterExporter",
    "RegionalStatistic",
    "Visualization",
    "reduce_region",
    "regional_statistics",
    "regional_time_series",
    "RunConfig",
    "AirTempPipeline",
]
