"""Core module for LST air temperature calibration."""

from .raster import RasterObservation, RasterSeries, to_datetime
from .region import Region
from .constants import (
    KELVIN_OFFSET,
    MODIS_LST_SCALE,
    MODIS_QC_BIT,
    LST_VARIABLE,
    ERA5_VARIABLES,
    AIR_TEMPERATURE_VARIABLES,
    TEMPERATURE_KINDS,
)

__all__ = [
    'RasterObservation',
    'RasterSeries',
    'Region',
    'to_datetime',
    'KELVIN_OFFSET',
    'MODIS_LST_SCALE',
    'MODIS_QC_BIT',
    'LST_VARIABLE',
    'ERA5_VARIABLES',
    'AIR_TEMPERATURE_VARIABLES',
    'TEMPERATURE_KINDS',
]
