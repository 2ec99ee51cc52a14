"""
Calibration module.

This module blends LST toward same-day reanalysis air temperature and
reduces the calibrated series over the run window.

Example:
    >>> from lst_airtemp.calibration import AirTemperatureCalibrator, aggregate_all
    >>>
    >>> calibrator = AirTemperatureCalibrator(alpha=0.6)
    >>> calibrated = calibrator.calibrate_all(lst, {"mean": era5_mean,
    ...                                             "min": era5_min,
    ...                                             "max": era5_max})
    >>> aggregates = aggregate_all(calibrated)
"""

from .air_temperature import (
    DEFAULT_ALPHA,
    AirTemperatureCalibrator,
    ReanalysisIndex,
    calibrate_pixels,
)
from .aggregation import (
    MonthlyAggregates,
    aggregate,
    aggregate_all,
    round_half_away_from_zero,
)

__all__ = [
    'DEFAULT_ALPHA',
    'AirTemperatureCalibrator',
    'ReanalysisIndex',
    'calibrate_pixels',
    'MonthlyAggregates',
    'aggregate',
    'aggregate_all',
    'round_half_away_from_zero',
]
