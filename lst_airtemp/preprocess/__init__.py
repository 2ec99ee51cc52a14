"""Preprocessing module for LST air temperature calibration."""

from .quality_mask import QualityFilter, QualityFilterError, day_filter, night_filter
from .lst_extraction import LSTExtractor, rescale_lst, inverse_rescale_lst
from .resampling import match_grid, coarsen_to_scale, pixel_size_m, same_grid

__all__ = [
    'QualityFilter', 'QualityFilterError', 'day_filter', 'night_filter',
    'LSTExtractor', 'rescale_lst', 'inverse_rescale_lst',
    'match_grid', 'coarsen_to_scale', 'pixel_size_m', 'same_grid',
]
