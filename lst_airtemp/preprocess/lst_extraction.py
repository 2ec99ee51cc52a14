"""LST extraction: quality filter, rescale to Celsius, merge overpasses, clip.

MOD11A1 stores LST as digital numbers; ``celsius = dn * 0.02 - 273.15``.
The scale and offset are sensor calibration constants.
"""

from typing import Dict, Optional, Union

import numpy as np
import xarray as xr
from loguru import logger

from ..core.constants import (
    KELVIN_OFFSET,
    LST_OVERPASSES,
    LST_VARIABLE,
    MODIS_LST_SCALE,
    UNITS_CELSIUS,
)
from ..core.raster import RasterSeries, TimeLike
from ..core.region import Region
from ..io.modis_reader import ModisLSTReader
from .quality_mask import QualityFilter, day_filter, night_filter

ArrayLike = Union[xr.DataArray, np.ndarray, float]


def rescale_lst(dn: ArrayLike) -> ArrayLike:
    """Convert LST digital numbers to degrees Celsius."""
    return dn * MODIS_LST_SCALE - KELVIN_OFFSET


def inverse_rescale_lst(celsius: ArrayLike) -> ArrayLike:
    """Convert degrees Celsius back to LST digital numbers."""
    return (celsius + KELVIN_OFFSET) / MODIS_LST_SCALE


class LSTExtractor:
    """
    Build the unified day + night LST series in Celsius.

    For each overpass the raw LST band and its QC band are selected for
    the window, low-quality pixels are masked, digital numbers are
    rescaled to Celsius and renamed 'LST' with the original timestamps.
    The two overpasses are merged and every raster is clipped to the
    region.

    Example:
        >>> extractor = LSTExtractor(ModisLSTReader("data/mod11a1"))
        >>> lst = extractor.extract(region, "2010-01-01", "2010-01-31")
    """

    def __init__(
        self,
        reader: ModisLSTReader,
        filters: Optional[Dict[str, QualityFilter]] = None,
    ):
        self.reader = reader
        self.filters = filters or {"day": day_filter(), "night": night_filter()}

    def extract_overpass(self, overpass: str, start: TimeLike, end: TimeLike) -> RasterSeries:
        """
        Quality-filtered LST of one overpass in Celsius.

        Args:
            overpass: 'day' or 'night'
            start: Window start (inclusive)
            end: Window end (exclusive)
        """
        lst_dn, qc = self.reader.select_overpass(overpass, start, end)
        quality_filter = self.filters[overpass]
        filtered = quality_filter.apply_series(lst_dn, qc)

        logger.info(f"{overpass.capitalize()} LST: {len(filtered)} rasters "
                    f"({LST_OVERPASSES[overpass][0]}, filtered on {quality_filter.qc_band} bit {quality_filter.bit})")
        return filtered.map(rescale_lst, variable=LST_VARIABLE, units=UNITS_CELSIUS)

    def extract(self, region: Region, start: TimeLike, end: TimeLike) -> RasterSeries:
        """
        Unified LST series clipped to a region.

        Args:
            region: Region every raster is clipped to
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            Lazy RasterSeries named 'LST' in degC
        """
        combined = self.extract_overpass("day", start, end).merge(
            self.extract_overpass("night", start, end)
        )
        logger.info(f"Merged LST series: {len(combined)} rasters")
        return combined.map(region.clip)
