"""MODIS MOD11A1 daily LST reader.

Reads the raw LST digital numbers and QC flags of the Terra daily
1 km product. Values stay raw here; quality filtering and rescaling
happen in :mod:`lst_airtemp.preprocess`.
"""

from pathlib import Path
from typing import Union

from ..core.constants import LST_OVERPASSES, MODIS_LST_FILL, UNITS_DN
from ..core.raster import RasterSeries, TimeLike
from ..utils.exceptions import DataInputError
from .raster_reader import DailyRasterReader


class ModisLSTReader(DailyRasterReader):
    """
    Reader for MOD11A1 GeoTIFFs named ``MOD11A1_<YYYYMMDD>_<band>.tif``.

    Example:
        >>> reader = ModisLSTReader("data/mod11a1")
        >>> lst_dn, qc = reader.select_overpass("day", "2010-01-01", "2010-01-31")
    """

    def __init__(self, source_dir: Union[str, Path], prefix: str = "MOD11A1"):
        super().__init__(source_dir, prefix)

    def select_lst(self, band: str, start: TimeLike, end: TimeLike) -> RasterSeries:
        """
        Select raw LST digital numbers.

        The MODIS fill value and the file's nodata value become NaN.
        """
        series = self.select_band(band, start, end, units=UNITS_DN, masked=True)
        return series.map(lambda dn: dn.where(dn != MODIS_LST_FILL))

    def select_qc(self, band: str, start: TimeLike, end: TimeLike) -> RasterSeries:
        """Select QC flags, kept as integers for bit tests."""
        return self.select_band(band, start, end, units=UNITS_DN, masked=False)

    def select_overpass(self, overpass: str, start: TimeLike, end: TimeLike):
        """
        Select the LST band and its QC band of one overpass.

        Args:
            overpass: 'day' or 'night'
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            Tuple of (LST RasterSeries, QC RasterSeries)
        """
        if overpass not in LST_OVERPASSES:
            raise DataInputError(
                f"Unknown overpass '{overpass}', expected one of {list(LST_OVERPASSES)}",
                input_type=self.prefix
            )
        lst_band, qc_band = LST_OVERPASSES[overpass]
        return self.select_lst(lst_band, start, end), self.select_qc(qc_band, start, end)
