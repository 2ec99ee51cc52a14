"""ERA5 daily 2 m air temperature loader."""

from pathlib import Path
from typing import Union

from loguru import logger

from ..core.constants import ERA5_VARIABLES, UNITS_KELVIN
from ..core.raster import RasterSeries, TimeLike
from ..utils.exceptions import DataInputError
from .raster_reader import DailyRasterReader


class ReanalysisLoader(DailyRasterReader):
    """
    Loader for ERA5 daily GeoTIFFs named ``ERA5_<YYYYMMDD>_<variable>.tif``.

    Values stay in Kelvin; conversion to Celsius happens at calibration
    time so that the same series feeds every calibration branch.

    Example:
        >>> loader = ReanalysisLoader("data/era5")
        >>> era5_mean = loader.load("mean", "2010-01-01", "2010-01-31")
    """

    def __init__(self, source_dir: Union[str, Path], prefix: str = "ERA5"):
        super().__init__(source_dir, prefix)

    def load(self, kind: str, start: TimeLike, end: TimeLike) -> RasterSeries:
        """
        Select the reanalysis variable of one temperature kind.

        Args:
            kind: 'mean', 'min' or 'max'
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            Lazy RasterSeries in Kelvin
        """
        if kind not in ERA5_VARIABLES:
            raise DataInputError(
                f"Unknown temperature kind '{kind}', expected one of {list(ERA5_VARIABLES)}",
                input_type=self.prefix
            )

        series = self.select_band(ERA5_VARIABLES[kind], start, end, units=UNITS_KELVIN)
        logger.info(f"Loaded {len(series)} ERA5 '{ERA5_VARIABLES[kind]}' rasters")
        return series

    def load_all(self, start: TimeLike, end: TimeLike) -> dict:
        """Load the mean, min and max series."""
        return {kind: self.load(kind, start, end) for kind in ERA5_VARIABLES}
