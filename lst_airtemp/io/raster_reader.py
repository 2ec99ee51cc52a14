"""Daily GeoTIFF collection reader.

A collection is a directory of single-band GeoTIFFs named
``<prefix>_<YYYYMMDD>_<band>.tif``. Selecting a band over a date window
returns a lazy :class:`RasterSeries`; no pixels are read until an
observation is loaded.
"""

import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Union

import rioxarray
import xarray as xr
from loguru import logger

from ..core.raster import RasterObservation, RasterSeries, TimeLike, to_datetime
from ..utils.exceptions import DataInputError, handle_exception


class DailyRasterReader:
    """
    Reader for a directory of daily single-band GeoTIFFs.

    Attributes:
        source_dir: Directory holding the GeoTIFFs
        prefix: Dataset prefix of the file names (e.g. 'MOD11A1', 'ERA5')

    Example:
        >>> reader = DailyRasterReader("data/era5", prefix="ERA5")
        >>> series = reader.select_band("mean_2m_air_temperature",
        ...                             "2010-01-01", "2010-01-31", units="K")
    """

    def __init__(self, source_dir: Union[str, Path], prefix: str):
        self.source_dir = Path(source_dir)
        self.prefix = prefix

        if not self.source_dir.is_dir():
            raise DataInputError(
                f"Source directory does not exist: {self.source_dir}",
                input_type=prefix, file_path=str(self.source_dir)
            )

    def _pattern(self, band: str) -> "re.Pattern":
        return re.compile(rf"^{re.escape(self.prefix)}_(\d{{8}})_{re.escape(band)}\.tiff?$")

    def available_dates(self, band: str) -> Dict[datetime, Path]:
        """
        Index the files of one band by acquisition date.

        Args:
            band: Band or variable name

        Returns:
            Mapping of acquisition datetime (midnight UTC) to file path
        """
        pattern = self._pattern(band)
        files = {}
        for path in sorted(self.source_dir.iterdir()):
            match = pattern.match(path.name)
            if match:
                files[datetime.strptime(match.group(1), "%Y%m%d")] = path
        return files

    def select_band(
        self,
        band: str,
        start: TimeLike,
        end: TimeLike,
        units: str,
        masked: bool = True,
    ) -> RasterSeries:
        """
        Select one band over a date window.

        Args:
            band: Band or variable name
            start: Window start (inclusive)
            end: Window end (exclusive)
            units: Units label of the stored values
            masked: Whether the file's nodata value becomes NaN

        Returns:
            Lazy RasterSeries, one observation per day
        """
        start, end = to_datetime(start), to_datetime(end)
        observations: List[RasterObservation] = []

        for acquired, path in self.available_dates(band).items():
            if not start <= acquired < end:
                continue
            observations.append(RasterObservation(
                self._loader(path, masked),
                variable=band,
                units=units,
                time_start=acquired,
                time_end=acquired + timedelta(days=1),
                attrs={"source": str(path), "dataset": self.prefix},
            ))

        logger.debug(f"{self.prefix}: selected {len(observations)} '{band}' rasters "
                     f"in [{start.date()}, {end.date()})")
        return RasterSeries(observations, variable=band)

    def _loader(self, path: Path, masked: bool):
        return lambda: self._read_band(path, masked)

    @staticmethod
    @handle_exception
    def _read_band(path: Union[str, Path], masked: bool = True) -> xr.DataArray:
        """
        Read a single-band GeoTIFF file.

        Args:
            path: Path to the GeoTIFF
            masked: Whether nodata pixels become NaN

        Returns:
            2-D DataArray with CRS and transform attached
        """
        with rioxarray.open_rasterio(path, masked=masked) as src:
            data = src.squeeze("band", drop=True).load()

        if data.rio.crs is None:
            raise DataInputError(f"Raster has no CRS: {path}", file_path=str(path))

        data.attrs["source"] = str(path)
        return data
