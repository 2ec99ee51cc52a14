"""Output writers for the air temperature pipeline.

This module writes the exported GeoTIFF rasters, the regional statistics
CSV and the JSON run summary.
"""

from typing import Any, Dict, List, Optional, Union
import csv
import json
from datetime import datetime
from pathlib import Path

import numpy as np
import rasterio
import xarray as xr
from loguru import logger
from rasterio.crs import CRS
from rasterio.enums import Resampling
from rasterio.errors import RasterioError
from rasterio.windows import Window
from rioxarray.exceptions import RioXarrayError

from ..calibration.aggregation import round_half_away_from_zero
from ..core.constants import (
    DEFAULT_EXPORT_CRS,
    DEFAULT_MAX_PIXELS,
    DEFAULT_SCALE,
    METERS_PER_DEGREE,
)
from ..core.region import Region
from ..preprocess.resampling import pixel_size_m
from ..utils.exceptions import ExportError, OutputError
from .statistics import RegionalStatistic


def write_geotiff(
    path: Union[str, Path],
    data: xr.DataArray,
    compression: str = "LZW",
    nodata: float = np.nan,
    dtype: str = "float32",
    tags: Optional[Dict[str, str]] = None
) -> None:
    """Write single-band GeoTIFF with the CRS and transform of a DataArray.

    Args:
        path: Output file path
        data: Georeferenced 2-D DataArray
        compression: Compression algorithm (default: LZW)
        nodata: No-data value (default: NaN)
        dtype: Output data type
        tags: Extra dataset tags
    """
    crs = data.rio.crs
    if crs is None:
        raise ExportError(f"Raster '{data.name}' has no CRS", output_path=str(path))

    values = np.asarray(data.values, dtype=np.float64)
    values = np.where(np.isnan(values), nodata, values)
    height, width = values.shape

    with rasterio.open(
        path,
        'w',
        driver='GTiff',
        height=height,
        width=width,
        count=1,
        dtype=dtype,
        crs=crs,
        transform=data.rio.transform(),
        compress=compression,
        nodata=nodata
    ) as dst:
        dst.write(values.astype(dtype), 1)
        dst.update_tags(
            DATE=datetime.now().isoformat(),
            PRODUCT='LST_AIR_TEMPERATURE',
            **(tags or {})
        )


def write_statistics_csv(path: Union[str, Path], stats: Dict[str, RegionalStatistic]) -> None:
    """Write regional statistics to CSV, one row per raster."""
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['raster', 'mean', 'std_dev', 'min', 'max', 'pixel_count'])
        for name, stat in stats.items():
            writer.writerow([name, stat.mean, stat.std_dev, stat.min, stat.max, stat.pixel_count])


def write_run_summary(path: Union[str, Path], summary: Dict[str, Any]) -> None:
    """Write the run summary to JSON."""
    try:
        with open(path, 'w') as f:
            json.dump(summary, f, indent=2, default=str)
    except OSError as e:
        raise OutputError(f"Could not write run summary: {e}", output_path=str(path),
                          output_type='json') from e


class RasterExporter:
    """Export aggregate rasters as rounded GeoTIFFs.

    Files go to ``<output_dir>/<folder>/<name>.tif``.

    Attributes:
        output_dir: Base output directory
        folder: Export folder below the output directory
        compression: GeoTIFF compression
    """

    def __init__(
        self,
        output_dir: Union[str, Path] = ".",
        folder: str = "exports",
        compression: str = "LZW"
    ):
        self.output_dir = Path(output_dir)
        self.folder = folder
        self.compression = compression
        self.output_files: List[Path] = []

        self.export_dir.mkdir(parents=True, exist_ok=True)

    @property
    def export_dir(self) -> Path:
        return self.output_dir / self.folder

    @staticmethod
    def _target_resolution(crs: CRS, scale: float) -> float:
        return scale / METERS_PER_DEGREE if crs.is_geographic else scale

    def _to_export_grid(self, raster: xr.DataArray, crs: str, scale: float) -> xr.DataArray:
        target = CRS.from_user_input(crs)
        if raster.rio.crs == target and abs(pixel_size_m(raster) - scale) <= 0.01 * scale:
            return raster

        if raster.rio.nodata is None:
            raster = raster.rio.write_nodata(np.nan)
        return raster.rio.reproject(
            target,
            resolution=self._target_resolution(target, scale),
            resampling=Resampling.average
        )

    @staticmethod
    def _crop_to_region(raster: xr.DataArray, region: Region) -> xr.DataArray:
        """Smallest pixel window holding every pixel centred inside the region."""
        inside = region.mask_for(raster).values
        rows = np.flatnonzero(inside.any(axis=1))
        cols = np.flatnonzero(inside.any(axis=0))
        if rows.size == 0:
            raise ExportError(f"Region {region.name} does not cover any pixel of '{raster.name}'")

        window = Window(int(cols[0]), int(rows[0]),
                        int(cols[-1] - cols[0] + 1), int(rows[-1] - rows[0] + 1))
        return raster.rio.isel_window(window)

    def export(
        self,
        raster: xr.DataArray,
        name: str,
        region: Region,
        scale: float = DEFAULT_SCALE,
        crs: str = DEFAULT_EXPORT_CRS,
        max_pixels: float = DEFAULT_MAX_PIXELS,
    ) -> str:
        """Export one raster restricted to a region.

        Values are rounded to whole degrees (halves away from zero) and
        pixels outside the region are written as no-data.

        Args:
            raster: Georeferenced 2-D raster
            name: Export name, also the file stem
            region: Region bounding the export
            scale: Pixel size in metres
            crs: Export CRS
            max_pixels: Maximum number of exported pixels

        Returns:
            Path of the written GeoTIFF

        Raises:
            ExportError: If the export exceeds max_pixels or cannot be written
        """
        filepath = self.export_dir / f"{name}.tif"

        try:
            clipped = region.clip(raster)
            gridded = self._to_export_grid(clipped, crs, scale)
            gridded = self._crop_to_region(gridded, region)
        except (RioXarrayError, RasterioError) as e:
            raise ExportError(f"Could not grid '{name}' for export: {e}", output_name=name,
                              output_path=str(filepath)) from e

        if gridded.size > max_pixels:
            raise ExportError(
                f"Export '{name}' has {gridded.size} pixels (limit {max_pixels:g})",
                output_name=name,
                output_path=str(filepath)
            )

        rounded = round_half_away_from_zero(gridded)
        try:
            write_geotiff(filepath, rounded, compression=self.compression,
                          tags={'NAME': name, 'REGION': region.name})
        except (RasterioError, OSError) as e:
            raise ExportError(f"Could not write '{name}': {e}", output_name=name,
                              output_path=str(filepath)) from e

        self.output_files.append(filepath)
        logger.info(f"Exported {name} -> {filepath}")
        return str(filepath)

    def get_output_files(self) -> List[Path]:
        return self.output_files
