"""Regional reductions of air temperature rasters.

Rasters are sampled at a nominal scale (1000 m by default) before being
reduced over the pixels of a region. Reductions refuse to run over more
than ``max_pixels`` region pixels.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd
import xarray as xr
from loguru import logger

from ..core.constants import DEFAULT_MAX_PIXELS, DEFAULT_SCALE
from ..core.raster import RasterSeries
from ..core.region import Region
from ..preprocess.resampling import coarsen_to_scale
from ..utils.exceptions import ComputationError, ReductionBudgetError

REGION_REDUCERS = ("mean", "min", "max", "std_dev")


@dataclass(frozen=True)
class RegionalStatistic:
    """Summary of one raster over a region. Values are NaN when no pixel is valid."""

    mean: float
    std_dev: float
    min: float
    max: float
    pixel_count: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _region_values(
    raster: xr.DataArray,
    region: Region,
    scale: float,
    max_pixels: float,
) -> Tuple[np.ndarray, int]:
    """Valid pixel values of a raster inside a region, at the sampling scale."""
    sampled = coarsen_to_scale(raster, scale)
    inside = region.mask_for(sampled).values

    pixel_count = int(inside.sum())
    if pixel_count > max_pixels:
        raise ReductionBudgetError(
            f"Reduction of '{raster.name}' over {region.name} touches {pixel_count} pixels "
            f"(limit {max_pixels:g})",
            pixel_count=pixel_count,
            max_pixels=max_pixels
        )

    values = np.asarray(sampled.values, dtype=np.float64)[inside]
    return values[~np.isnan(values)], pixel_count


def _reduce(values: np.ndarray, reducer: str) -> float:
    if values.size == 0:
        return float("nan")
    if reducer == "mean":
        return float(values.mean())
    if reducer == "min":
        return float(values.min())
    if reducer == "max":
        return float(values.max())
    # population standard deviation
    return float(values.std(ddof=0))


def reduce_region(
    raster: xr.DataArray,
    region: Region,
    reducer: str = "mean",
    scale: float = DEFAULT_SCALE,
    max_pixels: float = DEFAULT_MAX_PIXELS,
) -> float:
    """
    Reduce a raster over a region to one value.

    Args:
        raster: Georeferenced 2-D raster
        region: Region to reduce over
        reducer: 'mean', 'min', 'max' or 'std_dev'
        scale: Sampling scale in metres
        max_pixels: Maximum number of region pixels

    Returns:
        Reduced value (NaN when the region holds no valid pixel)

    Raises:
        ReductionBudgetError: If the region holds more than max_pixels pixels
    """
    if reducer not in REGION_REDUCERS:
        raise ComputationError(
            f"Unknown reducer '{reducer}', expected one of {REGION_REDUCERS}",
            computation_step="regional_reduction"
        )
    values, _ = _region_values(raster, region, scale, max_pixels)
    return _reduce(values, reducer)


def regional_statistics(
    raster: xr.DataArray,
    region: Region,
    scale: float = DEFAULT_SCALE,
    max_pixels: float = DEFAULT_MAX_PIXELS,
) -> RegionalStatistic:
    """Mean, standard deviation, min and max of a raster over a region."""
    values, _ = _region_values(raster, region, scale, max_pixels)
    stats = RegionalStatistic(
        mean=_reduce(values, "mean"),
        std_dev=_reduce(values, "std_dev"),
        min=_reduce(values, "min"),
        max=_reduce(values, "max"),
        pixel_count=int(values.size),
    )
    logger.info(f"{raster.name} over {region.name}: mean={stats.mean:.2f}, "
                f"std={stats.std_dev:.2f}, min={stats.min:.2f}, max={stats.max:.2f} "
                f"({stats.pixel_count} px)")
    return stats


def regional_time_series(
    series: RasterSeries,
    region: Region,
    reducer: str = "mean",
    scale: float = DEFAULT_SCALE,
    max_pixels: float = DEFAULT_MAX_PIXELS,
) -> pd.DataFrame:
    """
    Reduce every observation of a series over a region.

    Returns:
        DataFrame ordered by time with columns 'date', 'time_start' and the
        series variable
    """
    variable = series.variable or "value"
    rows = []
    for obs in series:
        rows.append({
            "date": obs.date,
            "time_start": pd.Timestamp(obs.time_start),
            variable: reduce_region(obs.load(), region, reducer, scale, max_pixels),
        })

    logger.debug(f"Regional {reducer} series of {variable}: {len(rows)} points")
    return pd.DataFrame(rows, columns=["date", "time_start", variable])
