"""Temporal aggregation of calibrated air temperature series."""

from typing import Dict, NamedTuple

import numpy as np
import xarray as xr
from loguru import logger

from ..core.raster import RasterSeries
from ..utils.exceptions import ComputationError


class MonthlyAggregates(NamedTuple):
    """Aggregated rasters of one run."""

    mean: xr.DataArray
    min: xr.DataArray
    max: xr.DataArray

    def as_dict(self) -> Dict[str, xr.DataArray]:
        return {"mean": self.mean, "min": self.min, "max": self.max}


def aggregate(series: RasterSeries, kind: str) -> xr.DataArray:
    """
    Pixelwise reduction of a calibrated series.

    Args:
        series: Calibrated series
        kind: 'mean', 'min' or 'max'

    Returns:
        2-D raster; masked pixels never contribute
    """
    if len(series) == 0:
        raise ComputationError(f"No rasters to aggregate for '{series.variable}'",
                               computation_step="aggregation")
    return series.reduce(kind)


def aggregate_all(calibrated: Dict[str, RasterSeries]) -> MonthlyAggregates:
    """
    Reduce the mean series by mean, the min series by min and the max
    series by max.
    """
    missing = {"mean", "min", "max"} - set(calibrated)
    if missing:
        raise ComputationError(f"Missing calibrated series: {sorted(missing)}",
                               computation_step="aggregation")

    aggregates = MonthlyAggregates(
        mean=aggregate(calibrated["mean"], "mean"),
        min=aggregate(calibrated["min"], "min"),
        max=aggregate(calibrated["max"], "max"),
    )
    for kind, raster in aggregates.as_dict().items():
        logger.info(f"Aggregated {kind}: {float(raster.min(skipna=True)):.2f} .. "
                    f"{float(raster.max(skipna=True)):.2f} degC")
    return aggregates


def round_half_away_from_zero(data: xr.DataArray) -> xr.DataArray:
    """Round to integer degrees, halves away from zero. NaN stays NaN."""
    return np.sign(data) * np.floor(np.abs(data) + 0.5)
