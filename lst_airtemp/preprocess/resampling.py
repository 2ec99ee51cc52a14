"""Grid matching and sampling-scale coarsening for raster data.

This module provides reprojection of one raster onto another's grid and
block aggregation of a raster to a coarser sampling scale in metres.
"""

import warnings

import numpy as np
import xarray as xr
from rasterio.transform import Affine
from rasterio.enums import Resampling

from ..core.constants import METERS_PER_DEGREE
from ..utils.exceptions import ComputationError


def same_grid(a: xr.DataArray, b: xr.DataArray) -> bool:
    """Whether two rasters share CRS, shape and transform."""
    if a.rio.crs != b.rio.crs or a.shape != b.shape:
        return False
    return a.rio.transform().almost_equals(b.rio.transform())


def match_grid(
    data: xr.DataArray,
    reference: xr.DataArray,
    resampling: Resampling = Resampling.bilinear,
) -> xr.DataArray:
    """
    Put a raster on the grid of a reference raster.

    The raster is returned unchanged when it is already on the reference
    grid.

    Args:
        data: Raster to resample
        reference: Raster whose CRS, transform and shape are matched
        resampling: Resampling method

    Returns:
        DataArray on the reference grid
    """
    if data.rio.crs is None or reference.rio.crs is None:
        raise ComputationError(
            "Both rasters need a CRS to match grids",
            computation_step="match_grid"
        )

    if same_grid(data, reference):
        return data

    if data.rio.nodata is None and data.dtype.kind == "f":
        data = data.rio.write_nodata(np.nan)
    return data.rio.reproject_match(reference, resampling=resampling)


def pixel_size_m(data: xr.DataArray) -> float:
    """
    Pixel size of a raster in metres.

    Geographic CRS resolutions are converted at METERS_PER_DEGREE.
    """
    x_res, y_res = data.rio.resolution()
    size = max(abs(x_res), abs(y_res))
    if data.rio.crs is not None and data.rio.crs.is_geographic:
        size *= METERS_PER_DEGREE
    return float(size)


def coarsen_to_scale(data: xr.DataArray, scale: float) -> xr.DataArray:
    """
    Aggregate a raster to a coarser sampling scale.

    Blocks of native pixels are averaged (NaN-skipping); partial blocks
    at the right and bottom edges are dropped. Rasters whose pixels are
    already at least ``scale`` metres are returned unchanged.

    Args:
        data: Georeferenced 2-D raster
        scale: Sampling scale in metres

    Returns:
        Raster at the sampling scale with an updated transform
    """
    if scale <= 0:
        raise ComputationError(f"Sampling scale must be positive, got {scale}",
                               computation_step="coarsen")

    factor = int(round(scale / pixel_size_m(data)))
    if factor <= 1:
        return data

    y_dim, x_dim = data.rio.y_dim, data.rio.x_dim
    if data.sizes[y_dim] < factor or data.sizes[x_dim] < factor:
        return data

    transform = data.rio.transform()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", category=RuntimeWarning)
        coarse = data.coarsen({y_dim: factor, x_dim: factor}, boundary="trim").mean()

    coarse = coarse.rio.write_crs(data.rio.crs)
    return coarse.rio.write_transform(transform * Affine.scale(factor, factor))
