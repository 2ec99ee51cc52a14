"""Region of interest used to clip and reduce rasters."""

from dataclasses import dataclass, field
from typing import Any, Dict

import geopandas as gpd
import numpy as np
import xarray as xr
from rasterio.crs import CRS
from rasterio.features import geometry_mask
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from ..utils.exceptions import ComputationError


@dataclass(frozen=True)
class Region:
    """
    A named polygon boundary.

    Attributes:
        name: Region name (e.g. 'Pantanal')
        geometry: Shapely polygon or multipolygon
        crs: CRS of the geometry (any rasterio-accepted definition)
        attributes: Attribute tag of the source feature
    """

    name: str
    geometry: BaseGeometry
    crs: str = "EPSG:4326"
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False)

    def outline(self) -> BaseGeometry:
        """Boundary line of the region, for display."""
        return self.geometry.boundary

    def geometry_in(self, crs) -> BaseGeometry:
        """
        Geometry expressed in another CRS.

        Args:
            crs: Target CRS

        Returns:
            Reprojected geometry (unchanged when the CRS already matches)
        """
        if CRS.from_user_input(self.crs) == CRS.from_user_input(crs):
            return self.geometry
        series = gpd.GeoSeries([self.geometry], crs=self.crs).to_crs(crs)
        return series.iloc[0]

    def mask_for(self, raster: xr.DataArray) -> xr.DataArray:
        """
        Boolean mask of the pixels whose centre lies inside the region.

        Args:
            raster: Georeferenced 2-D DataArray (rioxarray CRS and transform)

        Returns:
            DataArray aligned to the raster grid, True inside the region

        Raises:
            ComputationError: If the raster has no CRS
        """
        if raster.rio.crs is None:
            raise ComputationError(
                f"Raster '{raster.name}' has no CRS; cannot locate region {self.name}",
                computation_step="region_mask"
            )

        geom = self.geometry_in(raster.rio.crs)
        y_dim, x_dim = raster.rio.y_dim, raster.rio.x_dim
        shape = (raster.sizes[y_dim], raster.sizes[x_dim])

        inside = geometry_mask(
            [mapping(geom)],
            out_shape=shape,
            transform=raster.rio.transform(),
            invert=True,
        )
        return xr.DataArray(
            inside,
            dims=(y_dim, x_dim),
            coords={y_dim: raster[y_dim], x_dim: raster[x_dim]},
        )

    def clip(self, raster: xr.DataArray) -> xr.DataArray:
        """Set pixels outside the region to NaN, keeping the grid."""
        clipped = raster.where(self.mask_for(raster))
        return clipped.astype(np.result_type(clipped.dtype, np.float32))
