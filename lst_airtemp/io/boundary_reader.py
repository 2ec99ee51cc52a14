"""Region selection from a vector boundary dataset."""

from pathlib import Path
from typing import List, Union

import geopandas as gpd
from loguru import logger

from ..core.region import Region
from ..utils.exceptions import DataInputError, RegionNotFoundError


DEFAULT_CRS = "EPSG:4326"


def read_boundaries(path: Union[str, Path]) -> gpd.GeoDataFrame:
    """
    Read a boundary dataset (GeoJSON, Shapefile, GeoPackage, ...).

    Args:
        path: Path to the vector file

    Returns:
        GeoDataFrame; a dataset without CRS is assumed to be EPSG:4326
    """
    path = Path(path)
    if not path.exists():
        raise DataInputError(f"Boundary dataset not found: {path}",
                             input_type="boundary", file_path=str(path))

    gdf = gpd.read_file(path)
    if gdf.crs is None:
        logger.warning(f"Boundary dataset {path.name} has no CRS, assuming {DEFAULT_CRS}")
        gdf = gdf.set_crs(DEFAULT_CRS)
    return gdf


def list_region_names(path: Union[str, Path], field: str) -> List[str]:
    """Distinct values of the filter field, sorted."""
    gdf = read_boundaries(path)
    if field not in gdf.columns:
        raise DataInputError(f"Field '{field}' not found in boundary dataset",
                             input_type="boundary", file_path=str(path))
    return sorted(str(v) for v in gdf[field].dropna().unique())


def select_region(path: Union[str, Path], field: str, value: str) -> Region:
    """
    Resolve a region by attribute equality.

    Args:
        path: Boundary dataset path
        field: Attribute field to filter on (e.g. 'Bioma')
        value: Value the field must equal (e.g. 'Pantanal')

    Returns:
        The single matching Region

    Raises:
        RegionNotFoundError: If zero or several features match
        DataInputError: If the field does not exist
    """
    gdf = read_boundaries(path)
    if field not in gdf.columns:
        raise DataInputError(f"Field '{field}' not found in boundary dataset",
                             input_type="boundary", file_path=str(path))

    matches = gdf[gdf[field] == value]
    if len(matches) == 0:
        raise RegionNotFoundError(
            f"No boundary with {field} == '{value}' in {Path(path).name}",
            region=value, match_count=0
        )
    if len(matches) > 1:
        raise RegionNotFoundError(
            f"Region name '{value}' is ambiguous: {len(matches)} boundaries with {field} == '{value}'",
            region=value, match_count=len(matches)
        )

    feature = matches.iloc[0]
    attributes = {k: v for k, v in feature.items() if k != matches.geometry.name}
    region = Region(
        name=str(value),
        geometry=feature[matches.geometry.name],
        crs=matches.crs.to_string(),
        attributes=attributes,
    )
    logger.info(f"Selected region {region.name} (bounds={tuple(round(b, 4) for b in region.geometry.bounds)})")
    return region
