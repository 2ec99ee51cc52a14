"""
Pytest configuration and fixtures for LST air temperature pipeline tests.

Provides small georeferenced rasters, GeoTIFF source directories and
boundary files.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# One pixel of the test grid is 1000 m at the equatorial degree length
RES = 1000.0 / 111320.0
ORIGIN_X = -57.0
ORIGIN_Y = -18.0
GRID_SHAPE = (4, 4)

DAYS = ["20100101", "20100102", "20100103"]
SCENARIO_DN = [7500, 7600, 7700]
SCENARIO_ERA5_C = [30.0, 31.0, 32.0]


def grid_transform():
    from rasterio.transform import from_origin
    return from_origin(ORIGIN_X, ORIGIN_Y, RES, RES)


def grid_box(cols: int = GRID_SHAPE[1], rows: int = GRID_SHAPE[0], col0: int = 0, row0: int = 0):
    """Polygon covering a block of pixels of the test grid."""
    from shapely.geometry import box
    return box(
        ORIGIN_X + col0 * RES,
        ORIGIN_Y - (row0 + rows) * RES,
        ORIGIN_X + (col0 + cols) * RES,
        ORIGIN_Y - row0 * RES,
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep loguru output off the console during tests."""
    from lst_airtemp.utils.logger import Logger
    Logger.configure_for_testing()
    yield


@pytest.fixture
def make_raster():
    """Factory for georeferenced 2-D DataArrays on the test grid."""
    import xarray as xr
    import rioxarray  # noqa: F401

    def _make(values, name=None, crs="EPSG:4326"):
        values = np.asarray(values, dtype=np.float64)
        rows, cols = values.shape
        x = ORIGIN_X + RES * (np.arange(cols) + 0.5)
        y = ORIGIN_Y - RES * (np.arange(rows) + 0.5)
        da = xr.DataArray(values, dims=("y", "x"), coords={"y": y, "x": x}, name=name)
        da = da.rio.write_crs(crs)
        return da.rio.write_transform(grid_transform())

    return _make


@pytest.fixture
def make_region():
    """Factory for regions covering a block of the test grid."""
    from lst_airtemp.core.region import Region

    def _make(cols=GRID_SHAPE[1], rows=GRID_SHAPE[0], col0=0, row0=0, name="TestRegion"):
        return Region(name=name, geometry=grid_box(cols, rows, col0, row0))

    return _make


@pytest.fixture
def full_region(make_region):
    """Region covering the whole test grid."""
    return make_region()


@pytest.fixture
def write_tif():
    """Factory writing a single-band GeoTIFF on the test grid."""
    import rasterio

    def _write(path, values, dtype="float32", nodata=None):
        values = np.asarray(values)
        rows, cols = values.shape
        with rasterio.open(
            path, "w", driver="GTiff", height=rows, width=cols, count=1,
            dtype=dtype, crs="EPSG:4326", transform=grid_transform(), nodata=nodata
        ) as dst:
            dst.write(values.astype(dtype), 1)
        return Path(path)

    return _write


@pytest.fixture
def boundary_file(tmp_path):
    """GeoJSON with a 'Bioma' field; 'Pantanal' covers the test grid."""
    import geopandas as gpd
    from shapely.geometry import box

    gdf = gpd.GeoDataFrame(
        {"Bioma": ["Pantanal", "Cerrado"], "code": [6, 3]},
        geometry=[grid_box(), box(-50.0, -15.0, -49.0, -14.0)],
        crs="EPSG:4326",
    )
    path = tmp_path / "biomas.geojson"
    gdf.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def scenario_dirs(tmp_path, write_tif):
    """
    Three days of daytime MOD11A1 and ERA5 GeoTIFFs.

    LST digital numbers are 7500, 7600 and 7700 everywhere with clean QC.
    ERA5 mean is 30, 31 and 32 degC (stored in Kelvin); min and max are
    5 degrees below and above.
    """
    modis_dir = tmp_path / "modis"
    era5_dir = tmp_path / "era5"
    modis_dir.mkdir()
    era5_dir.mkdir()

    for day, dn, t_c in zip(DAYS, SCENARIO_DN, SCENARIO_ERA5_C):
        write_tif(modis_dir / f"MOD11A1_{day}_LST_Day_1km.tif",
                  np.full(GRID_SHAPE, dn), dtype="uint16")
        write_tif(modis_dir / f"MOD11A1_{day}_QC_Day.tif",
                  np.zeros(GRID_SHAPE), dtype="uint8")
        for variable, offset in (("mean_2m_air_temperature", 0.0),
                                 ("minimum_2m_air_temperature", -5.0),
                                 ("maximum_2m_air_temperature", 5.0)):
            write_tif(era5_dir / f"ERA5_{day}_{variable}.tif",
                      np.full(GRID_SHAPE, t_c + offset + 273.15), dtype="float64")

    return {"modis": modis_dir, "era5": era5_dir, "root": tmp_path}


@pytest.fixture
def scenario_config(scenario_dirs, boundary_file):
    """RunConfig over the three scenario days."""
    from lst_airtemp.config.settings import RunConfig

    return RunConfig(
        region_name="Pantanal",
        boundary_path=boundary_file,
        boundary_field="Bioma",
        lst_dir=scenario_dirs["modis"],
        reanalysis_dir=scenario_dirs["era5"],
        output_dir=scenario_dirs["root"] / "output",
        start_date="2010-01-01",
        end_date="2010-01-04",
        alpha=0.6,
        make_plots=False,
    )
