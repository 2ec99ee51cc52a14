"""
Unit tests for IO module of the LST air temperature pipeline.

Tests boundary selection and the daily GeoTIFF readers.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))


class TestBoundaryReader:
    """Test region selection from vector files."""

    def test_select_region(self, boundary_file):
        from lst_airtemp.io.boundary_reader import select_region

        region = select_region(boundary_file, "Bioma", "Pantanal")

        assert region.name == "Pantanal"
        assert region.geometry.geom_type == "Polygon"
        assert region.attributes["code"] == 6
        assert "EPSG" in region.crs or "4326" in region.crs

    def test_list_region_names(self, boundary_file):
        from lst_airtemp.io.boundary_reader import list_region_names
        assert list_region_names(boundary_file, "Bioma") == ["Cerrado", "Pantanal"]

    def test_no_match(self, boundary_file):
        from lst_airtemp.io.boundary_reader import select_region
        from lst_airtemp.utils.exceptions import RegionNotFoundError

        with pytest.raises(RegionNotFoundError) as exc_info:
            select_region(boundary_file, "Bioma", "Amazonia")
        assert exc_info.value.details["match_count"] == 0

    def test_ambiguous_match(self, tmp_path):
        import geopandas as gpd
        from shapely.geometry import box
        from lst_airtemp.io.boundary_reader import select_region
        from lst_airtemp.utils.exceptions import RegionNotFoundError

        path = tmp_path / "dup.geojson"
        gpd.GeoDataFrame(
            {"Bioma": ["Pantanal", "Pantanal"]},
            geometry=[box(0, 0, 1, 1), box(2, 2, 3, 3)],
            crs="EPSG:4326",
        ).to_file(path, driver="GeoJSON")

        with pytest.raises(RegionNotFoundError) as exc_info:
            select_region(path, "Bioma", "Pantanal")
        assert exc_info.value.details["match_count"] == 2

    def test_missing_field(self, boundary_file):
        from lst_airtemp.io.boundary_reader import select_region
        from lst_airtemp.utils.exceptions import DataInputError, RegionNotFoundError

        with pytest.raises(DataInputError) as exc_info:
            select_region(boundary_file, "Biome", "Pantanal")
        assert not isinstance(exc_info.value, RegionNotFoundError)

    def test_missing_file(self, tmp_path):
        from lst_airtemp.io.boundary_reader import read_boundaries
        from lst_airtemp.utils.exceptions import DataInputError

        with pytest.raises(DataInputError):
            read_boundaries(tmp_path / "nope.geojson")


class TestDailyRasterReader:
    """Test date indexing and band selection."""

    def test_missing_directory(self, tmp_path):
        from lst_airtemp.io.raster_reader import DailyRasterReader
        from lst_airtemp.utils.exceptions import DataInputError

        with pytest.raises(DataInputError):
            DailyRasterReader(tmp_path / "missing", "ERA5")

    def test_available_dates(self, scenario_dirs):
        from datetime import datetime
        from lst_airtemp.io.raster_reader import DailyRasterReader

        reader = DailyRasterReader(scenario_dirs["modis"], "MOD11A1")
        dates = reader.available_dates("LST_Day_1km")

        assert sorted(dates) == [datetime(2010, 1, d) for d in (1, 2, 3)]
        assert reader.available_dates("LST_Night_1km") == {}

    def test_select_band_window_end_exclusive(self, scenario_dirs):
        from lst_airtemp.io.raster_reader import DailyRasterReader

        reader = DailyRasterReader(scenario_dirs["era5"], "ERA5")
        series = reader.select_band("mean_2m_air_temperature", "2010-01-02", "2010-01-03", units="K")

        assert [str(d) for d in series.dates()] == ["2010-01-02"]
        obs = series[0]
        assert not obs.is_loaded
        assert obs.attrs["dataset"] == "ERA5"
        assert (obs.time_end - obs.time_start).days == 1

    def test_loaded_raster_georeferenced(self, scenario_dirs):
        from lst_airtemp.io.raster_reader import DailyRasterReader

        reader = DailyRasterReader(scenario_dirs["era5"], "ERA5")
        data = reader.select_band("mean_2m_air_temperature", "2010-01-01", "2010-01-02", units="K")[0].load()

        assert data.dims == ("y", "x")
        assert data.rio.crs.to_epsg() == 4326
        np.testing.assert_allclose(data.values, 303.15)


class TestModisReader:
    """Test MOD11A1 band selection."""

    def test_fill_value_becomes_nan(self, tmp_path, write_tif):
        from lst_airtemp.io.modis_reader import ModisLSTReader

        values = np.full((4, 4), 7500)
        values[2, 3] = 0
        write_tif(tmp_path / "MOD11A1_20100101_LST_Day_1km.tif", values, "uint16")

        data = ModisLSTReader(tmp_path).select_lst("LST_Day_1km", "2010-01-01", "2010-01-02")[0].load()
        assert np.isnan(data.values[2, 3])
        assert data.values[0, 0] == 7500

    def test_select_overpass(self, scenario_dirs):
        from lst_airtemp.io.modis_reader import ModisLSTReader

        lst, qc = ModisLSTReader(scenario_dirs["modis"]).select_overpass("day", "2010-01-01", "2010-01-04")
        assert len(lst) == 3
        assert len(qc) == 3
        assert lst.variable == "LST_Day_1km"
        assert qc[0].load().dtype.kind in ("u", "i")

    def test_unknown_overpass(self, scenario_dirs):
        from lst_airtemp.io.modis_reader import ModisLSTReader
        from lst_airtemp.utils.exceptions import DataInputError

        with pytest.raises(DataInputError):
            ModisLSTReader(scenario_dirs["modis"]).select_overpass("noon", "2010-01-01", "2010-01-04")


class TestReanalysisLoader:
    """Test ERA5 variable selection."""

    @pytest.mark.parametrize("kind, offset", [("mean", 0.0), ("min", -5.0), ("max", 5.0)])
    def test_load_kind(self, scenario_dirs, kind, offset):
        from lst_airtemp.io.era5_reader import ReanalysisLoader

        series = ReanalysisLoader(scenario_dirs["era5"]).load(kind, "2010-01-01", "2010-01-04")
        assert len(series) == 3
        assert all(obs.units == "K" for obs in series)
        np.testing.assert_allclose(series[0].load().values, 30.0 + offset + 273.15)

    def test_unknown_kind(self, scenario_dirs):
        from lst_airtemp.io.era5_reader import ReanalysisLoader
        from lst_airtemp.utils.exceptions import DataInputError

        with pytest.raises(DataInputError):
            ReanalysisLoader(scenario_dirs["era5"]).load("median", "2010-01-01", "2010-01-04")

    def test_load_all(self, scenario_dirs):
        from lst_airtemp.io.era5_reader import ReanalysisLoader

        loaded = ReanalysisLoader(scenario_dirs["era5"]).load_all("2010-01-01", "2010-01-04")
        assert set(loaded) == {"mean", "min", "max"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
