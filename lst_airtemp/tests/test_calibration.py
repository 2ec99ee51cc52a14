"""
Unit tests for calibration module of the LST air temperature pipeline.

Tests the blend formula, date matching, calibration of series and
temporal aggregation.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))


def _series(make_raster, values_by_day, variable, units):
    from lst_airtemp.core.raster import RasterObservation, RasterSeries

    return RasterSeries([
        RasterObservation.from_array(make_raster(np.full((4, 4), value)), variable, units, day)
        for day, value in values_by_day
    ], variable=variable)


class TestCalibratePixels:
    """Test the linear blend."""

    def test_alpha_endpoints(self):
        from lst_airtemp.calibration.air_temperature import calibrate_pixels

        lst = np.array([-10.0, 20.0, 45.0])
        era5 = np.array([5.0, 25.0, 30.0])
        np.testing.assert_allclose(calibrate_pixels(lst, era5, 0.0), lst)
        np.testing.assert_allclose(calibrate_pixels(lst, era5, 1.0), era5)

    def test_bounded_by_inputs(self):
        """Test results lie between lst and reanalysis for alpha in [0, 1]."""
        from lst_airtemp.calibration.air_temperature import calibrate_pixels

        rng = np.random.default_rng(42)
        lst = rng.uniform(-130, 70, 500)
        era5 = rng.uniform(-40, 45, 500)
        for alpha in np.linspace(0, 1, 11):
            result = calibrate_pixels(lst, era5, alpha)
            low = np.minimum(lst, era5) - 1e-9
            high = np.maximum(lst, era5) + 1e-9
            assert np.all((result >= low) & (result <= high))

    def test_scalar(self):
        from lst_airtemp.calibration.air_temperature import calibrate_pixels
        assert calibrate_pixels(20.0, 30.0, 0.6) == pytest.approx(26.0)


class TestReanalysisIndex:
    """Test date index of reanalysis rasters."""

    def test_lookup(self, make_raster):
        from datetime import date
        from lst_airtemp.calibration.air_temperature import ReanalysisIndex

        era5 = _series(make_raster, [("2010-01-01", 300.0), ("2010-01-02", 301.0)],
                       "mean_2m_air_temperature", "K")
        index = ReanalysisIndex(era5, "mean")

        assert len(index) == 2
        assert date(2010, 1, 2) in index
        assert index.lookup(date(2010, 1, 2)).load().values[0, 0] == 301.0

    def test_missing_date(self, make_raster):
        from datetime import date
        from lst_airtemp.calibration.air_temperature import ReanalysisIndex
        from lst_airtemp.utils.exceptions import NoCalibrationMatchError

        index = ReanalysisIndex(_series(make_raster, [("2010-01-01", 300.0)],
                                        "mean_2m_air_temperature", "K"), "mean")
        with pytest.raises(NoCalibrationMatchError) as exc_info:
            index.lookup(date(2010, 1, 5))

        assert exc_info.value.date == date(2010, 1, 5)
        assert exc_info.value.kind == "mean"

    def test_duplicate_dates(self, make_raster):
        from lst_airtemp.calibration.air_temperature import ReanalysisIndex
        from lst_airtemp.utils.exceptions import DataInputError

        era5 = _series(make_raster, [("2010-01-01", 300.0), ("2010-01-01", 301.0)],
                       "mean_2m_air_temperature", "K")
        with pytest.raises(DataInputError):
            ReanalysisIndex(era5, "mean")


class TestAirTemperatureCalibrator:
    """Test calibration of observations and series."""

    def test_invalid_alpha(self):
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator
        from lst_airtemp.utils.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            AirTemperatureCalibrator(alpha=1.5)
        with pytest.raises(ConfigurationError):
            AirTemperatureCalibrator(alpha=-0.1)

    def test_series_all_dates_matched(self, make_raster):
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator

        lst = _series(make_raster, [("2010-01-01", 20.0), ("2010-01-02", 22.0)], "LST", "degC")
        era5 = _series(make_raster, [("2010-01-01", 303.15), ("2010-01-02", 303.15)],
                       "mean_2m_air_temperature", "K")

        calibrated = AirTemperatureCalibrator(0.5).calibrate_series(lst, era5, "mean")

        assert calibrated.variable == "air_temperature_mean"
        assert len(calibrated) == 2
        first = calibrated[0]
        assert first.units == "degC"
        assert first.time_start == lst[0].time_start
        np.testing.assert_allclose(first.load().values, 25.0)
        np.testing.assert_allclose(calibrated[1].load().values, 26.0)

    def test_unmatched_date_fails_before_reading(self, make_raster):
        """Test a missing reanalysis date raises without loading any pixel."""
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator
        from lst_airtemp.utils.exceptions import NoCalibrationMatchError

        lst = _series(make_raster, [("2010-01-01", 20.0), ("2010-01-02", 22.0),
                                    ("2010-01-03", 24.0)], "LST", "degC")
        era5 = _series(make_raster, [("2010-01-01", 300.0), ("2010-01-03", 300.0)],
                       "maximum_2m_air_temperature", "K")

        with pytest.raises(NoCalibrationMatchError) as exc_info:
            AirTemperatureCalibrator().calibrate_series(lst, era5, "max")

        assert str(exc_info.value.date) == "2010-01-02"
        assert exc_info.value.details["missing_dates"] == ["2010-01-02"]
        assert not any(obs.is_loaded for obs in lst)
        assert not any(obs.is_loaded for obs in era5)

    def test_rejects_unnormalised_lst(self, make_raster):
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator
        from lst_airtemp.utils.exceptions import ComputationError

        lst = _series(make_raster, [("2010-01-01", 7500.0)], "LST_Day_1km", "DN")
        era5 = _series(make_raster, [("2010-01-01", 300.0)], "mean_2m_air_temperature", "K")
        with pytest.raises(ComputationError):
            AirTemperatureCalibrator().calibrate_series(lst, era5, "mean")

    def test_rejects_celsius_reanalysis(self, make_raster):
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator
        from lst_airtemp.utils.exceptions import ComputationError

        lst = _series(make_raster, [("2010-01-01", 20.0)], "LST", "degC")
        era5 = _series(make_raster, [("2010-01-01", 30.0)], "mean_2m_air_temperature", "degC")
        with pytest.raises(ComputationError):
            AirTemperatureCalibrator().calibrate_series(lst, era5, "mean")

    def test_reanalysis_on_coarser_grid(self, make_raster):
        """Test a reanalysis raster on another grid is resampled to the LST grid."""
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator
        from lst_airtemp.core.raster import RasterObservation, RasterSeries
        from lst_airtemp.preprocess.resampling import coarsen_to_scale

        lst = _series(make_raster, [("2010-01-01", 20.0)], "LST", "degC")
        coarse = coarsen_to_scale(make_raster(np.full((4, 4), 303.15)), 2000.0)
        era5 = RasterSeries([RasterObservation.from_array(coarse, "mean_2m_air_temperature", "K",
                                                          "2010-01-01")])

        result = AirTemperatureCalibrator(1.0).calibrate_series(lst, era5, "mean")[0].load()
        assert result.shape == (4, 4)
        np.testing.assert_allclose(result.values[1:3, 1:3], 30.0, atol=1e-4)

    def test_calibrate_all(self, make_raster):
        from lst_airtemp.calibration.air_temperature import AirTemperatureCalibrator

        lst = _series(make_raster, [("2010-01-01", 20.0)], "LST", "degC")
        era5 = {
            kind: _series(make_raster, [("2010-01-01", 300.0)], variable, "K")
            for kind, variable in (("mean", "mean_2m_air_temperature"),
                                   ("min", "minimum_2m_air_temperature"),
                                   ("max", "maximum_2m_air_temperature"))
        }
        calibrated = AirTemperatureCalibrator().calibrate_all(lst, era5)
        assert set(calibrated) == {"mean", "min", "max"}
        assert calibrated["min"].variable == "air_temperature_min"


class TestScenario:
    """Three synthetic days from digital numbers to the mean aggregate."""

    def test_three_day_mean(self, make_raster):
        from lst_airtemp.calibration import AirTemperatureCalibrator, aggregate
        from lst_airtemp.preprocess.lst_extraction import rescale_lst

        dns = [7500, 7600, 7700]
        era5_c = [30.0, 31.0, 32.0]
        days = ["2010-01-01", "2010-01-02", "2010-01-03"]

        lst = _series(make_raster, [(d, rescale_lst(dn)) for d, dn in zip(days, dns)], "LST", "degC")
        np.testing.assert_allclose([obs.load().values[0, 0] for obs in lst],
                                   [-123.15, -121.15, -119.15])

        era5 = _series(make_raster, [(d, t + 273.15) for d, t in zip(days, era5_c)],
                       "mean_2m_air_temperature", "K")
        calibrated = AirTemperatureCalibrator(0.6).calibrate_series(lst, era5, "mean")

        expected = [-31.26, -29.86, -28.46]
        for obs, value in zip(calibrated, expected):
            np.testing.assert_allclose(obs.load().values, value, atol=1e-9)

        mean = aggregate(calibrated, "mean")
        np.testing.assert_allclose(mean.values, np.mean(expected), atol=1e-9)
        assert mean.name == "air_temperature_mean"


class TestAggregation:
    """Test temporal reductions."""

    @pytest.mark.parametrize("kind", ["mean", "min", "max"])
    def test_single_element_identity(self, make_raster, kind):
        from lst_airtemp.calibration.aggregation import aggregate
        from lst_airtemp.core.raster import RasterObservation, RasterSeries

        values = np.array([[1.5, np.nan, -3.0, 7.25]] * 4)
        series = RasterSeries([RasterObservation.from_array(make_raster(values), "air_temperature_mean",
                                                            "degC", "2010-01-01")])
        np.testing.assert_array_equal(aggregate(series, kind).values, values)

    def test_aggregate_all(self, make_raster):
        from lst_airtemp.calibration.aggregation import aggregate_all

        calibrated = {
            "mean": _series(make_raster, [("2010-01-01", 20.0), ("2010-01-02", 30.0)],
                            "air_temperature_mean", "degC"),
            "min": _series(make_raster, [("2010-01-01", 15.0), ("2010-01-02", 12.0)],
                           "air_temperature_min", "degC"),
            "max": _series(make_raster, [("2010-01-01", 35.0), ("2010-01-02", 38.0)],
                           "air_temperature_max", "degC"),
        }
        aggregates = aggregate_all(calibrated)

        np.testing.assert_allclose(aggregates.mean.values, 25.0)
        np.testing.assert_allclose(aggregates.min.values, 12.0)
        np.testing.assert_allclose(aggregates.max.values, 38.0)
        assert aggregates.max.rio.crs is not None

    def test_aggregate_all_needs_every_kind(self, make_raster):
        from lst_airtemp.calibration.aggregation import aggregate_all
        from lst_airtemp.utils.exceptions import ComputationError

        with pytest.raises(ComputationError):
            aggregate_all({"mean": _series(make_raster, [("2010-01-01", 20.0)],
                                           "air_temperature_mean", "degC")})

    def test_empty_series(self):
        from lst_airtemp.calibration.aggregation import aggregate
        from lst_airtemp.core.raster import RasterSeries
        from lst_airtemp.utils.exceptions import ComputationError

        with pytest.raises(ComputationError):
            aggregate(RasterSeries([], variable="air_temperature_mean"), "mean")

    def test_round_half_away_from_zero(self):
        import xarray as xr
        from lst_airtemp.calibration.aggregation import round_half_away_from_zero

        data = xr.DataArray(np.array([-2.5, -1.4, 0.5, 1.5, 2.4, np.nan]))
        rounded = round_half_away_from_zero(data).values
        np.testing.assert_array_equal(rounded[:5], [-3.0, -1.0, 1.0, 2.0, 2.0])
        assert np.isnan(rounded[5])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
