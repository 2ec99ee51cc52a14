"""
LST to air temperature calibration against reanalysis data.

Each LST raster is pulled toward the same-day reanalysis air temperature:

    calibrated = lst + (reanalysis_celsius - lst) * alpha

with alpha in [0, 1]. alpha = 0 keeps the LST, alpha = 1 returns the
reanalysis value. The reanalysis raster is matched on calendar date
through an index built once per series; an LST date without a
reanalysis raster is a hard error, never a no-data pixel.
"""

from datetime import date
from typing import Dict, Union

import numpy as np
import xarray as xr
from loguru import logger

from ..core.constants import (
    AIR_TEMPERATURE_VARIABLES,
    DEFAULT_ALPHA,
    KELVIN_OFFSET,
    UNITS_CELSIUS,
    UNITS_KELVIN,
)
from ..core.raster import RasterObservation, RasterSeries
from ..preprocess.resampling import match_grid
from ..utils.exceptions import (
    ComputationError,
    ConfigurationError,
    DataInputError,
    NoCalibrationMatchError,
)
from ..utils.validation import check_units, validate_alpha

ArrayLike = Union[xr.DataArray, np.ndarray, float]


def calibrate_pixels(lst: ArrayLike, reanalysis_celsius: ArrayLike, alpha: float) -> ArrayLike:
    """
    Linear blend of LST toward the reanalysis temperature.

    Args:
        lst: Land surface temperature (degC)
        reanalysis_celsius: Reanalysis air temperature (degC)
        alpha: Blend weight toward the reanalysis value

    Returns:
        Calibrated air temperature (degC)
    """
    return lst + (reanalysis_celsius - lst) * alpha


class ReanalysisIndex:
    """
    Date → reanalysis observation lookup for one temperature kind.

    Attributes:
        kind: Temperature kind ('mean', 'min' or 'max')
    """

    def __init__(self, series: RasterSeries, kind: str):
        self.kind = kind
        self._by_date: Dict[date, RasterObservation] = {}

        for obs in series:
            if obs.date in self._by_date:
                raise DataInputError(
                    f"Duplicate reanalysis rasters for {obs.date} ({series.variable})",
                    input_type="reanalysis",
                    details={"date": str(obs.date), "kind": kind}
                )
            self._by_date[obs.date] = obs

    def __len__(self) -> int:
        return len(self._by_date)

    def __contains__(self, day: date) -> bool:
        return day in self._by_date

    def lookup(self, day: date) -> RasterObservation:
        """
        Reanalysis observation of one calendar date.

        Raises:
            NoCalibrationMatchError: If the date has no raster
        """
        try:
            return self._by_date[day]
        except KeyError:
            raise NoCalibrationMatchError(day, self.kind) from None


class AirTemperatureCalibrator:
    """
    Calibrate LST rasters to air temperature.

    Attributes:
        alpha: Blend weight toward the reanalysis value

    Example:
        >>> calibrator = AirTemperatureCalibrator(alpha=0.6)
        >>> air_mean = calibrator.calibrate_series(lst, era5_mean, "mean")
    """

    def __init__(self, alpha: float = DEFAULT_ALPHA):
        is_valid, msg = validate_alpha(alpha)
        if not is_valid:
            raise ConfigurationError(msg, config_param="alpha")
        self.alpha = float(alpha)

    def calibrate(self, lst: RasterObservation, index: ReanalysisIndex) -> RasterObservation:
        """
        Calibrate one LST observation.

        Args:
            lst: LST observation in degC
            index: Reanalysis index of the temperature kind

        Returns:
            Lazy observation named 'air_temperature_<kind>' with the LST timestamps

        Raises:
            NoCalibrationMatchError: If the LST date has no reanalysis raster
            ComputationError: If units were not normalised
        """
        is_valid, msg = check_units(lst.units, UNITS_CELSIUS)
        if not is_valid:
            raise ComputationError(f"LST at {lst.date}: {msg}", computation_step="calibration")

        reanalysis = index.lookup(lst.date)
        is_valid, msg = check_units(reanalysis.units, UNITS_KELVIN)
        if not is_valid:
            raise ComputationError(f"Reanalysis at {reanalysis.date}: {msg}",
                                   computation_step="calibration")

        alpha = self.alpha

        def blend(lst_data: xr.DataArray) -> xr.DataArray:
            reanalysis_k = match_grid(reanalysis.load(), lst_data)
            reanalysis_c = np.asarray(reanalysis_k.values, dtype=np.float64) - KELVIN_OFFSET
            return calibrate_pixels(lst_data, reanalysis_c, alpha)

        return lst.map(blend, variable=AIR_TEMPERATURE_VARIABLES[index.kind], units=UNITS_CELSIUS)

    def calibrate_series(
        self,
        lst: RasterSeries,
        reanalysis: RasterSeries,
        kind: str,
    ) -> RasterSeries:
        """
        Calibrate a whole LST series against one reanalysis variable.

        Every LST date is resolved before any pixel is read, so a missing
        reanalysis date fails the run up front.

        Args:
            lst: LST series in degC
            reanalysis: Reanalysis series in Kelvin
            kind: 'mean', 'min' or 'max'

        Returns:
            Lazy calibrated series
        """
        if kind not in AIR_TEMPERATURE_VARIABLES:
            raise ComputationError(f"Unknown temperature kind '{kind}'",
                                   computation_step="calibration")

        index = ReanalysisIndex(reanalysis, kind)
        missing = sorted({d for d in lst.dates() if d not in index})
        if missing:
            error = NoCalibrationMatchError(missing[0], kind)
            error.add_detail("missing_dates", [str(d) for d in missing])
            logger.error(f"{kind}: no reanalysis raster for {len(missing)} LST date(s): "
                         f"{', '.join(str(d) for d in missing)}")
            raise error

        logger.info(f"Calibrating {len(lst)} LST rasters to {AIR_TEMPERATURE_VARIABLES[kind]} "
                    f"(alpha={self.alpha})")
        return lst.map_observations(
            lambda obs: self.calibrate(obs, index),
            variable=AIR_TEMPERATURE_VARIABLES[kind],
        )

    def calibrate_all(self, lst: RasterSeries, reanalysis: Dict[str, RasterSeries]) -> Dict[str, RasterSeries]:
        """Calibrate against every temperature kind in ``reanalysis``."""
        return {kind: self.calibrate_series(lst, series, kind) for kind, series in reanalysis.items()}
