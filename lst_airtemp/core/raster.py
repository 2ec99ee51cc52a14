"""Lazy raster observations and time-ordered raster series."""

import warnings
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Iterator, List, Optional, Union

import numpy as np
import pandas as pd
import xarray as xr

from ..utils.exceptions import ComputationError


TimeLike = Union[str, date, datetime, pd.Timestamp]

REDUCERS = ("mean", "min", "max")


def to_datetime(value: TimeLike) -> datetime:
    """Normalise a timestamp to a naive UTC datetime."""
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC").tz_localize(None)
    return stamp.to_pydatetime()


class RasterObservation:
    """
    A single-band raster tagged with its observation time.

    Pixel data is produced by a loader and only read on the first call to
    :meth:`load`. Transforms never touch the loaded array; :meth:`map`
    returns a new observation whose loader applies the transform to this
    one's data.

    Attributes:
        variable: Field name of the raster (e.g. 'LST', 'air_temperature_mean')
        units: Units label ('DN', 'K' or 'degC')
        time_start: Start of the observation (naive UTC)
        time_end: End of the observation (naive UTC)
        attrs: Free-form metadata (source file, overpass, ...)
    """

    def __init__(
        self,
        loader: Callable[[], xr.DataArray],
        variable: str,
        units: str,
        time_start: TimeLike,
        time_end: Optional[TimeLike] = None,
        attrs: Optional[dict] = None,
    ):
        self._loader = loader
        self.variable = variable
        self.units = units
        self.time_start = to_datetime(time_start)
        self.time_end = (
            to_datetime(time_end) if time_end is not None
            else self.time_start + timedelta(days=1)
        )
        self.attrs = dict(attrs or {})
        self._data: Optional[xr.DataArray] = None

    @classmethod
    def from_array(
        cls,
        data: Union[xr.DataArray, np.ndarray],
        variable: str,
        units: str,
        time_start: TimeLike,
        time_end: Optional[TimeLike] = None,
        attrs: Optional[dict] = None,
    ) -> 'RasterObservation':
        """Wrap an in-memory array as an observation."""
        if not isinstance(data, xr.DataArray):
            data = xr.DataArray(np.asarray(data), dims=['y', 'x'])
        return cls(lambda: data, variable, units, time_start, time_end, attrs)

    @property
    def date(self) -> date:
        """Calendar date of the observation start."""
        return self.time_start.date()

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load(self) -> xr.DataArray:
        """
        Materialize the pixel data.

        Returns:
            DataArray named after the variable, carrying units and
            timestamps as attributes
        """
        if self._data is None:
            data = self._loader()
            if not isinstance(data, xr.DataArray):
                raise ComputationError(
                    f"Loader for '{self.variable}' at {self.time_start} did not return a DataArray",
                    computation_step="load"
                )
            self._data = data.rename(self.variable).assign_attrs(
                units=self.units,
                time_start=self.time_start.isoformat(),
                time_end=self.time_end.isoformat(),
            )
        return self._data

    def map(
        self,
        func: Callable[[xr.DataArray], xr.DataArray],
        variable: Optional[str] = None,
        units: Optional[str] = None,
    ) -> 'RasterObservation':
        """
        Lazily apply a pixel transform.

        Args:
            func: Function of the loaded DataArray returning a new DataArray
            variable: Variable name of the result (defaults to this one)
            units: Units of the result (defaults to this one)

        Returns:
            New observation with the same timestamps
        """
        return RasterObservation(
            lambda: func(self.load()),
            variable or self.variable,
            units or self.units,
            self.time_start,
            self.time_end,
            self.attrs,
        )

    def __repr__(self) -> str:
        state = "loaded" if self.is_loaded else "lazy"
        return (f"RasterObservation(variable={self.variable!r}, units={self.units!r}, "
                f"time_start={self.time_start.isoformat()}, {state})")


class RasterSeries:
    """
    Time-ordered collection of observations sharing one variable.

    Ordering is by ``time_start``; observations with equal start times keep
    their insertion order.
    """

    def __init__(self, observations: Iterable[RasterObservation] = (), variable: Optional[str] = None):
        ordered = sorted(observations, key=lambda obs: obs.time_start)
        self._observations = tuple(ordered)
        self.variable = variable or (ordered[0].variable if ordered else None)

    def __len__(self) -> int:
        return len(self._observations)

    def __iter__(self) -> Iterator[RasterObservation]:
        return iter(self._observations)

    def __getitem__(self, index: int) -> RasterObservation:
        return self._observations[index]

    def __repr__(self) -> str:
        if not self._observations:
            return f"RasterSeries(variable={self.variable!r}, empty)"
        return (f"RasterSeries(variable={self.variable!r}, n={len(self)}, "
                f"{self._observations[0].date}..{self._observations[-1].date})")

    def map(
        self,
        func: Callable[[xr.DataArray], xr.DataArray],
        variable: Optional[str] = None,
        units: Optional[str] = None,
    ) -> 'RasterSeries':
        """Lazily apply a pixel transform to every observation."""
        return RasterSeries(
            (obs.map(func, variable, units) for obs in self._observations),
            variable or self.variable,
        )

    def map_observations(
        self,
        func: Callable[[RasterObservation], RasterObservation],
        variable: Optional[str] = None,
    ) -> 'RasterSeries':
        """Apply a function of whole observations (e.g. date-dependent transforms)."""
        return RasterSeries((func(obs) for obs in self._observations), variable)

    def merge(self, other: 'RasterSeries') -> 'RasterSeries':
        """Concatenate two series and re-sort by time."""
        return RasterSeries(
            list(self._observations) + list(other),
            self.variable or other.variable,
        )

    def filter_date(self, start: TimeLike, end: TimeLike) -> 'RasterSeries':
        """Keep observations with start <= time_start < end."""
        start, end = to_datetime(start), to_datetime(end)
        return RasterSeries(
            (obs for obs in self._observations if start <= obs.time_start < end),
            self.variable,
        )

    def dates(self) -> List[date]:
        return [obs.date for obs in self._observations]

    def stack(self) -> xr.DataArray:
        """
        Materialize every observation into one DataArray with a 'time' dimension.

        Raises:
            ComputationError: If the series is empty or the grids differ
        """
        if not self._observations:
            raise ComputationError(
                f"Cannot stack empty series '{self.variable}'",
                computation_step="stack"
            )

        arrays = [obs.load() for obs in self._observations]
        times = pd.DatetimeIndex([obs.time_start for obs in self._observations], name="time")
        try:
            stacked = xr.concat(
                arrays, dim=times, join="exact", coords="minimal", compat="override",
                combine_attrs="drop",
            )
        except ValueError as e:
            raise ComputationError(
                f"Observations of '{self.variable}' are not on a common grid: {e}",
                computation_step="stack"
            ) from e
        return stacked.rename(self.variable)

    def reduce(self, kind: str) -> xr.DataArray:
        """
        Pixelwise reduction across the whole series.

        Masked (NaN) pixels are skipped; a pixel masked in every
        observation stays NaN.

        Args:
            kind: 'mean', 'min' or 'max'

        Returns:
            2-D DataArray with the series variable name
        """
        if kind not in REDUCERS:
            raise ComputationError(
                f"Unknown reducer '{kind}', expected one of {REDUCERS}",
                computation_step="reduce"
            )

        stacked = self.stack()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", category=RuntimeWarning)
            reduced = getattr(stacked, kind)(dim="time", skipna=True)

        units = self._observations[0].units
        return reduced.rename(self.variable).assign_attrs(units=units, reducer=kind)
