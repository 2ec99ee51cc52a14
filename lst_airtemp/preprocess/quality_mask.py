"""Quality filtering of MODIS LST using the per-pixel QC flags.

A pixel is kept iff the tested QC bit is zero. Rejected pixels are set
to NaN (masked, not removed), so every downstream reduction skips them.
"""

from typing import Union

import numpy as np
import xarray as xr

from ..core.constants import MODIS_QC_BIT, QC_DAY_BAND, QC_NIGHT_BAND
from ..core.raster import RasterObservation, RasterSeries
from ..utils.exceptions import DataInputError


class QualityFilterError(DataInputError):
    """Exception raised when QC data cannot be applied."""

    def __init__(self, message: str, qc_band: str = None):
        super().__init__(message, input_type="quality_flags",
                         details={"qc_band": qc_band} if qc_band else None)


class QualityFilter:
    """
    Bit-test quality filter for one QC band.

    Attributes:
        qc_band: Name of the QC band ('QC_Day' or 'QC_Night')
        bit: Bit position tested (2 by default)

    Example:
        >>> day_filter = QualityFilter(QC_DAY_BAND)
        >>> mask = day_filter.create_mask(qc)      # True = excluded
        >>> clean = day_filter.apply(lst_obs, qc_obs)
    """

    def __init__(self, qc_band: str, bit: int = MODIS_QC_BIT):
        if bit < 0:
            raise ValueError(f"QC bit must be non-negative, got {bit}")
        self.qc_band = qc_band
        self.bit = bit

    def __repr__(self) -> str:
        return f"QualityFilter(qc_band={self.qc_band!r}, bit={self.bit})"

    def create_mask(self, qc: Union[xr.DataArray, np.ndarray]) -> xr.DataArray:
        """
        Create the exclusion mask from a QC raster.

        Args:
            qc: QC flag raster

        Returns:
            Boolean DataArray where True = low quality (excluded)
        """
        if not isinstance(qc, xr.DataArray):
            qc = xr.DataArray(np.asarray(qc), dims=['y', 'x'])

        values = qc.values
        if values.dtype.kind not in ('u', 'i'):
            if np.isnan(values).any():
                raise QualityFilterError(f"{self.qc_band} contains NaN flags", self.qc_band)
            values = values.astype(np.uint32)

        excluded = ((values >> self.bit) & 1) == 1
        return qc.copy(data=excluded).rename(f"{self.qc_band}_mask")

    def apply(self, lst: RasterObservation, qc: RasterObservation) -> RasterObservation:
        """
        Mask low-quality pixels of an LST observation.

        Args:
            lst: LST observation
            qc: QC observation of the same date

        Returns:
            New lazy observation with excluded pixels set to NaN
        """
        if lst.date != qc.date:
            raise QualityFilterError(
                f"QC date {qc.date} does not match LST date {lst.date}", self.qc_band
            )

        def masked(data: xr.DataArray) -> xr.DataArray:
            mask = self.create_mask(qc.load())
            if mask.shape != data.shape:
                raise QualityFilterError(
                    f"{self.qc_band} shape {mask.shape} doesn't match LST shape {data.shape}",
                    self.qc_band
                )
            return data.where(~mask.values)

        return lst.map(masked)

    def apply_series(self, lst: RasterSeries, qc: RasterSeries) -> RasterSeries:
        """
        Pair LST and QC observations by date and mask each LST raster.

        Raises:
            QualityFilterError: If an LST date has no QC raster
        """
        qc_by_date = {obs.date: obs for obs in qc}
        filtered = []
        for obs in lst:
            if obs.date not in qc_by_date:
                raise QualityFilterError(f"No {self.qc_band} raster for {obs.date}", self.qc_band)
            filtered.append(self.apply(obs, qc_by_date[obs.date]))
        return RasterSeries(filtered, lst.variable)


def day_filter(bit: int = MODIS_QC_BIT) -> QualityFilter:
    """Quality filter for the daytime overpass."""
    return QualityFilter(QC_DAY_BAND, bit)


def night_filter(bit: int = MODIS_QC_BIT) -> QualityFilter:
    """Quality filter for the night-time overpass."""
    return QualityFilter(QC_NIGHT_BAND, bit)
