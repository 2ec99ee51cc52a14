"""
Validation utilities for the LST air temperature pipeline.

Provides validation functions for parameter checking, value range checks
and data quality reporting. They return ``(is_valid, message)`` and never
alter data.
"""

from typing import Union, Tuple
import numpy as np
import xarray as xr


# Plausible near-surface air temperature (degC)
AIR_TEMPERATURE_RANGE = (-90.0, 60.0)

KNOWN_UNITS = ("DN", "K", "degC")


def _values(data: Union[np.ndarray, xr.DataArray]) -> np.ndarray:
    if isinstance(data, xr.DataArray):
        return np.asarray(data.values)
    return np.asarray(data)


def validate_alpha(alpha: float) -> Tuple[bool, str]:
    """
    Validate the blend coefficient.

    Args:
        alpha: Weight toward the reanalysis value

    Returns:
        Tuple of (is_valid, message)
    """
    try:
        alpha = float(alpha)
    except (TypeError, ValueError):
        return False, f"Alpha must be numeric, got {alpha!r}"

    if not np.isfinite(alpha):
        return False, "Alpha must be a finite number"

    if not 0.0 <= alpha <= 1.0:
        return False, f"Alpha must lie in [0, 1], got {alpha}"

    return True, f"Valid alpha: {alpha}"


def check_units(units: str, expected: str) -> Tuple[bool, str]:
    """
    Check a raster's units label against the expected one.

    Args:
        units: Units label carried by the observation
        expected: Expected units label

    Returns:
        Tuple of (is_valid, message)
    """
    if units not in KNOWN_UNITS:
        return False, f"Unknown units '{units}', expected one of {KNOWN_UNITS}"
    if units != expected:
        return False, f"Units are '{units}', expected '{expected}'"
    return True, f"Units OK: {units}"


def check_temperature_range(
    temperature: Union[np.ndarray, xr.DataArray],
    valid_range: Tuple[float, float] = AIR_TEMPERATURE_RANGE
) -> Tuple[bool, str]:
    """
    Check air temperature values are physically plausible.

    Args:
        temperature: Temperature array in degC
        valid_range: Inclusive (min, max) range

    Returns:
        Tuple of (is_valid, message)
    """
    values = _values(temperature)
    valid = values[np.isfinite(values)]

    if valid.size == 0:
        return False, "No valid temperature pixels"

    t_min, t_max = float(valid.min()), float(valid.max())
    if t_min < valid_range[0] or t_max > valid_range[1]:
        return False, (f"Temperature range [{t_min:.2f}, {t_max:.2f}] degC outside "
                       f"plausible range {valid_range}")

    return True, f"Temperature range [{t_min:.2f}, {t_max:.2f}] degC"


def check_for_nodata(
    data: Union[np.ndarray, xr.DataArray],
    max_nodata_ratio: float = 0.5
) -> Tuple[bool, str]:
    """
    Check the share of NaN (masked) pixels.

    Args:
        data: Raster values
        max_nodata_ratio: Maximum acceptable share of masked pixels

    Returns:
        Tuple of (is_valid, message)
    """
    values = _values(data)
    if values.size == 0:
        return False, "Empty raster"

    ratio = float(np.isnan(values).sum()) / values.size
    if ratio > max_nodata_ratio:
        return False, f"Masked pixel ratio {ratio:.1%} exceeds {max_nodata_ratio:.1%}"

    return True, f"Masked pixel ratio {ratio:.1%}"
