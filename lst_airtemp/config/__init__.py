"""Configuration module for the LST air temperature pipeline."""

from .settings import (
    CHART_STYLES,
    DEFAULT_ALPHA,
    DEFAULT_BOUNDARY_FIELD,
    DEFAULT_REGION,
    MAP_LAYERS,
    RunConfig,
    derive_period_label,
)

__all__ = [
    'CHART_STYLES', 'DEFAULT_ALPHA', 'DEFAULT_BOUNDARY_FIELD', 'DEFAULT_REGION',
    'MAP_LAYERS', 'RunConfig', 'derive_period_label',
]
