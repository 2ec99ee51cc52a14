"""
Utility modules for the LST air temperature pipeline.

Provides logging, validation, and exception handling utilities.
"""

from .logger import Logger, log_step, log_execution_time
from .validation import (
    validate_alpha,
    check_units,
    check_temperature_range,
    check_for_nodata
)
from .exceptions import (
    AirTempError,
    DataInputError,
    RegionNotFoundError,
    CalibrationError,
    NoCalibrationMatchError,
    ComputationError,
    ReductionBudgetError,
    OutputError,
    ExportError,
    VisualizationError,
    ConfigurationError,
    PipelineError,
    handle_exception,
    create_error_context
)

__all__ = [
    # Logger
    "Logger",
    "log_step",
    "log_execution_time",

    # Validation
    "validate_alpha",
    "check_units",
    "check_temperature_range",
    "check_for_nodata",

    # Exceptions
    "AirTempError",
    "DataInputError",
    "RegionNotFoundError",
    "CalibrationError",
    "NoCalibrationMatchError",
    "ComputationError",
    "ReductionBudgetError",
    "OutputError",
    "ExportError",
    "VisualizationError",
    "ConfigurationError",
    "PipelineError",
    "handle_exception",
    "create_error_context"
]
