"""
Custom exceptions for the LST air temperature pipeline.

Provides a hierarchical exception system so that every fatal condition
of a run is reported with the identifier (date, region, output name)
that caused it.
"""


class AirTempError(Exception):
    """
    Base exception for air temperature calibration errors.

    All custom exceptions of the package inherit from this class.
    Provides context information about the error location and details.
    """

    def __init__(self, message: str, details: dict = None, *args):
        super().__init__(message, *args)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def add_detail(self, key: str, value) -> None:
        """
        Add detail information to the exception.

        Args:
            key: Detail key
            value: Detail value
        """
        self.details[key] = value


class DataInputError(AirTempError):
    """
    Exception raised for invalid input data.

    This includes:
    - Missing or unreadable raster or boundary files
    - Missing bands or attribute fields
    - Duplicate observations for one date
    """

    def __init__(self, message: str, input_type: str = None, file_path: str = None,
                 details: dict = None, *args):
        details = dict(details or {})
        if input_type:
            details["input_type"] = input_type
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details, *args)


class RegionNotFoundError(DataInputError):
    """
    Exception raised when a region name does not select exactly one boundary.
    """

    def __init__(self, message: str, region: str = None, match_count: int = None, *args):
        details = {}
        if region:
            details["region"] = region
        if match_count is not None:
            details["match_count"] = match_count
        super().__init__(message, input_type="boundary", details=details, *args)


class CalibrationError(AirTempError):
    """
    Exception raised for calibration failures.

    This includes:
    - Missing reanalysis data for an LST date
    - Unit mismatches between LST and reanalysis rasters
    """

    def __init__(self, message: str, stage: str = None, details: dict = None, *args):
        details = dict(details or {})
        if stage:
            details["stage"] = stage
        super().__init__(message, details, *args)


class NoCalibrationMatchError(CalibrationError):
    """
    Exception raised when no reanalysis raster matches an LST date.
    """

    def __init__(self, date, kind: str = None, *args):
        details = {"date": str(date)}
        if kind:
            details["kind"] = kind
        super().__init__(
            f"No matching calibration data for date {date}",
            stage="date_matching", details=details, *args
        )
        self.date = date
        self.kind = kind


class ComputationError(AirTempError):
    """
    Exception raised for computational errors.

    This includes:
    - Units that were not normalised before calibration
    - Grid mismatches that cannot be resolved
    - Empty series passed to a reduction
    """

    def __init__(self, message: str, computation_step: str = None, details: dict = None, *args):
        details = dict(details or {})
        if computation_step:
            details["step"] = computation_step
        super().__init__(message, details, *args)


class ReductionBudgetError(ComputationError):
    """
    Exception raised when a regional reduction would read too many pixels.
    """

    def __init__(self, message: str, pixel_count: int = None, max_pixels: float = None, *args):
        details = {}
        if pixel_count is not None:
            details["pixel_count"] = pixel_count
        if max_pixels is not None:
            details["max_pixels"] = max_pixels
        super().__init__(message, computation_step="regional_reduction", details=details, *args)


class OutputError(AirTempError):
    """
    Exception raised for output file errors.

    This includes:
    - File write failures
    - Invalid output format
    - Disk space issues
    """

    def __init__(self, message: str, output_path: str = None, output_type: str = None,
                 details: dict = None, *args):
        details = dict(details or {})
        if output_path:
            details["output_path"] = output_path
        if output_type:
            details["output_type"] = output_type
        super().__init__(message, details, *args)


class ExportError(OutputError):
    """
    Exception raised when a raster export is rejected.
    """

    def __init__(self, message: str, output_name: str = None, output_path: str = None, *args):
        details = {}
        if output_name:
            details["output_name"] = output_name
        super().__init__(message, output_path=output_path, output_type="geotiff",
                         details=details, *args)


class VisualizationError(OutputError):
    """
    Exception raised for map or chart rendering failures.
    """

    def __init__(self, message: str, plot_type: str = None, *args):
        details = {}
        if plot_type:
            details["plot_type"] = plot_type
        super().__init__(message, output_type="visualization", details=details, *args)


class ConfigurationError(AirTempError):
    """
    Exception raised for configuration errors.

    This includes:
    - Missing configuration parameters
    - Invalid configuration values
    - Unreadable configuration files
    """

    def __init__(self, message: str, config_param: str = None, *args):
        details = {}
        if config_param:
            details["parameter"] = config_param
        super().__init__(message, details, *args)


class PipelineError(AirTempError):
    """
    Exception raised for pipeline execution errors.
    """

    def __init__(self, message: str, pipeline_stage: str = None, step: str = None, *args):
        details = {}
        if pipeline_stage:
            details["stage"] = pipeline_stage
        if step:
            details["step"] = step
        super().__init__(message, details, *args)


# Error handling utilities

def handle_exception(func):
    """
    Decorator to wrap functions with exception handling.

    Converts exceptions to package-specific exceptions while preserving
    the original error context.

    Usage:
        @handle_exception
        def my_function():
            pass
    """
    from functools import wraps

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AirTempError:
            raise
        except ValueError as e:
            raise ComputationError(
                f"Value error in {func.__name__}: {e}",
                computation_step=func.__name__
            ) from e
        except FileNotFoundError as e:
            raise DataInputError(
                f"File not found: {e}",
                file_path=str(e.filename)
            ) from e
        except PermissionError as e:
            raise OutputError(
                f"Permission denied: {e}",
                output_path=str(e.filename)
            ) from e
        except Exception as e:
            raise AirTempError(
                f"Unexpected error in {func.__name__}: {e}"
            ) from e
    return wrapper


def create_error_context(error: Exception, context: dict) -> dict:
    """
    Create a comprehensive error context dictionary.

    Args:
        error: The exception that occurred
        context: Additional context information

    Returns:
        Dictionary with error details
    """
    context_data = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if hasattr(error, 'details'):
        context_data["error_details"] = error.details

    if context:
        context_data["additional_context"] = context

    return context_data
