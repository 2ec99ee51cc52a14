"""
Logging setup for the LST air temperature pipeline.

All modules log through the loguru ``logger``. This module configures its
sinks (colored console, optional rotating file) and provides the step and
timing helpers used by the pipeline.
"""

import sys
import time
from contextlib import contextmanager
from functools import wraps
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{name}</magenta> | <cyan>{message}</cyan>"
)


class Logger:
    """
    Sink configuration for the package logger.

    Example:
        >>> Logger.setup(level="DEBUG", log_file="logs/lst_airtemp.log")
    """

    level: str = "INFO"

    @staticmethod
    def setup(
        level: str = "INFO",
        log_file: Optional[str] = None,
        console: bool = True,
        rotation: str = "10 MB",
        retention: str = "10 files",
    ) -> None:
        """
        Replace the current sinks.

        Args:
            level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path of a rotating, gzip-compressed log file
            console: Whether to log to stderr
            rotation: Size at which the log file rotates
            retention: Number of rotated files kept
        """
        logger.remove()

        if console:
            logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True,
                       backtrace=True, diagnose=False)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(str(log_path), format=LOG_FORMAT, level=level, rotation=rotation,
                       retention=retention, compression="gz", backtrace=True, diagnose=False)

        Logger.level = level

    @staticmethod
    def configure_for_testing() -> None:
        """Drop every sink so tests run silently."""
        Logger.setup(level="DEBUG", console=False)


@contextmanager
def log_step(name: str):
    """
    Log the start, outcome and duration of a pipeline stage.

    Exceptions are logged with the stage name and re-raised.

    Usage:
        with log_step("Calibrating air temperature"):
            ...
    """
    logger.info(f"Starting: {name}")
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(f"[FAILED] {name}: {e}")
        raise
    logger.info(f"[COMPLETED] {name} ({time.perf_counter() - started:.2f}s)")


def log_execution_time(func):
    """Log the wall time of each call at DEBUG level."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(f"{func.__qualname__} took {time.perf_counter() - started:.4f} seconds")
    return wrapper
