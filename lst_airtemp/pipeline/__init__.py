"""Pipeline module for the LST air temperature calibration."""

from .airtemp_pipeline import AirTempPipeline

__all__ = ['AirTempPipeline']
