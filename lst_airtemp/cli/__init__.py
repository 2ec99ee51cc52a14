"""Command-line interface for the LST air temperature pipeline."""

from .interface import cli

__all__ = ['cli']
