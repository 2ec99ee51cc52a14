"""Output module for regional statistics, maps, charts and exports."""

from .statistics import (
    RegionalStatistic,
    reduce_region,
    regional_statistics,
    regional_time_series,
)
from .visualization import Visualization
from .writer import (
    RasterExporter,
    write_geotiff,
    write_run_summary,
    write_statistics_csv,
)

__all__ = [
    'RegionalStatistic', 'reduce_region', 'regional_statistics', 'regional_time_series',
    'Visualization',
    'RasterExporter', 'write_geotiff', 'write_run_summary', 'write_statistics_csv',
]
