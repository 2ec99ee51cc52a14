"""Visualization module for the air temperature pipeline.

This module provides map layers of the aggregate rasters with the region
outline, time-series charts of regional reductions and the tabular chart
of per-date regional means.
"""

from typing import Dict, Optional, Sequence, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.colors import LinearSegmentedColormap
import geopandas as gpd
import numpy as np
import pandas as pd
import seaborn as sns
import xarray as xr
from pathlib import Path

from ..core.region import Region
from ..utils.exceptions import VisualizationError


class Visualization:
    """Visualization class for air temperature products.

    Attributes:
        output_dir: Directory receiving the PNG (and CSV) files
        figure_dpi: DPI for output figures
        outline_color: Color of the region outline
    """

    LABELS = {
        'air_temperature_mean': 'Mean air temperature (°C)',
        'air_temperature_min': 'Minimum air temperature (°C)',
        'air_temperature_max': 'Maximum air temperature (°C)',
        'LST': 'Land surface temperature (°C)',
    }

    def __init__(
        self,
        output_dir: Union[str, Path] = ".",
        figure_dpi: int = 150,
        outline_color: str = 'red'
    ):
        self.output_dir = Path(output_dir)
        self.figure_dpi = figure_dpi
        self.outline_color = outline_color

        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _get_label(self, variable: Optional[str]) -> str:
        return self.LABELS.get(variable, variable or '')

    def _output_path(self, name: str, extension: str) -> Path:
        return self.output_dir / f"{name}.{extension}"

    def _save_figure(self, fig: plt.Figure, output_path: Path) -> str:
        """Save figure to file and release it.

        Args:
            fig: Matplotlib figure object
            output_path: Output file path

        Returns:
            Output file path
        """
        try:
            fig.savefig(
                output_path,
                dpi=self.figure_dpi,
                bbox_inches='tight',
                facecolor='white'
            )
        except (OSError, ValueError) as e:
            raise VisualizationError(f"Could not save figure {output_path}: {e}") from e
        finally:
            plt.close(fig)
        return str(output_path)

    @staticmethod
    def make_colormap(colors: Sequence[str], name: str = 'palette') -> LinearSegmentedColormap:
        """Continuous colormap interpolating through the palette colors."""
        if len(colors) < 2:
            raise VisualizationError(f"Palette needs at least two colors, got {list(colors)}",
                                     plot_type='map')
        return LinearSegmentedColormap.from_list(name, list(colors))

    def plot_map_layer(
        self,
        raster: xr.DataArray,
        palette: Dict,
        name: str,
        region: Optional[Region] = None,
    ) -> str:
        """Render a raster as a map layer, with the region outline on top.

        Args:
            raster: Georeferenced 2-D raster
            palette: Mapping with 'colors', 'min' and 'max'
            name: Layer name, also the PNG file name
            region: Region whose outline is drawn

        Returns:
            Path of the PNG file
        """
        try:
            colors, vmin, vmax = palette['colors'], palette['min'], palette['max']
        except KeyError as e:
            raise VisualizationError(f"Palette for '{name}' misses {e}", plot_type='map') from e

        left, bottom, right, top = raster.rio.bounds()
        data_masked = np.ma.masked_invalid(np.asarray(raster.values, dtype=np.float64))

        fig, ax = plt.subplots(figsize=(10, 8))
        im = ax.imshow(
            data_masked,
            cmap=self.make_colormap(colors, name),
            vmin=vmin,
            vmax=vmax,
            extent=(left, right, bottom, top),
            origin='upper'
        )

        if region is not None:
            outline = gpd.GeoSeries([region.geometry], crs=region.crs).to_crs(raster.rio.crs)
            outline.boundary.plot(ax=ax, color=self.outline_color, linewidth=1.0)

        cbar = plt.colorbar(im, ax=ax, shrink=0.8)
        cbar.set_label(self._get_label(raster.name))

        ax.set_title(name)
        ax.set_xlabel('x')
        ax.set_ylabel('y')
        plt.tight_layout()

        return self._save_figure(fig, self._output_path(name, 'png'))

    def plot_time_series(
        self,
        df: pd.DataFrame,
        variable: str,
        title: str,
        color: str = 'steelblue',
        name: Optional[str] = None,
    ) -> str:
        """Chart a regional time series against ``time_start``.

        Args:
            df: Frame from regional_time_series
            variable: Column to plot
            title: Chart title
            color: Line color
            name: PNG file name (defaults to the title)

        Returns:
            Path of the PNG file
        """
        if variable not in df.columns or 'time_start' not in df.columns:
            raise VisualizationError(f"Time series frame has no '{variable}' column",
                                     plot_type='time_series')

        sns.set_style('whitegrid')
        fig, ax = plt.subplots(figsize=(12, 6))
        sns.lineplot(data=df, x='time_start', y=variable, ax=ax, color=color,
                     marker='o', errorbar=None)

        ax.xaxis.set_major_formatter(mdates.DateFormatter('%Y-%m-%d'))
        plt.setp(ax.xaxis.get_majorticklabels(), rotation=45, ha='right')

        ax.set_xlabel('Date')
        ax.set_ylabel(self._get_label(variable))
        ax.set_title(title)
        plt.tight_layout()

        return self._save_figure(fig, self._output_path(name or title, 'png'))

    def plot_table_chart(
        self,
        df: pd.DataFrame,
        variable: str,
        name: str,
        decimals: int = 2,
    ) -> Dict[str, str]:
        """Write per-date regional values as a CSV table and a PNG table chart.

        Returns:
            Paths keyed by 'csv' and 'png'
        """
        if variable not in df.columns:
            raise VisualizationError(f"Table frame has no '{variable}' column",
                                     plot_type='table')

        table = df[['date', variable]].copy()
        csv_path = self._output_path(name, 'csv')
        table.to_csv(csv_path, index=False)

        cells = [[str(day), f"{value:.{decimals}f}"] for day, value in table.itertuples(index=False)]
        fig, ax = plt.subplots(figsize=(6, 0.3 * len(cells) + 1.0))
        ax.axis('off')
        if cells:
            ax.table(cellText=cells, colLabels=['date', variable], loc='center')
        ax.set_title(name)

        png_path = self._save_figure(fig, self._output_path(name, 'png'))
        return {'csv': str(csv_path), 'png': png_path}
