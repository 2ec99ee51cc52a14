"""LST to air temperature processing pipeline."""

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from loguru import logger

from ..calibration import AirTemperatureCalibrator, MonthlyAggregates, aggregate_all
from ..config.settings import (
    BOUNDARY_COLOR,
    CHART_STYLES,
    MAP_LAYERS,
    TABLE_CHART_NAME,
    RunConfig,
)
from ..core.constants import AIR_TEMPERATURE_VARIABLES, TEMPERATURE_KINDS
from ..core.raster import RasterSeries
from ..core.region import Region
from ..io import ModisLSTReader, ReanalysisLoader, select_region
from ..output import (
    RasterExporter,
    RegionalStatistic,
    Visualization,
    regional_statistics,
    regional_time_series,
    write_run_summary,
    write_statistics_csv,
)
from ..preprocess import LSTExtractor
from ..utils.exceptions import AirTempError, PipelineError, create_error_context
from ..utils.logger import log_execution_time, log_step
from ..utils.validation import check_for_nodata, check_temperature_range

SUMMARY_FILE = "run_summary.json"
STATISTICS_FILE = "regional_statistics.csv"


class AirTempPipeline:
    """Calibrate LST to air temperature over one region and window.

    Stages run in order: region selection, LST extraction, reanalysis
    loading, calibration, aggregation, then reporting (statistics, maps,
    charts) and export. The first error stops the run; a summary marked
    'incomplete' is written before the error propagates.
    """

    def __init__(self, config: Optional[RunConfig] = None):
        self.config = (config or RunConfig()).validate()
        self.produced: List[str] = []
        self.results: Dict[str, Any] = {}
        logger.info(f"Initialized AirTempPipeline for {self.config.region_name} "
                    f"{self.config.start_date}..{self.config.end_date} (alpha={self.config.alpha})")

    @property
    def summary_path(self) -> Path:
        return self.config.output_dir / SUMMARY_FILE

    @contextmanager
    def _stage(self, name: str):
        """Log a stage; errors outside the package hierarchy become PipelineError."""
        with log_step(name):
            try:
                yield
            except AirTempError:
                raise
            except Exception as e:
                raise PipelineError(f"{name} failed: {e}", pipeline_stage=name,
                                    step=type(e).__name__) from e

    @log_execution_time
    def run(self) -> Dict[str, Any]:
        """Run the complete pipeline.

        Returns:
            Dictionary with the region, aggregates, statistics, time series
            and the paths of every produced file
        """
        cfg = self.config
        cfg.output_dir.mkdir(parents=True, exist_ok=True)
        started = datetime.now()

        try:
            with self._stage("Selecting region"):
                region = select_region(cfg.boundary_path, cfg.boundary_field, cfg.region_name)
                self.results['region'] = region

            with self._stage("Extracting LST"):
                lst = self.extract_lst(region)

            with self._stage("Loading reanalysis"):
                reanalysis = ReanalysisLoader(cfg.reanalysis_dir).load_all(cfg.start_date, cfg.end_date)

            with self._stage("Calibrating air temperature"):
                calibrated = AirTemperatureCalibrator(cfg.alpha).calibrate_all(lst, reanalysis)

            with self._stage("Aggregating"):
                aggregates = aggregate_all(calibrated)
                self.results['aggregates'] = aggregates
                self._check_aggregates(aggregates, region)

            with self._stage("Computing regional statistics"):
                self.results['statistics'] = self.compute_statistics(aggregates, region)
                self.results['time_series'] = self.compute_time_series(calibrated, region)

            if cfg.make_plots:
                with self._stage("Rendering maps and charts"):
                    self.render(aggregates, region, self.results['time_series'])

            with self._stage("Exporting rasters"):
                self.results['exports'] = self.export(aggregates, region)

        except Exception as e:
            if not isinstance(e, AirTempError):
                logger.error(f"Pipeline execution failed: {e}")
            self._write_summary("incomplete", started, error=e)
            raise

        self._write_summary("complete", started)
        logger.info("Air temperature pipeline completed successfully")
        return self.results

    def extract_lst(self, region: Region) -> RasterSeries:
        cfg = self.config
        extractor = LSTExtractor(ModisLSTReader(cfg.lst_dir))
        lst = extractor.extract(region, cfg.start_date, cfg.end_date)
        if len(lst) == 0:
            raise PipelineError(f"No LST rasters between {cfg.start_date} and {cfg.end_date}",
                                pipeline_stage="extract_lst")
        return lst

    def _check_aggregates(self, aggregates: MonthlyAggregates, region: Region) -> None:
        for kind, raster in aggregates.as_dict().items():
            inside = raster.values[region.mask_for(raster).values]
            for is_valid, msg in (check_for_nodata(inside), check_temperature_range(inside)):
                if not is_valid:
                    logger.warning(f"{AIR_TEMPERATURE_VARIABLES[kind]}: {msg}")

    def compute_statistics(self, aggregates: MonthlyAggregates, region: Region) -> Dict[str, RegionalStatistic]:
        """Regional statistics of every aggregate, written to CSV."""
        cfg = self.config
        stats = {
            AIR_TEMPERATURE_VARIABLES[kind]: regional_statistics(raster, region, cfg.export_scale,
                                                                  cfg.max_pixels)
            for kind, raster in aggregates.as_dict().items()
        }
        path = cfg.output_dir / STATISTICS_FILE
        write_statistics_csv(path, stats)
        self.produced.append(str(path))
        return stats

    def compute_time_series(self, calibrated: Dict[str, RasterSeries], region: Region) -> Dict[str, pd.DataFrame]:
        """Per-date regional reduction of each calibrated series."""
        cfg = self.config
        return {
            kind: regional_time_series(calibrated[kind], region, CHART_STYLES[kind]['reducer'],
                                       cfg.export_scale, cfg.max_pixels)
            for kind in TEMPERATURE_KINDS
        }

    def render(self, aggregates: MonthlyAggregates, region: Region,
               time_series: Dict[str, pd.DataFrame]) -> None:
        cfg = self.config
        label = f"{region.name} ({cfg.period_label})"
        viz = Visualization(cfg.output_dir / "figures", outline_color=BOUNDARY_COLOR)

        for kind, raster in aggregates.as_dict().items():
            layer = MAP_LAYERS[kind]
            self.produced.append(viz.plot_map_layer(raster, layer, f"{layer['name']} - {label}", region))

        for kind in TEMPERATURE_KINDS:
            style = CHART_STYLES[kind]
            self.produced.append(viz.plot_time_series(
                time_series[kind],
                AIR_TEMPERATURE_VARIABLES[kind],
                title=f"{style['title']} - {label}",
                color=style['color'],
            ))

        table = viz.plot_table_chart(time_series['mean'], AIR_TEMPERATURE_VARIABLES['mean'],
                                     TABLE_CHART_NAME)
        self.produced.extend(table.values())

    def export(self, aggregates: MonthlyAggregates, region: Region) -> Dict[str, str]:
        cfg = self.config
        exporter = RasterExporter(cfg.output_dir, cfg.export_folder)
        exports = {}
        for kind in ("mean", "max", "min"):
            path = exporter.export(
                getattr(aggregates, kind),
                cfg.export_name(kind),
                region,
                scale=cfg.export_scale,
                crs=cfg.export_crs,
                max_pixels=cfg.max_pixels,
            )
            exports[kind] = path
            self.produced.append(path)
        return exports

    def _write_summary(self, status: str, started: datetime, error: Optional[Exception] = None) -> None:
        summary = {
            'status': status,
            'started': started.isoformat(),
            'finished': datetime.now().isoformat(),
            'config': self.config.to_dict(),
            'produced': list(self.produced),
        }
        if 'statistics' in self.results:
            summary['statistics'] = {name: stat.to_dict()
                                     for name, stat in self.results['statistics'].items()}
        if error is not None:
            summary['error'] = create_error_context(error, {'region': self.config.region_name})

        write_run_summary(self.summary_path, summary)
        self.results['summary_path'] = str(self.summary_path)
        if status != 'complete':
            logger.error(f"Run {status}; summary written to {self.summary_path}")
