"""Configuration settings for the LST air temperature pipeline."""

import json
from dataclasses import asdict, dataclass, fields
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd
import yaml

from ..core.constants import DEFAULT_ALPHA, DEFAULT_EXPORT_CRS, DEFAULT_MAX_PIXELS, DEFAULT_SCALE
from ..utils.exceptions import ConfigurationError
from ..utils.validation import validate_alpha

# ============================================================================
# DATA PATHS
# ============================================================================

BASE_DIR = Path.cwd()

DATA_DIR = BASE_DIR / "data"
LST_DIR = DATA_DIR / "modis"
REANALYSIS_DIR = DATA_DIR / "era5"
BOUNDARY_PATH = DATA_DIR / "boundaries" / "biomas_IBGE_250mil.gpkg"

OUTPUT_DIR = BASE_DIR / "output"

# ============================================================================
# REGION AND WINDOW
# ============================================================================

DEFAULT_REGION = "Pantanal"
DEFAULT_BOUNDARY_FIELD = "Bioma"

DEFAULT_START_DATE = "2010-01-01"
# Exclusive: the default window is the whole of January, 31st included.
# An end of "2010-01-31" stops after January 30th.
DEFAULT_END_DATE = "2010-02-01"

# ============================================================================
# EXPORT
# ============================================================================

DEFAULT_EXPORT_FOLDER = "exports"

EXPORT_PREFIXES = {
    "mean": "MeanAirTemp",
    "max": "MaxAirTemp",
    "min": "MinAirTemp",
}

# ============================================================================
# MAPS AND CHARTS
# ============================================================================

PALETTE_COLORS = ["blue", "green", "yellow", "red"]

MAP_LAYERS = {
    "mean": {"name": "Mean Air Temperature", "colors": PALETTE_COLORS, "min": 25, "max": 35},
    "max": {"name": "Max Air Temperature", "colors": PALETTE_COLORS, "min": 30, "max": 40},
    "min": {"name": "Min Air Temperature", "colors": PALETTE_COLORS, "min": 15, "max": 25},
}

BOUNDARY_COLOR = "red"

CHART_STYLES = {
    "mean": {"title": "Daily Mean Air Temperature", "color": "red", "reducer": "mean"},
    "max": {"title": "Daily Max Air Temperature", "color": "darkred", "reducer": "max"},
    "min": {"title": "Daily Min Air Temperature", "color": "blue", "reducer": "min"},
}

TABLE_CHART_NAME = "Daily Mean Air Temperature Variation"

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

LOGGING = {
    "level": "INFO",
    "file_log": False,
    "log_file": BASE_DIR / "logs" / "lst_airtemp.log"
}


def _to_date(value: Union[str, date], name: str) -> date:
    try:
        return pd.Timestamp(value).date()
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid date for {name}: {value!r}", config_param=name) from e


def load_config_values(path: Union[str, Path]) -> Dict[str, Any]:
    """Raw mapping of a YAML or JSON config file."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}", config_param="config")

    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            values = yaml.safe_load(f) or {}
        elif path.suffix == '.json':
            values = json.load(f)
        else:
            raise ConfigurationError(
                f"Unsupported config format: {path.suffix}. Use .yaml or .json",
                config_param="config"
            )

    if not isinstance(values, dict):
        raise ConfigurationError(f"Config file {path} must hold a mapping", config_param="config")
    return values


def derive_period_label(start: date, end: date) -> str:
    """Label of a window, e.g. 'Jan2010' or 'Jan2010_Mar2010' (end exclusive)."""
    last = end - timedelta(days=1)
    first_label = start.strftime("%b%Y")
    last_label = last.strftime("%b%Y")
    return first_label if first_label == last_label else f"{first_label}_{last_label}"


@dataclass
class RunConfig:
    """
    Parameters of one pipeline run.

    Attributes:
        region_name: Value of the boundary field selecting the region
        boundary_path: Vector boundary dataset
        boundary_field: Attribute holding the region name
        lst_dir: Directory of MODIS LST GeoTIFFs
        reanalysis_dir: Directory of ERA5 GeoTIFFs
        output_dir: Directory receiving maps, charts and exports
        start_date: First day of the window
        end_date: Day after the last day of the window
        alpha: Blend weight toward the reanalysis temperature
        export_scale: Reduction and export scale in metres
        export_crs: CRS of exported rasters
        max_pixels: Pixel budget of reductions and exports
        export_folder: Folder under output_dir receiving exports
        period_label: Label used in export names (derived when None)
        make_plots: Whether to render maps and charts
    """

    region_name: str = DEFAULT_REGION
    boundary_path: Path = BOUNDARY_PATH
    boundary_field: str = DEFAULT_BOUNDARY_FIELD
    lst_dir: Path = LST_DIR
    reanalysis_dir: Path = REANALYSIS_DIR
    output_dir: Path = OUTPUT_DIR
    start_date: date = _to_date(DEFAULT_START_DATE, "start_date")
    end_date: date = _to_date(DEFAULT_END_DATE, "end_date")
    alpha: float = DEFAULT_ALPHA
    export_scale: float = DEFAULT_SCALE
    export_crs: str = DEFAULT_EXPORT_CRS
    max_pixels: float = DEFAULT_MAX_PIXELS
    export_folder: str = DEFAULT_EXPORT_FOLDER
    period_label: Optional[str] = None
    make_plots: bool = True

    def __post_init__(self):
        for name in ("boundary_path", "lst_dir", "reanalysis_dir", "output_dir"):
            setattr(self, name, Path(getattr(self, name)))
        self.start_date = _to_date(self.start_date, "start_date")
        self.end_date = _to_date(self.end_date, "end_date")
        if self.period_label is None and self.start_date < self.end_date:
            self.period_label = derive_period_label(self.start_date, self.end_date)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'RunConfig':
        """Build a config from a mapping; None values keep the defaults."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}",
                                     config_param=unknown[0])
        return cls(**{k: v for k, v in values.items() if v is not None})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'RunConfig':
        """Load a config from a YAML or JSON file."""
        return cls.from_dict(load_config_values(path))

    def validate(self) -> 'RunConfig':
        """
        Check parameter ranges.

        Raises:
            ConfigurationError: On the first invalid parameter
        """
        is_valid, msg = validate_alpha(self.alpha)
        if not is_valid:
            raise ConfigurationError(msg, config_param="alpha")
        if self.start_date >= self.end_date:
            raise ConfigurationError(
                f"start_date {self.start_date} must be before end_date {self.end_date}",
                config_param="start_date"
            )
        if self.export_scale <= 0:
            raise ConfigurationError(f"export_scale must be positive, got {self.export_scale}",
                                     config_param="export_scale")
        if self.max_pixels <= 0:
            raise ConfigurationError(f"max_pixels must be positive, got {self.max_pixels}",
                                     config_param="max_pixels")
        if not self.region_name:
            raise ConfigurationError("region_name is empty", config_param="region_name")
        return self

    def export_name(self, kind: str) -> str:
        """Export name of an aggregate, e.g. 'MeanAirTemp_Pantanal_Jan2010'."""
        region = self.region_name.replace(" ", "_")
        return f"{EXPORT_PREFIXES[kind]}_{region}_{self.period_label}"

    def to_dict(self) -> Dict[str, Any]:
        values = asdict(self)
        for key, value in values.items():
            if isinstance(value, (Path, date)):
                values[key] = str(value)
        return values
