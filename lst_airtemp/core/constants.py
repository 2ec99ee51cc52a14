"""Sensor and physical constants for LST air temperature calibration."""

# ============================================================================
# TEMPERATURE CONSTANTS
# ============================================================================

# Kelvin to Celsius offset
KELVIN_OFFSET = 273.15

# ============================================================================
# MODIS MOD11A1 LST
# ============================================================================

# Scale factor of LST_Day_1km / LST_Night_1km digital numbers (K per DN)
MODIS_LST_SCALE = 0.02

# Fill value of LST digital numbers
MODIS_LST_FILL = 0

# QC bit tested by the quality filter
MODIS_QC_BIT = 2

# Band names
LST_DAY_BAND = "LST_Day_1km"
LST_NIGHT_BAND = "LST_Night_1km"
QC_DAY_BAND = "QC_Day"
QC_NIGHT_BAND = "QC_Night"

# (LST band, QC band) per overpass
LST_OVERPASSES = {
    "day": (LST_DAY_BAND, QC_DAY_BAND),
    "night": (LST_NIGHT_BAND, QC_NIGHT_BAND),
}

# Canonical variable name after rescale
LST_VARIABLE = "LST"

# ============================================================================
# ERA5 DAILY REANALYSIS
# ============================================================================

ERA5_VARIABLES = {
    "mean": "mean_2m_air_temperature",
    "min": "minimum_2m_air_temperature",
    "max": "maximum_2m_air_temperature",
}

# Calibrated output variable per temperature kind
AIR_TEMPERATURE_VARIABLES = {
    "mean": "air_temperature_mean",
    "min": "air_temperature_min",
    "max": "air_temperature_max",
}

TEMPERATURE_KINDS = ("mean", "min", "max")

# ============================================================================
# UNITS
# ============================================================================

UNITS_DN = "DN"
UNITS_KELVIN = "K"
UNITS_CELSIUS = "degC"

# ============================================================================
# GEOMETRY
# ============================================================================

# Metres per degree at the equator, used to express geographic pixel sizes
METERS_PER_DEGREE = 111_320.0

# ============================================================================
# CALIBRATION, REDUCTION AND EXPORT DEFAULTS
# ============================================================================

# Blend weight toward the reanalysis temperature
DEFAULT_ALPHA = 0.6

# Sampling scale of reductions and exports (metres)
DEFAULT_SCALE = 1000.0

DEFAULT_MAX_PIXELS = 1e13
DEFAULT_EXPORT_CRS = "EPSG:4326"

__all__ = [
    'KELVIN_OFFSET', 'MODIS_LST_SCALE', 'MODIS_LST_FILL', 'MODIS_QC_BIT',
    'LST_DAY_BAND', 'LST_NIGHT_BAND', 'QC_DAY_BAND', 'QC_NIGHT_BAND',
    'LST_OVERPASSES', 'LST_VARIABLE', 'ERA5_VARIABLES',
    'AIR_TEMPERATURE_VARIABLES', 'TEMPERATURE_KINDS', 'UNITS_DN',
    'UNITS_KELVIN', 'UNITS_CELSIUS', 'METERS_PER_DEGREE', 'DEFAULT_ALPHA',
    'DEFAULT_SCALE', 'DEFAULT_MAX_PIXELS', 'DEFAULT_EXPORT_CRS'
]
