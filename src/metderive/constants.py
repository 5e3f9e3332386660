"""
Physical constants, formula coefficients and configuration defaults for
derived meteorological quantities.

This module provides:
1. Temperature conversion constants
2. Saturation vapour pressure coefficients
3. Heat index and WBGT regression coefficients
4. Tags for per-record formula selection
5. Processing configuration defaults
"""

from enum import Enum, IntEnum

# Temperature conversions
T_ZERO_C = 273.15  # 0°C in Kelvin
F_FREEZING = 32.0  # 0°C in Fahrenheit
F_PER_C = 9.0 / 5.0  # Fahrenheit degrees per Celsius degree

# Saturation vapour pressure, Daly et al. (2015) form (kPa)
SVP_DALY = {
    "a": 0.611,
    "b": 17.3,
    "c": 273.3,
}

# Saturation vapour pressure, Tetens form used for RHx/RHave (kPa)
SVP_TETENS = {
    "a": 0.6111,
    "b": 17.3,
    "c": 237.3,
}

# Vapour pressure from dewpoint, Bolton (1980) form (hPa)
VP_BOLTON = {
    "a": 6.112,
    "b": 17.67,
    "c": 243.5,
}

EPSILON = 0.622  # Ratio of gas constants Rd/Rv (dimensionless)
ONE_MINUS_EPSILON = 0.378
RH_PRESSURE_FACTOR = 0.263  # Coefficient of p*q in the mixing-ratio RH identity
RH_KELVIN_OFFSET = 29.65  # T - 29.65 equals T_C + 243.5 for T in Kelvin

PA_PER_HPA = 100.0

# Heat index (NWS, °F)
STEADMAN_THRESHOLD_F = 80.0

ROTHFUSZ_COEFFICIENTS = (
    -42.379,
    2.04901523,
    10.14333127,
    -0.22475541,
    -0.00683783,
    -0.05481717,
    0.00122874,
    0.00085282,
    -0.00000199,
)

# Adjustment windows: (tf_low, tf_high, rh_limit)
LOW_HUMIDITY_WINDOW = (80.0, 112.0, 13.0)
HIGH_HUMIDITY_WINDOW = (80.0, 87.0, 85.0)

# WBGT from heat index, Tuholske et al. (2021)
WBGT_COEFFICIENTS = (-0.0034, 0.96, -34.0)

HOURS_PER_DAY = 24


class HeatIndexFormula(IntEnum):
    """Heat index regression chosen for a record"""

    STEADMAN = 1
    ROTHFUSZ = 2


class HeatIndexAdjustment(IntEnum):
    """Empirical heat index correction applied to a record"""

    NONE = 0
    LOW_HUMIDITY = 1
    HIGH_HUMIDITY = 2


class RangeTest(str, Enum):
    """
    How the Fahrenheit temperature window of the heat index adjustments is
    tested.

    CONTINUOUS accepts any real ``tf`` inside the closed interval.
    INTEGER additionally requires ``tf`` to be a whole number of degrees, the
    behaviour of a membership test against an integer range.
    """

    CONTINUOUS = "continuous"
    INTEGER = "integer"


# Processing parameters
class ProcessingConfig:
    """Default configuration for the DataFrame processor"""

    RANGE_TEST = RangeTest.CONTINUOUS

    COLUMNS = {
        "tmax": "tmax",
        "tmin": "tmin",
        "rh": "rh",
        "tdew": "tdew",
        "pressure": "pressure",
        "ta": "ta",
    }

    HOURS_PER_DAY = HOURS_PER_DAY
