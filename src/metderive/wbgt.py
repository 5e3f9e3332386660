"""
Maximum wet-bulb globe temperature from daily maximum temperature and
relative humidity.

The heat index is computed in Fahrenheit following the NWS procedure: the
simple Steadman estimate is used when it is cool enough, otherwise the
Rothfusz regression, and one of two empirical adjustments may be applied.
WBGT is then obtained from the adjusted heat index by a quadratic regression.

References:
    Rothfusz (1990) The heat index equation, NWS Technical Attachment SR 90-23
    Steadman (1979) The assessment of sultriness, J. Appl. Meteor. 18
    Tuholske et al. (2021) Global urban population exposure to extreme heat,
    PNAS 118
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple, Union
import numpy as np
import pandas as pd

from .constants import (
    HIGH_HUMIDITY_WINDOW,
    LOW_HUMIDITY_WINDOW,
    ROTHFUSZ_COEFFICIENTS,
    STEADMAN_THRESHOLD_F,
    WBGT_COEFFICIENTS,
    HeatIndexAdjustment,
    HeatIndexFormula,
    RangeTest,
)
from .utils import (
    as_float_array,
    celsius_to_fahrenheit,
    check_same_shape,
    count_non_finite,
    scalar_or_array,
)

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["tmax", "rh", "hi", "wbgt"]


@dataclass(frozen=True)
class WBGTRecord:
    """Heat index and WBGT for a single observation"""
    tmax: float  # Daily maximum temperature (°C)
    rh: float  # Relative humidity (%)
    hi: float  # Adjusted heat index (°F)
    wbgt: float  # Maximum wet-bulb globe temperature (°C)
    formula: HeatIndexFormula  # Regression used for the heat index
    adjustment: HeatIndexAdjustment  # Correction applied to the heat index


def steadman_heat_index(tf: np.ndarray, rh: np.ndarray) -> np.ndarray:
    """Simple Steadman heat index (°F) from temperature (°F) and RH (%)."""
    return 0.5 * (tf + 61.0 + (tf - 68.0) * 1.2) + 0.094 * rh


def rothfusz_heat_index(tf: np.ndarray, rh: np.ndarray) -> np.ndarray:
    """
    Rothfusz 9-term regression of the heat index.

    Args:
        tf: Air temperature (°F)
        rh: Relative humidity (%)

    Returns:
        Heat index (°F)
    """
    c1, c2, c3, c4, c5, c6, c7, c8, c9 = ROTHFUSZ_COEFFICIENTS
    return (c1
            + c2 * tf
            + c3 * rh
            + c4 * tf * rh
            + c5 * tf ** 2
            + c6 * rh ** 2
            + c7 * tf ** 2 * rh
            + c8 * tf * rh ** 2
            + c9 * tf ** 2 * rh ** 2)


def select_heat_index_formula(tf: np.ndarray, rh: np.ndarray) -> np.ndarray:
    """
    Choose the heat index regression for each record.

    Steadman is kept when the average of the Steadman estimate and the
    temperature is below 80°F; otherwise Rothfusz is used.

    Args:
        tf: Air temperature (°F)
        rh: Relative humidity (%)

    Returns:
        Integer array of HeatIndexFormula codes
    """
    tf = as_float_array(tf)
    rh = as_float_array(rh)
    average = (steadman_heat_index(tf, rh) + tf) / 2.0
    return np.where(
        average < STEADMAN_THRESHOLD_F,
        int(HeatIndexFormula.STEADMAN),
        int(HeatIndexFormula.ROTHFUSZ),
    )


def _in_window(
    tf: np.ndarray,
    low: float,
    high: float,
    range_test: RangeTest
) -> np.ndarray:
    inside = (tf >= low) & (tf <= high)
    if range_test is RangeTest.INTEGER:
        with np.errstate(invalid="ignore"):
            inside &= tf == np.floor(tf)
    return inside


def select_adjustment(
    tf: np.ndarray,
    rh: np.ndarray,
    range_test: Union[str, RangeTest] = RangeTest.CONTINUOUS
) -> np.ndarray:
    """
    Choose the empirical heat index correction for each record.

    The low-humidity window is tested before the high-humidity window and
    the first match wins, so at most one correction applies.

    Args:
        tf: Air temperature (°F)
        rh: Relative humidity (%)
        range_test: How the temperature window is tested

    Returns:
        Integer array of HeatIndexAdjustment codes
    """
    range_test = RangeTest(range_test)
    tf = as_float_array(tf)
    rh = as_float_array(rh)

    low_tf, high_tf, low_rh = LOW_HUMIDITY_WINDOW
    low = _in_window(tf, low_tf, high_tf, range_test) & (rh < low_rh)

    low_tf, high_tf, high_rh = HIGH_HUMIDITY_WINDOW
    high = _in_window(tf, low_tf, high_tf, range_test) & (rh > high_rh)

    return np.select(
        [low, high],
        [int(HeatIndexAdjustment.LOW_HUMIDITY), int(HeatIndexAdjustment.HIGH_HUMIDITY)],
        default=int(HeatIndexAdjustment.NONE),
    )


def heat_index_adjustment(
    tf: np.ndarray,
    rh: np.ndarray,
    adjustment: np.ndarray
) -> np.ndarray:
    """
    Additive correction to the heat index for the selected adjustment.

    Args:
        tf: Air temperature (°F)
        rh: Relative humidity (%)
        adjustment: HeatIndexAdjustment codes, as from ``select_adjustment``

    Returns:
        Correction (°F): negative for LOW_HUMIDITY, positive for
        HIGH_HUMIDITY and zero for NONE
    """
    tf = as_float_array(tf)
    rh = as_float_array(rh)
    adjustment = np.asarray(adjustment)

    with np.errstate(invalid="ignore"):
        low_term = -((13.0 - rh) / 4.0) * np.sqrt((17.0 - np.abs(tf - 95.0)) / 17.0)
    high_term = ((rh - 85.0) / 10.0) * ((87.0 - tf) / 5.0)

    return np.select(
        [adjustment == HeatIndexAdjustment.LOW_HUMIDITY,
         adjustment == HeatIndexAdjustment.HIGH_HUMIDITY],
        [low_term, high_term],
        default=0.0,
    )


def _heat_index_components(
    tf: np.ndarray,
    rh: np.ndarray,
    range_test: RangeTest
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    formula = select_heat_index_formula(tf, rh)
    with np.errstate(invalid="ignore", over="ignore"):
        hi = np.where(
            formula == HeatIndexFormula.STEADMAN,
            steadman_heat_index(tf, rh),
            rothfusz_heat_index(tf, rh),
        )
    adjustment = select_adjustment(tf, rh, range_test)
    return hi + heat_index_adjustment(tf, rh, adjustment), formula, adjustment


def heat_index(
    tmax: Union[float, np.ndarray],
    rh: Union[float, np.ndarray],
    range_test: Union[str, RangeTest] = RangeTest.CONTINUOUS
) -> Union[float, np.ndarray]:
    """
    Adjusted heat index from temperature in Celsius.

    Args:
        tmax: Daily maximum temperature (°C)
        rh: Relative humidity (%), same shape as ``tmax``
        range_test: How the adjustment temperature windows are tested

    Returns:
        Heat index (°F)
    """
    tmax = as_float_array(tmax)
    rh = as_float_array(rh)
    check_same_shape(tmax=tmax, rh=rh)

    hi, _, _ = _heat_index_components(
        celsius_to_fahrenheit(tmax), rh, RangeTest(range_test)
    )
    return scalar_or_array(hi)


def wbgt_from_heat_index(hi: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """WBGT from the adjusted heat index (°F), Tuholske et al. (2021)."""
    a, b, c = WBGT_COEFFICIENTS
    hi = as_float_array(hi)
    with np.errstate(invalid="ignore", over="ignore"):
        return scalar_or_array(a * hi ** 2 + b * hi + c)


def calculate_wbgt(
    tmax: Union[float, np.ndarray],
    rh: Union[float, np.ndarray],
    range_test: Union[str, RangeTest] = RangeTest.CONTINUOUS
) -> Dict[str, np.ndarray]:
    """
    Heat index and WBGT for every record, keeping the input shape.

    Works identically on scalars, sequences and 2-D grids.

    Args:
        tmax: Daily maximum temperature (°C)
        rh: Relative humidity (%), same shape as ``tmax``
        range_test: How the adjustment temperature windows are tested

    Returns:
        Dictionary containing arrays:
        - tmax: originating temperature (°C)
        - rh: originating relative humidity (%)
        - hi: adjusted heat index (°F)
        - wbgt: WBGT (°C)
        - formula: HeatIndexFormula codes
        - adjustment: HeatIndexAdjustment codes

    Raises:
        ValueError: If ``tmax`` and ``rh`` differ in shape or ``range_test``
            is unknown
    """
    range_test = RangeTest(range_test)
    tmax = as_float_array(tmax)
    rh = as_float_array(rh)
    check_same_shape(tmax=tmax, rh=rh)

    hi, formula, adjustment = _heat_index_components(
        celsius_to_fahrenheit(tmax), rh, range_test
    )
    wbgt = as_float_array(wbgt_from_heat_index(hi))

    logger.debug(
        "Computed WBGT for %d records: %d Rothfusz, %d adjusted, %d non-finite",
        wbgt.size,
        np.count_nonzero(formula == HeatIndexFormula.ROTHFUSZ),
        np.count_nonzero(adjustment != HeatIndexAdjustment.NONE),
        count_non_finite(wbgt),
    )

    return {
        'tmax': tmax.copy(),
        'rh': rh.copy(),
        'hi': hi,
        'wbgt': wbgt,
        'formula': formula,
        'adjustment': adjustment,
    }


def compute_wbgt(
    tmax: Union[float, np.ndarray],
    rh: Union[float, np.ndarray],
    range_test: Union[str, RangeTest] = RangeTest.CONTINUOUS,
    include_tags: bool = False
) -> pd.DataFrame:
    """
    WBGT records as a table, one row per input record.

    Grids are flattened in C order so row ``i`` corresponds to element ``i``
    of ``np.ravel(tmax)``.

    Args:
        tmax: Daily maximum temperature (°C)
        rh: Relative humidity (%), same shape as ``tmax``
        range_test: How the adjustment temperature windows are tested
        include_tags: Also add ``formula`` and ``adjustment`` columns

    Returns:
        DataFrame with columns ``tmax``, ``rh``, ``hi``, ``wbgt``
    """
    results = calculate_wbgt(tmax, rh, range_test)
    columns = RECORD_COLUMNS + (['formula', 'adjustment'] if include_tags else [])
    return pd.DataFrame({name: np.ravel(results[name]) for name in columns})


def wbgt_record(
    tmax: float,
    rh: float,
    range_test: Union[str, RangeTest] = RangeTest.CONTINUOUS
) -> WBGTRecord:
    """Heat index and WBGT for one observation, with the branches taken."""
    if np.ndim(tmax) != 0 or np.ndim(rh) != 0:
        raise ValueError("wbgt_record expects scalar tmax and rh")

    results = calculate_wbgt(tmax, rh, range_test)
    return WBGTRecord(
        tmax=float(results['tmax']),
        rh=float(results['rh']),
        hi=float(results['hi']),
        wbgt=float(results['wbgt']),
        formula=HeatIndexFormula(int(results['formula'])),
        adjustment=HeatIndexAdjustment(int(results['adjustment'])),
    )
