"""
Relative humidity derived from dewpoint.

Two independent formulations are provided:

1. Relative humidity from dewpoint, surface pressure and the daily Kelvin
   temperature extremes, through specific humidity.
2. Daily RHx (relative humidity at the hour of maximum temperature) and
   RHave (relative humidity at the mean daily temperature) aggregated from
   an hourly temperature/dewpoint series.

The two use different saturation vapour pressure constants and different
output scales and are intentionally kept apart.

References:
    Bolton (1980) The computation of equivalent potential temperature,
    Mon. Wea. Rev. 108
    Tetens (1930) Über einige meteorologische Begriffe, Z. Geophys. 6
"""

import logging
from dataclasses import dataclass
from typing import Union
import numpy as np
import pandas as pd

from .constants import (
    EPSILON,
    HOURS_PER_DAY,
    ONE_MINUS_EPSILON,
    PA_PER_HPA,
    RH_KELVIN_OFFSET,
    RH_PRESSURE_FACTOR,
    SVP_TETENS,
    T_ZERO_C,
    VP_BOLTON,
)
from .utils import (
    as_float_array,
    check_same_shape,
    count_non_finite,
    reshape_hourly,
    scalar_or_array,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyHumidity:
    """
    Daily relative humidity statistics, one value per day.

    Parameters
    ----------
    rhx : ndarray
        Relative humidity at the hour of maximum temperature, **percent**.
    rhave : ndarray
        Relative humidity at the mean daily temperature, **percent**.
    """

    rhx: np.ndarray  # RH at the hottest hour (%)
    rhave: np.ndarray  # RH at the daily mean temperature (%)

    def to_frame(self, index=None) -> pd.DataFrame:
        """Both series as DataFrame columns ``rhx`` and ``rhave``."""
        return pd.DataFrame({'rhx': self.rhx, 'rhave': self.rhave}, index=index)


# ---------------------------------------------------------------------------
# Dewpoint / pressure variant
# ---------------------------------------------------------------------------

def vapor_pressure_from_dewpoint(
    tdew: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """
    Actual vapour pressure from dewpoint, Bolton (1980).

    Parameters
    ----------
    tdew : float or ndarray
        Dewpoint temperature, **°C**.

    Returns
    -------
    float or ndarray
        Vapour pressure (hPa).
    """
    td = as_float_array(tdew)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        e = VP_BOLTON["a"] * np.exp(VP_BOLTON["b"] * td / (td + VP_BOLTON["c"]))
    return scalar_or_array(e)


def specific_humidity(
    vapor_pressure_hpa: Union[float, np.ndarray],
    pressure_pa: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """
    Specific humidity from vapour pressure and surface pressure.

    Parameters
    ----------
    vapor_pressure_hpa : float or ndarray
        Vapour pressure (hPa).
    pressure_pa : float or ndarray
        Surface pressure (Pa); converted to hPa internally.

    Returns
    -------
    float or ndarray
        Specific humidity (kg kg⁻¹).
    """
    e = as_float_array(vapor_pressure_hpa)
    p_hpa = as_float_array(pressure_pa) / PA_PER_HPA
    with np.errstate(divide="ignore", invalid="ignore"):
        q = EPSILON * e / (p_hpa - ONE_MINUS_EPSILON * e)
    return scalar_or_array(q)


def _saturation_term_kelvin(temp_k: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return np.exp(
            VP_BOLTON["b"] * (temp_k - T_ZERO_C) / (temp_k - RH_KELVIN_OFFSET)
        )


def relative_humidity_from_dewpoint(
    tdew: Union[float, np.ndarray],
    pressure: Union[float, np.ndarray],
    tmax: Union[float, np.ndarray],
    tmin: Union[float, np.ndarray],
) -> Union[float, np.ndarray]:
    """
    Relative humidity from dewpoint and pressure via the mixing-ratio identity.

    .. math::
       RH = \\frac{0.263\\,p\\,q}
                  {\\tfrac{1}{2}\\left[\\exp\\frac{17.67(T_{max}-273.15)}{T_{max}-29.65}
                  + \\exp\\frac{17.67(T_{min}-273.15)}{T_{min}-29.65}\\right]}

    Parameters
    ----------
    tdew : float or ndarray
        Dewpoint temperature, **°C**.
    pressure : float or ndarray
        Surface pressure, **Pa**.
    tmax : float or ndarray
        Daily maximum temperature, **Kelvin**.
    tmin : float or ndarray
        Daily minimum temperature, **Kelvin**.

    Returns
    -------
    float or ndarray
        The ratio ``0.263 p q / p2`` without any rescaling.  It is not on the
        same scale as :func:`calculate_rhx_rhave` and must not be mixed with
        it without checking the scale for the data at hand.

    Raises
    ------
    ValueError
        If the four inputs do not share one shape.

    Notes
    -----
    Zero denominators and exponent overflow propagate as ``inf``/``nan`` in
    the affected records.
    """
    tdew = as_float_array(tdew)
    pressure = as_float_array(pressure)
    tmax = as_float_array(tmax)
    tmin = as_float_array(tmin)
    check_same_shape(tdew=tdew, pressure=pressure, tmax=tmax, tmin=tmin)

    e = vapor_pressure_from_dewpoint(tdew)
    q = specific_humidity(e, pressure)
    p1 = RH_PRESSURE_FACTOR * pressure * q
    p2 = (_saturation_term_kelvin(tmin) + _saturation_term_kelvin(tmax)) / 2.0

    with np.errstate(divide="ignore", invalid="ignore"):
        rh = np.asarray(p1 / p2)

    logger.debug(
        "Computed dewpoint/pressure RH for %d records (%d non-finite)",
        rh.size, count_non_finite(rh)
    )
    return scalar_or_array(rh)


# ---------------------------------------------------------------------------
# Hourly aggregate variant (RHx / RHave)
# ---------------------------------------------------------------------------

def saturation_vapor_pressure_tetens(
    temperature: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """Saturation vapour pressure (kPa) from temperature (°C), Tetens form."""
    t = as_float_array(temperature)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        svp = SVP_TETENS["a"] * np.exp(SVP_TETENS["b"] * t / (t + SVP_TETENS["c"]))
    return scalar_or_array(svp)


def relative_humidity_percent(
    temperature: Union[float, np.ndarray],
    dewpoint: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """RH (%) as the ratio of actual to saturation vapour pressure."""
    svp = as_float_array(saturation_vapor_pressure_tetens(temperature))
    avp = as_float_array(saturation_vapor_pressure_tetens(dewpoint))
    with np.errstate(divide="ignore", invalid="ignore"):
        return scalar_or_array(100.0 * avp / svp)


def clamp_dewpoint(
    dewpoint: np.ndarray,
    reference: np.ndarray
) -> np.ndarray:
    """Dewpoint limited to the reference temperature; NaN passes through."""
    dewpoint = as_float_array(dewpoint)
    reference = as_float_array(reference)
    return np.where(dewpoint > reference, reference, dewpoint)


def _check_daily_inputs(n_days: int, **daily: np.ndarray) -> None:
    for name, values in daily.items():
        if values.ndim != 1 or values.size != n_days:
            raise ValueError(
                f"Daily input '{name}' has shape {values.shape}, "
                f"expected ({n_days},) to match the hourly series"
            )


def dewpoint_at_peak_temperature(
    ta: np.ndarray,
    tdew: np.ndarray,
    hours_per_day: int = HOURS_PER_DAY
) -> np.ndarray:
    """
    Dewpoint at the hour of maximum temperature for each day.

    Ties are broken by the earliest hour.  Missing temperatures are skipped;
    a day without any temperature yields NaN.

    Args:
        ta: Hourly temperature (°C), length a multiple of ``hours_per_day``
        tdew: Hourly dewpoint (°C), same length as ``ta``

    Returns:
        Dewpoint (°C), one value per day
    """
    ta = as_float_array(ta)
    tdew = as_float_array(tdew)
    check_same_shape(ta=ta, tdew=tdew)

    days_ta = reshape_hourly(ta, hours_per_day)
    days_td = reshape_hourly(tdew, hours_per_day)

    valid = ~np.isnan(days_ta)
    hour_tmax = np.argmax(np.where(valid, days_ta, -np.inf), axis=1)
    td_max = days_td[np.arange(days_td.shape[0]), hour_tmax]

    return np.where(valid.any(axis=1), td_max, np.nan)


def daily_mean_dewpoint(
    tdew: np.ndarray,
    hours_per_day: int = HOURS_PER_DAY
) -> np.ndarray:
    """Mean of the finite hourly dewpoints of each day (°C)."""
    days_td = reshape_hourly(tdew, hours_per_day)
    days_td = np.where(np.isfinite(days_td), days_td, np.nan)
    return pd.DataFrame(days_td).mean(axis=1, skipna=True).to_numpy(dtype=float)


def calculate_rhx(
    ta: np.ndarray,
    tdew: np.ndarray,
    tmax: np.ndarray,
) -> np.ndarray:
    """
    Daily relative humidity at the hour of maximum temperature.

    Args:
        ta: Hourly temperature (°C), length ``24 * n_days``
        tdew: Hourly dewpoint (°C), same length as ``ta``
        tmax: Daily maximum temperature (°C), length ``n_days``

    Returns:
        RHx (%), one value per day
    """
    ta = as_float_array(ta)
    tdew = as_float_array(tdew)
    tmax = as_float_array(tmax)
    check_same_shape(ta=ta, tdew=tdew)
    n_days = reshape_hourly(ta).shape[0]
    _check_daily_inputs(n_days, tmax=tmax)

    td_max = clamp_dewpoint(dewpoint_at_peak_temperature(ta, tdew), tmax)
    return as_float_array(relative_humidity_percent(tmax, td_max))


def calculate_rhave(
    tdew: np.ndarray,
    tmax: np.ndarray,
    tmin: np.ndarray,
) -> np.ndarray:
    """
    Daily relative humidity at the mean daily temperature.

    Args:
        tdew: Hourly dewpoint (°C), length ``24 * n_days``
        tmax: Daily maximum temperature (°C), length ``n_days``
        tmin: Daily minimum temperature (°C), length ``n_days``

    Returns:
        RHave (%), one value per day
    """
    tdew = as_float_array(tdew)
    tmax = as_float_array(tmax)
    tmin = as_float_array(tmin)
    n_days = reshape_hourly(tdew).shape[0]
    _check_daily_inputs(n_days, tmax=tmax, tmin=tmin)

    tave = (tmin + tmax) / 2.0
    td_ave = clamp_dewpoint(daily_mean_dewpoint(tdew), tave)
    return as_float_array(relative_humidity_percent(tave, td_ave))


def calculate_rhx_rhave(
    ta: np.ndarray,
    tdew: np.ndarray,
    tmax: np.ndarray,
    tmin: np.ndarray,
) -> DailyHumidity:
    """
    Daily RHx and RHave from hourly temperature and dewpoint.

    ``tmax`` and ``tmin`` are supplied independently of ``ta`` (they may
    come from another data source) and are not recomputed from it.

    Args:
        ta: Hourly temperature (°C), chronological, hour-major, ``24 * n_days``
        tdew: Hourly dewpoint (°C), same length as ``ta``
        tmax: Daily maximum temperature (°C), length ``n_days``
        tmin: Daily minimum temperature (°C), length ``n_days``

    Returns:
        DailyHumidity with ``rhx`` and ``rhave`` in percent

    Raises:
        ValueError: If ``ta`` and ``tdew`` differ in length, the hourly length
            is not a multiple of 24, or the daily inputs do not have one
            value per day
    """
    ta = as_float_array(ta)
    tdew = as_float_array(tdew)
    tmax = as_float_array(tmax)
    tmin = as_float_array(tmin)
    check_same_shape(ta=ta, tdew=tdew)
    n_days = reshape_hourly(ta).shape[0]
    _check_daily_inputs(n_days, tmax=tmax, tmin=tmin)

    result = DailyHumidity(
        rhx=calculate_rhx(ta, tdew, tmax),
        rhave=calculate_rhave(tdew, tmax, tmin),
    )

    logger.debug(
        "Computed RHx/RHave for %d days (%d / %d non-finite)",
        n_days, count_non_finite(result.rhx), count_non_finite(result.rhave)
    )
    return result
