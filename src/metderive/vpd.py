"""
Vapour pressure deficit from daily temperature extremes and relative humidity.

The saturation vapour pressure is evaluated at the mean of the daily maximum
and minimum temperature and scaled by the unsaturated fraction of the air.

References:
    Daly et al. (2015) Challenges in observation-based mapping of daily and
    monthly precipitation and temperature across the conterminous United States
"""

import logging
from typing import Union
import numpy as np

from .constants import SVP_DALY
from .utils import (
    as_float_array,
    check_same_shape,
    count_non_finite,
    scalar_or_array,
)

logger = logging.getLogger(__name__)


def saturation_vapor_pressure(
    temperature: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """
    Saturation vapour pressure over water, Daly et al. (2015) form.

    .. math::
       e_s = 0.611 \\exp\\left(\\frac{17.3\\,T}{T + 273.3}\\right)

    Parameters
    ----------
    temperature : float or ndarray
        Air temperature, **°C**.

    Returns
    -------
    float or ndarray
        Saturation vapour pressure (kPa).  ``T = -273.3`` is a singularity
        and yields ``inf``/``nan`` rather than an exception.
    """
    t = as_float_array(temperature)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        svp = SVP_DALY["a"] * np.exp(SVP_DALY["b"] * t / (t + SVP_DALY["c"]))
    return scalar_or_array(svp)


def mean_temperature(
    tmax: Union[float, np.ndarray],
    tmin: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """Daily mean temperature as the midpoint of the extremes."""
    return (as_float_array(tmax) + as_float_array(tmin)) / 2.0


def calculate_vpd(
    tmax: Union[float, np.ndarray],
    tmin: Union[float, np.ndarray],
    rh: Union[float, np.ndarray],
) -> Union[float, np.ndarray]:
    """
    Vapour pressure deficit for each record.

    Parameters
    ----------
    tmax : float or ndarray
        Daily maximum temperature, **°C**.
    tmin : float or ndarray
        Daily minimum temperature, **°C**.  Same shape as ``tmax``.
    rh : float or ndarray
        Relative humidity, **percent**.  Same shape as ``tmax``.

    Returns
    -------
    float or ndarray
        VPD (kPa), positionally aligned with the inputs.

    Raises
    ------
    ValueError
        If the three inputs do not share one shape.

    Notes
    -----
    * ``rh`` is not clamped: ``rh > 100`` gives a negative deficit and
      ``rh == 100`` gives exactly zero.
    * NaN or infinite inputs propagate to the affected records only.

    Examples
    --------
    >>> float(calculate_vpd(30.0, 20.0, 100.0))
    0.0
    """
    tmax = as_float_array(tmax)
    tmin = as_float_array(tmin)
    rh = as_float_array(rh)
    check_same_shape(tmax=tmax, tmin=tmin, rh=rh)

    svp = as_float_array(saturation_vapor_pressure(mean_temperature(tmax, tmin)))
    with np.errstate(invalid="ignore", over="ignore"):
        vpd = svp * (1.0 - rh / 100.0)

    logger.debug(
        "Computed VPD for %d records (%d non-finite)",
        vpd.size, count_non_finite(vpd)
    )
    return scalar_or_array(vpd)
