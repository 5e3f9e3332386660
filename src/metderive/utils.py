"""
Utility functions for derived meteorological calculations.

This module provides helper functions for:
1. Input coercion and shape checks
2. Unit conversions
3. Reshaping hourly series into daily blocks
4. Daily statistics from hourly data
"""

from typing import Tuple, Union
import numpy as np
import pandas as pd

from .constants import F_FREEZING, F_PER_C, HOURS_PER_DAY, PA_PER_HPA, T_ZERO_C

ArrayLike = Union[float, np.ndarray]


def as_float_array(values) -> np.ndarray:
    """Return ``values`` as a float ndarray (0-d for scalars)."""
    return np.asarray(values, dtype=float)


def check_same_shape(**arrays: np.ndarray) -> Tuple[int, ...]:
    """
    Verify that all parallel inputs share one shape.

    Args:
        **arrays: Named arrays to compare

    Returns:
        The common shape

    Raises:
        ValueError: If any array differs in shape from the first one
    """
    names = list(arrays)
    reference = names[0]
    shape = np.shape(arrays[reference])

    for name in names[1:]:
        if np.shape(arrays[name]) != shape:
            raise ValueError(
                f"Input '{name}' has shape {np.shape(arrays[name])}, "
                f"expected {shape} to match '{reference}'"
            )

    return shape


def scalar_or_array(values: np.ndarray) -> ArrayLike:
    """Unwrap 0-d arrays so scalar inputs give scalar outputs."""
    return values[()] if values.ndim == 0 else values


def reshape_hourly(
    values: np.ndarray,
    hours_per_day: int = HOURS_PER_DAY
) -> np.ndarray:
    """
    Reshape a chronological hourly series into one row per day.

    Args:
        values: 1-D hourly series, hour-major within each day
        hours_per_day: Length of one daily block

    Returns:
        Array of shape (n_days, hours_per_day)
    """
    values = as_float_array(values)
    if values.ndim != 1:
        raise ValueError(f"Hourly series must be 1-D, got shape {values.shape}")
    if values.size % hours_per_day != 0:
        raise ValueError(
            f"Hourly series length {values.size} is not a multiple "
            f"of {hours_per_day}"
        )
    return values.reshape(-1, hours_per_day)


def celsius_to_fahrenheit(temp_c: ArrayLike) -> ArrayLike:
    """Convert °C to °F."""
    return temp_c * F_PER_C + F_FREEZING


def kelvin_to_celsius(temp_k: ArrayLike) -> ArrayLike:
    """Convert K to °C."""
    return temp_k - T_ZERO_C


def celsius_to_kelvin(temp_c: ArrayLike) -> ArrayLike:
    """Convert °C to K."""
    return temp_c + T_ZERO_C


def unit_conversion(
    value: ArrayLike,
    from_unit: str,
    to_unit: str
) -> ArrayLike:
    """
    Convert between the units used by the derived-quantity formulas.

    Args:
        value: Value(s) to convert
        from_unit: Original unit ('C', 'F', 'K', 'Pa', 'hPa')
        to_unit: Target unit

    Returns:
        Converted value(s)
    """
    conversions = {
        'C_to_F': celsius_to_fahrenheit,
        'C_to_K': celsius_to_kelvin,
        'K_to_C': kelvin_to_celsius,
        'Pa_to_hPa': lambda v: v / PA_PER_HPA,
        'hPa_to_Pa': lambda v: v * PA_PER_HPA,
    }

    conversion_key = f"{from_unit}_to_{to_unit}"

    if conversion_key not in conversions:
        raise ValueError(f"Unsupported unit conversion: {conversion_key}")

    return conversions[conversion_key](value)


def count_non_finite(values: ArrayLike) -> int:
    """Number of NaN or infinite entries."""
    return int(np.count_nonzero(~np.isfinite(values)))


def daily_extremes_from_hourly(
    ta: np.ndarray,
    hours_per_day: int = HOURS_PER_DAY
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Daily maximum and minimum from an hourly temperature series.

    Missing hours are skipped; a day with no valid hour yields NaN.

    Args:
        ta: Hourly temperature, length a multiple of ``hours_per_day``
        hours_per_day: Length of one daily block

    Returns:
        Tuple containing:
        - Daily maximum temperature
        - Daily minimum temperature
    """
    days = pd.DataFrame(reshape_hourly(ta, hours_per_day))
    return (
        days.max(axis=1, skipna=True).to_numpy(dtype=float),
        days.min(axis=1, skipna=True).to_numpy(dtype=float),
    )
