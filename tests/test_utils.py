import numpy as np
import pytest

from metderive.utils import (
    as_float_array,
    celsius_to_fahrenheit,
    celsius_to_kelvin,
    check_same_shape,
    count_non_finite,
    daily_extremes_from_hourly,
    kelvin_to_celsius,
    reshape_hourly,
    scalar_or_array,
    unit_conversion,
)


class TestShapeChecks:
    """Tests for parallel input validation"""

    def test_matching_shapes(self):
        shape = check_same_shape(a=np.zeros(3), b=np.ones(3), c=np.arange(3.0))
        assert shape == (3,)

    def test_mismatch_names_offending_input(self):
        with pytest.raises(ValueError, match="'b'"):
            check_same_shape(a=np.zeros(3), b=np.zeros(4))

    def test_scalar_does_not_match_sequence(self):
        with pytest.raises(ValueError):
            check_same_shape(a=as_float_array(1.0), b=np.zeros(2))

    def test_scalar_or_array(self):
        assert np.ndim(scalar_or_array(as_float_array(2.5))) == 0
        assert scalar_or_array(np.zeros(2)).shape == (2,)


class TestReshapeHourly:
    """Tests for splitting hourly series into days"""

    def test_two_days(self):
        days = reshape_hourly(np.arange(48.0))
        assert days.shape == (2, 24)
        assert days[1, 0] == 24.0

    def test_partial_day_rejected(self):
        with pytest.raises(ValueError, match="multiple of 24"):
            reshape_hourly(np.zeros(25))

    def test_grid_rejected(self):
        with pytest.raises(ValueError, match="1-D"):
            reshape_hourly(np.zeros((24, 2)))


class TestUnitConversion:
    """Tests for temperature and pressure conversions"""

    def test_temperature(self):
        assert celsius_to_fahrenheit(30.0) == pytest.approx(86.0)
        assert celsius_to_fahrenheit(-40.0) == pytest.approx(-40.0)
        assert celsius_to_kelvin(25.0) == pytest.approx(298.15)
        assert kelvin_to_celsius(273.15) == pytest.approx(0.0)

    def test_unit_conversion(self):
        assert unit_conversion(100.0, 'C', 'F') == pytest.approx(212.0)
        assert unit_conversion(101325.0, 'Pa', 'hPa') == pytest.approx(1013.25)
        assert unit_conversion(1013.25, 'hPa', 'Pa') == pytest.approx(101325.0)
        np.testing.assert_allclose(
            unit_conversion(np.array([300.0, 250.0]), 'K', 'C'), [26.85, -23.15]
        )

    def test_unsupported_conversion(self):
        with pytest.raises(ValueError, match="Unsupported unit conversion"):
            unit_conversion(1.0, 'F', 'K')


def test_count_non_finite():
    assert count_non_finite(np.array([1.0, np.nan, np.inf, -np.inf, 0.0])) == 3


def test_daily_extremes_from_hourly():
    ta = np.concatenate([np.linspace(10, 25, 24), np.linspace(5, 15, 24)])
    ta[30] = np.nan

    tmax, tmin = daily_extremes_from_hourly(ta)

    np.testing.assert_allclose(tmax, [25.0, 15.0])
    np.testing.assert_allclose(tmin, [10.0, 5.0])
