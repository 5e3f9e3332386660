import math
import warnings

import numpy as np
import pytest

from metderive.vpd import calculate_vpd, mean_temperature, saturation_vapor_pressure


def reference_vpd(tmax, tmin, rh):
    """Daly et al. (2015) VPD evaluated with the math module"""
    t = (tmax + tmin) / 2
    svp = 0.611 * math.exp(17.3 * t / (t + 273.3))
    return svp * (1 - rh / 100)


class TestSaturationVaporPressure:
    """Tests for the Daly saturation vapour pressure"""

    def test_reference_values(self):
        for t in [-20.0, 0.0, 15.0, 25.0, 40.0]:
            expected = 0.611 * math.exp(17.3 * t / (t + 273.3))
            assert saturation_vapor_pressure(t) == pytest.approx(expected, rel=1e-12)

    def test_zero_celsius(self):
        assert saturation_vapor_pressure(0.0) == pytest.approx(0.611)

    def test_increases_with_temperature(self):
        svp = saturation_vapor_pressure(np.linspace(-30, 45, 50))
        assert np.all(np.diff(svp) > 0)


class TestCalculateVPD:
    """Tests for VPD over scalars, sequences and grids"""

    def test_reference_case(self):
        """Daily extremes 30/20 °C at 50 % RH"""
        result = calculate_vpd([30.0], [20.0], [50.0])

        assert result.shape == (1,)
        assert result[0] == pytest.approx(reference_vpd(30.0, 20.0, 50.0), rel=1e-12)

        # Mean temperature is 25 °C and half the air is unsaturated
        svp = 0.611 * math.exp(17.3 * 25.0 / 298.3)
        assert result[0] == pytest.approx(svp / 2, rel=1e-12)

    def test_saturated_air_has_zero_deficit(self):
        result = calculate_vpd([30.0, 5.0, -10.0], [20.0, 0.0, -15.0], [100.0] * 3)
        assert np.all(result == 0.0)

    def test_monotonic_in_humidity(self):
        rh = np.linspace(0.0, 100.0, 21)
        tmax = np.full_like(rh, 28.0)
        tmin = np.full_like(rh, 14.0)

        vpd = calculate_vpd(tmax, tmin, rh)

        assert np.all(np.diff(vpd) <= 0), f"VPD should not increase with RH: {vpd}"

    def test_supersaturation_is_not_clamped(self):
        assert calculate_vpd(25.0, 15.0, 110.0) < 0

    def test_scalar_inputs_give_scalar(self):
        result = calculate_vpd(30.0, 20.0, 50.0)
        assert np.ndim(result) == 0
        assert float(result) == pytest.approx(reference_vpd(30.0, 20.0, 50.0))

    def test_grid_shape_preserved(self):
        tmax = np.array([[30.0, 32.0], [28.0, 25.0]])
        tmin = tmax - 10.0
        rh = np.array([[40.0, 60.0], [80.0, 20.0]])

        vpd = calculate_vpd(tmax, tmin, rh)

        assert vpd.shape == (2, 2)
        for i in range(2):
            for j in range(2):
                assert vpd[i, j] == pytest.approx(
                    reference_vpd(tmax[i, j], tmin[i, j], rh[i, j])
                )

    def test_nan_only_affects_its_record(self):
        vpd = calculate_vpd([30.0, np.nan, 25.0], [20.0, 15.0, 12.0], [50.0, 50.0, 50.0])

        assert np.isnan(vpd[1])
        assert np.isfinite(vpd[0]) and np.isfinite(vpd[2])

    def test_singular_temperature_does_not_raise(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = calculate_vpd([-273.3, 20.0], [-273.3, 10.0], [50.0, 50.0])
        assert result.shape == (2,)
        assert result[1] == pytest.approx(reference_vpd(20.0, 10.0, 50.0))

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError, match="shape"):
            calculate_vpd([30.0, 31.0], [20.0], [50.0, 50.0])

    def test_repeatable(self):
        tmax = np.array([30.0, 22.5, 35.1])
        first = calculate_vpd(tmax, tmax - 9.0, [50.0, 70.0, 10.0])
        second = calculate_vpd(tmax, tmax - 9.0, [50.0, 70.0, 10.0])
        np.testing.assert_array_equal(first, second)

    def test_inputs_not_modified(self):
        tmax = np.array([30.0, 25.0])
        tmin = np.array([20.0, 15.0])
        rh = np.array([50.0, 60.0])
        calculate_vpd(tmax, tmin, rh)
        np.testing.assert_array_equal(tmax, [30.0, 25.0])
        np.testing.assert_array_equal(tmin, [20.0, 15.0])
        np.testing.assert_array_equal(rh, [50.0, 60.0])


def test_mean_temperature():
    np.testing.assert_allclose(mean_temperature([30.0, 10.0], [20.0, -10.0]), [25.0, 0.0])
