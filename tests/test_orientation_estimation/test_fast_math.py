import numpy as np
import pytest

from imuorient.orientation_estimation import inv_sqrt
from imuorient.orientation_estimation._fast_math import normalize_approx, rate_of_change_from_gyro


def _hamilton_product(p, q):
    w1, x1, y1, z1 = p
    w2, x2, y2, z2 = q
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


class TestInvSqrt:
    @pytest.mark.parametrize("x", [0.25, 1.0, 2.0, 100.0, 1e-6, 3.7, 12345.678, 1e-37, 1e38])
    def test_relative_error(self, x):
        exact = 1 / np.sqrt(x)
        assert abs(inv_sqrt(x) - exact) / exact < 2e-3

    def test_is_approximation(self):
        # The result must not silently become the exact value
        assert inv_sqrt(1.0) != 1.0
        assert inv_sqrt(1.0) < 1.0

    def test_never_overestimates(self):
        x = np.linspace(0.01, 10, 200)
        approx = np.array([inv_sqrt(v) for v in x])
        assert np.all(approx <= 1 / np.sqrt(x))


class TestNormalizeApprox:
    def test_unit_length(self):
        vec = np.array([3.0, -4.0, 12.0])
        result = normalize_approx(vec)
        assert np.linalg.norm(result) == pytest.approx(1.0, abs=2e-3)
        assert np.allclose(result / np.linalg.norm(result), vec / 13.0)


class TestRateOfChangeFromGyro:
    def test_identity(self):
        qdot = rate_of_change_from_gyro(np.array([0.1, 0.2, 0.3]), np.array([1.0, 0.0, 0.0, 0.0]))
        assert np.allclose(qdot, [0.0, 0.05, 0.1, 0.15])

    def test_zero_rate(self):
        q = np.array([0.5, 0.5, 0.5, 0.5])
        assert np.all(rate_of_change_from_gyro(np.zeros(3), q) == 0.0)

    def test_matches_quaternion_kinematics(self):
        rng = np.random.default_rng(1)
        q = rng.normal(size=4)
        q /= np.linalg.norm(q)
        gyro = rng.normal(size=3)

        expected = 0.5 * _hamilton_product(q, np.array([0.0, *gyro]))
        assert np.allclose(rate_of_change_from_gyro(gyro, q), expected)
