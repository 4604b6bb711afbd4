"""Small numba compiled helpers used by the orientation filters.

All quaternions in this module are stored scalar first (w, x, y, z).
Conversion to the public scalar-last order happens at the boundary of the filters.
"""

import numpy as np
from numba import njit

from imuorient.consts import INV_SQRT_MAGIC


@njit(cache=True)
def inv_sqrt(x):
    """Approximate ``1 / sqrt(x)`` using the fast inverse square root.

    The bit pattern of ``x`` as float32 is reinterpreted as integer to get an initial guess, which is refined with a
    single Newton-Raphson step.
    The relative error compared to the exact value is below 0.2 % for all ``x`` in the normal float32 range
    (~1.2e-38 to ~3.4e38).
    Outside this range the float32 seed is meaningless and so is the result.
    As the filters only pass sums of squares, this limits the magnitude of a sensor reading to roughly 1e-19 to 1.8e19.

    Parameters
    ----------
    x
        A positive value within the normal float32 range.
        The result for ``x <= 0`` is undefined.

    Returns
    -------
    float
        The approximated inverse square root.

    Notes
    -----
    The result is deliberately not exact.
    Every normalization step of the Madgwick filter uses this approximation, so replacing it with ``1 / np.sqrt(x)``
    changes the filter output.

    """
    buffer = np.empty(1, dtype=np.float32)
    buffer[0] = x
    bits = buffer.view(np.int32)
    bits[0] = np.int32(INV_SQRT_MAGIC) - (bits[0] >> 1)
    y = np.float64(buffer[0])
    return y * (1.5 - 0.5 * x * y * y)


@njit(cache=True)
def rate_of_change_from_gyro(gyro, current_orientation):
    """Calculate the rate of change of the orientation quaternion from a gyro reading.

    This is ``0.5 * q ⊗ (0, gx, gy, gz)``.

    Parameters
    ----------
    gyro
        Angular rate in rad/s as array with 3 elements.
    current_orientation
        Scalar first quaternion (w, x, y, z).

    """
    q0, q1, q2, q3 = current_orientation
    gx, gy, gz = gyro
    qdot = np.empty(4)
    qdot[0] = 0.5 * (-q1 * gx - q2 * gy - q3 * gz)
    qdot[1] = 0.5 * (q0 * gx + q2 * gz - q3 * gy)
    qdot[2] = 0.5 * (q0 * gy - q1 * gz + q3 * gx)
    qdot[3] = 0.5 * (q0 * gz + q1 * gy - q2 * gx)
    return qdot


@njit(cache=True)
def normalize_approx(vec):
    """Scale a vector to unit length using :func:`inv_sqrt`.

    The vector must not be all zeros.
    """
    return vec * inv_sqrt(np.sum(vec**2))
