import warnings
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from numba import njit
from scipy.spatial.transform import Rotation
from tpcp import BaseTpcpObject
from typing_extensions import Self, Unpack

from imuorient.consts import DEFAULT_BETA, DEFAULT_SAMPLE_PERIOD_S, IDENTITY_QUAT_XYZW, SF_ACC_COLS, SF_GYR_COLS
from imuorient.orientation_estimation._fast_math import inv_sqrt, normalize_approx, rate_of_change_from_gyro
from imuorient.orientation_estimation.base import BaseOrientationEstimation
from imuorient.utils.dtypes import Quaternion, Vector3Like, as_float_vector, assert_is_sensor_data


@njit(cache=True)
def _madgwick_imu_update(gyro, acc, current_orientation, sample_period_s, beta):
    # All quaternions in here are scalar first (w, x, y, z).
    q = np.copy(current_orientation)
    qdot = rate_of_change_from_gyro(gyro, q)

    q0, q1, q2, q3 = q

    # Compute feedback only if accelerometer measurement valid (avoids NaN in accelerometer normalisation)
    if not (acc[0] == 0.0 and acc[1] == 0.0 and acc[2] == 0.0):
        ax, ay, az = normalize_approx(acc)

        # Auxiliary variables to avoid repeated arithmetic
        _2q0 = 2.0 * q0
        _2q1 = 2.0 * q1
        _2q2 = 2.0 * q2
        _2q3 = 2.0 * q3
        _4q0 = 4.0 * q0
        _4q1 = 4.0 * q1
        _4q2 = 4.0 * q2
        _8q1 = 8.0 * q1
        _8q2 = 8.0 * q2
        q0q0 = q0 * q0
        q1q1 = q1 * q1
        q2q2 = q2 * q2
        q3q3 = q3 * q3

        # Gradient decent algorithm corrective step
        s = np.empty(4)
        s[0] = _4q0 * q2q2 + _2q2 * ax + _4q0 * q1q1 - _2q1 * ay
        s[1] = _4q1 * q3q3 - _2q3 * ax + 4.0 * q0q0 * q1 - _2q0 * ay - _4q1 + _8q1 * q1q1 + _8q1 * q2q2 + _4q1 * az
        s[2] = 4.0 * q0q0 * q2 + _2q0 * ax + _4q2 * q3q3 - _2q3 * ay - _4q2 + _8q2 * q1q1 + _8q2 * q2q2 + _4q2 * az
        s[3] = 4.0 * q1q1 * q3 - _2q1 * ax + 4.0 * q2q2 * q3 - _2q2 * ay

        # A zero gradient means the estimate already matches the measured gravity direction
        mag_s_sq = np.sum(s**2)
        if mag_s_sq != 0.0:
            s *= inv_sqrt(mag_s_sq)

            # Apply feedback step
            qdot -= beta * s

    # Integrate rate of change of quaternion to yield quaternion
    q = q + qdot * sample_period_s
    return normalize_approx(q)


@njit(cache=True)
def _madgwick_imu_update_series(gyro, acc, initial_orientation, sample_period_s, beta):
    out = np.empty((len(gyro) + 1, 4))
    out[0] = initial_orientation
    for i in range(len(gyro)):
        out[i + 1] = _madgwick_imu_update(
            gyro=gyro[i],
            acc=acc[i],
            current_orientation=out[i],
            sample_period_s=sample_period_s,
            beta=beta,
        )

    return out


def _xyzw_to_wxyz(q: np.ndarray) -> np.ndarray:
    return np.roll(q, 1, axis=-1)


def _wxyz_to_xyzw(q: np.ndarray) -> np.ndarray:
    return np.roll(q, -1, axis=-1)


def _check_positive(value: float, name: str) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be larger than 0, but got {value}.")


class OrientationFilter(BaseTpcpObject):
    """Streaming version of Madgwick's IMU filter that is updated one sample at a time.

    The filter owns the current orientation estimate and advances it by one sample period with every call to
    :meth:`update`.
    Each update integrates the gyro reading and pulls the estimated gravity direction towards the measured
    acceleration direction using a single gradient descent step with the gain ``beta``.
    If the accelerometer reading is exactly zero, the correction is skipped and only the gyro is integrated.

    All normalizations use the fast inverse square root (:func:`~imuorient.orientation_estimation.inv_sqrt`).
    Hence, the orientation is only unit-norm within the precision of this approximation.

    Parameters
    ----------
    sample_period_s
        The time between two calls to :meth:`update` in seconds.
        The default corresponds to a sampling rate of ~66.6 Hz.
    beta
        The gain of the accelerometer based correction.
        A high value performs large corrections and a small value small and gradual correction.

    Attributes
    ----------
    orientation
        The current orientation estimate.
        Before the first update this is the identity rotation.

    Notes
    -----
    Instances are not thread safe.
    Updates of one instance must be serialized by the caller, e.g. by using one filter per sensor stream.
    Non-finite readings are not detected and will permanently corrupt the orientation.
    Use :meth:`reset` to start again from the identity rotation.

    Examples
    --------
    >>> mad = OrientationFilter()
    >>> q = mad.update(gyro=(0.05, 0.065, 0.9), accel=(0.0, 0.0, 0.0))
    >>> # Always access the components by name
    >>> q.w, q.x, q.y, q.z
    (<scalar part>, <x>, <y>, <z>)

    """

    sample_period_s: float
    beta: float

    _orientation_wxyz: np.ndarray

    def __init__(self, sample_period_s: float = DEFAULT_SAMPLE_PERIOD_S, beta: float = DEFAULT_BETA) -> None:
        self.sample_period_s = sample_period_s
        self.beta = beta
        _check_positive(sample_period_s, "sample_period_s")
        _check_positive(beta, "beta")
        self.reset()

    @property
    def orientation(self) -> Quaternion:
        """The current orientation estimate."""
        return Quaternion(*_wxyz_to_xyzw(self._orientation_wxyz).tolist())

    def reset(self) -> Self:
        """Reset the orientation estimate to the identity rotation."""
        self._orientation_wxyz = _xyzw_to_wxyz(IDENTITY_QUAT_XYZW)
        return self

    def update(self, gyro: Vector3Like, accel: Vector3Like) -> Quaternion:
        """Advance the orientation estimate by one sample period.

        Parameters
        ----------
        gyro
            Angular rate in the sensor frame in rad/s.
        accel
            Acceleration in the sensor frame.
            Any unit can be used, as the reading is normalized.
            A reading of exactly (0, 0, 0) disables the correction step for this sample.

        Returns
        -------
        Quaternion
            The updated orientation.
            This is also stored as the new state of the filter.

        Raises
        ------
        ValueError
            If ``sample_period_s`` or ``beta`` is not positive, e.g. after changing them with ``set_params``.

        """
        _check_positive(self.sample_period_s, "sample_period_s")
        _check_positive(self.beta, "beta")
        self._orientation_wxyz = _madgwick_imu_update(
            gyro=as_float_vector(gyro, "gyro"),
            acc=as_float_vector(accel, "accel"),
            current_orientation=self._orientation_wxyz,
            sample_period_s=float(self.sample_period_s),
            beta=float(self.beta),
        )
        return self.orientation


class MadgwickIMU(BaseOrientationEstimation):
    """Madgwick's IMU algorithm to estimate the orientation of an IMU for an entire recording.

    This method applies a simple gyro integration with an additional correction step that tries to align the estimated
    orientation of the z-axis with gravity direction estimated from the acceleration data.
    It uses the same update as :class:`OrientationFilter`, including the fast inverse square root for all
    normalizations, but processes all samples of the data at once.
    This implementation is based on the paper [1]_.
    An open source C-implementation of the algorithm can be found at [2]_.

    Parameters
    ----------
    beta
        This parameter controls how harsh the acceleration based correction is.
        A high value performs large corrections and a small value small and gradual correction.
        A high value should only be used if the sensor is moved slowly.
    initial_orientation
        The initial orientation of the sensor that is assumed.
        It is critical that this value is close to the actual orientation.
        Otherwise, the estimated orientation will drift until the real orientation is found.
        If None, the identity rotation is used.
        If you pass a array, remember that the order of elements must be x, y, z, w.

    Attributes
    ----------
    orientation_
        The rotations as a pd.DataFrame with the columns ``q_x, q_y, q_z, q_w``, including the initial orientation.
        This means the there are len(data) + 1 orientations.
    orientation_object_
        The orientations as a single scipy Rotation object
    rotated_data_
        The rotated data after applying the estimated orientation to the data.
        The first sample of the data remain unrotated (initial orientation).

    Other Parameters
    ----------------
    data
        The data passed to the estimate method.
    sampling_rate_hz
        The sampling rate of this data

    Notes
    -----
    This class uses *Numba* as a just-in-time-compiler to achieve fast run times.
    In result, the first execution of the algorithm will take longer as the methods need to be compiled first.

    .. [1] Madgwick, S. O. H., Harrison, A. J. L., & Vaidyanathan, R. (2011).
           Estimation of IMU and MARG orientation using a gradient descent algorithm. IEEE International Conference on
           Rehabilitation Robotics, 1-7. https://doi.org/10.1109/ICORR.2011.5975346
    .. [2] http://x-io.co.uk/open-source-imu-and-ahrs-algorithms/

    Examples
    --------
    Your data must be a pd.DataFrame with columns defined by :obj:`~imuorient.consts.SF_SENSOR_COLS`.

    >>> import pandas as pd
    >>> from imuorient.consts import SF_SENSOR_COLS
    >>> data = pd.DataFrame(..., columns=SF_SENSOR_COLS)
    >>> sampling_rate_hz = 100
    >>> # Create an algorithm instance
    >>> mad = MadgwickIMU(beta=0.2, initial_orientation=np.array([0, 0, 0, 1.0]))
    >>> # Apply the algorithm
    >>> mad = mad.estimate(data, sampling_rate_hz=sampling_rate_hz)
    >>> # Inspect the results
    >>> mad.orientation_
    <pd.Dataframe with resulting quaternions>
    >>> mad.orientation_object_
    <scipy.Rotation object>

    """

    initial_orientation: Optional[Union[np.ndarray, Rotation]]
    beta: float

    def __init__(
        self,
        beta: float = DEFAULT_BETA,
        initial_orientation: Optional[Union[np.ndarray, Rotation]] = None,
    ) -> None:
        self.initial_orientation = initial_orientation
        self.beta = beta

    def estimate(
        self,
        data: pd.DataFrame,
        *,
        sampling_rate_hz: float,
        **_: Unpack[dict[str, Any]],
    ) -> Self:
        """Estimate the orientation of the sensor.

        Parameters
        ----------
        data
            Continuous sensor data including gyro and acc values in the sensor frame.
            The gyro data is expected to be in rad/s!
        sampling_rate_hz
            The sampling rate of the data in Hz

        Returns
        -------
        self
            The class instance with all result attributes populated

        """
        self.data = data
        self.sampling_rate_hz = sampling_rate_hz

        assert_is_sensor_data(data)
        _check_positive(sampling_rate_hz, "sampling_rate_hz")
        _check_positive(self.beta, "beta")

        initial_orientation = self.initial_orientation
        if initial_orientation is None:
            initial_orientation = IDENTITY_QUAT_XYZW
        elif isinstance(initial_orientation, Rotation):
            initial_orientation = initial_orientation.as_quat()
        initial_orientation = np.asarray(initial_orientation, dtype=float)
        if initial_orientation.shape != (4,):
            raise ValueError(
                "The initial orientation must be a single rotation or an array with 4 elements (x, y, z, w)."
            )

        if len(data) == 0:
            warnings.warn(
                "The passed data does not contain any samples. Only the initial orientation is returned.", stacklevel=2
            )

        gyro_data = np.ascontiguousarray(data[SF_GYR_COLS].to_numpy(dtype=float))
        acc_data = np.ascontiguousarray(data[SF_ACC_COLS].to_numpy(dtype=float))
        rots = _madgwick_imu_update_series(
            gyro=gyro_data,
            acc=acc_data,
            initial_orientation=_xyzw_to_wxyz(initial_orientation),
            sample_period_s=1.0 / sampling_rate_hz,
            beta=float(self.beta),
        )

        self.orientation_object_ = Rotation.from_quat(_wxyz_to_xyzw(rots))
        return self
