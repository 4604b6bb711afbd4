"""Value types and helpers to validate the data types used in imuorient."""

from collections.abc import Sequence
from typing import NamedTuple, Union

import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation
from typing_extensions import TypeAlias

from imuorient.consts import SF_SENSOR_COLS


class Vector3(NamedTuple):
    """A single 3D sensor reading in the body frame.

    Used for angular rate (rad/s) and for acceleration (any consistent unit).
    No unit conversion is performed anywhere in imuorient.
    """

    x: float
    y: float
    z: float


class Quaternion(NamedTuple):
    """A unit quaternion describing the rotation from the sensor frame to the reference frame.

    The fields are stored scalar last.
    ``x``, ``y`` and ``z`` are the vector part and ``w`` is the scalar part.
    This is the same order as used by :meth:`scipy.spatial.transform.Rotation.from_quat` and by the ``q_x, q_y, q_z,
    q_w`` columns of all orientation outputs.
    Always access the components by name and not by position, when converting to other quaternion conventions.
    """

    x: float
    y: float
    z: float
    w: float

    def as_array(self) -> np.ndarray:
        """Return the quaternion as array in scalar-last order."""
        return np.array([self.x, self.y, self.z, self.w])

    def as_rotation(self) -> Rotation:
        """Return the quaternion as scipy rotation object."""
        return Rotation.from_quat(self.as_array())

    def squared_norm(self) -> float:
        return self.x**2 + self.y**2 + self.z**2 + self.w**2


# : Type alias for everything that can be interpreted as a single 3D reading.
Vector3Like: TypeAlias = Union[Vector3, Sequence[float], np.ndarray]


def as_float_vector(value: Vector3Like, name: str) -> np.ndarray:
    """Convert a single 3D reading to a float array with 3 elements.

    Parameters
    ----------
    value
        The reading.
        Can be a :class:`Vector3`, any sequence of 3 numbers, or a numpy array with 3 elements.
    name
        The name of the reading used in the error message.

    Returns
    -------
    np.ndarray
        A new float64 array with shape (3,).

    """
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components (x, y, z), but got {arr.size}.")
    return arr


def assert_is_sensor_data(data: pd.DataFrame) -> None:
    """Check if the passed dataframe contains sensor frame data.

    This is done by checking if the dataframe contains the columns defined in :obj:`~imuorient.consts.SF_SENSOR_COLS`.

    Parameters
    ----------
    data
        The dataframe to check.

    """
    if not isinstance(data, pd.DataFrame):
        raise AssertionError("The passed data is no valid imu data, as it is not a pandas dataframe.")  # noqa: TRY004
    missing_cols = set(SF_SENSOR_COLS) - set(data.columns)
    if missing_cols:
        raise AssertionError(
            "The passed data is no valid imu data in the sensor frame, as it is missing the following columns: "
            f"{missing_cols}."
        )


__all__ = [
    "Quaternion",
    "Vector3",
    "Vector3Like",
    "as_float_vector",
    "assert_is_sensor_data",
]
