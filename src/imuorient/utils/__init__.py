"""Helper types and functions shared by the orientation estimation methods."""

from imuorient.utils.dtypes import Quaternion, Vector3, as_float_vector, assert_is_sensor_data

__all__ = ["Quaternion", "Vector3", "as_float_vector", "assert_is_sensor_data"]
