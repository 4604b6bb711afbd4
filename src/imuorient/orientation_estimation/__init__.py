"""Methods to estimate the orientation of an IMU based on gyro and acc data."""

__all__ = ["BaseOrientationEstimation", "MadgwickIMU", "OrientationFilter", "inv_sqrt"]

from imuorient.orientation_estimation._fast_math import inv_sqrt
from imuorient.orientation_estimation._madgwick import MadgwickIMU, OrientationFilter
from imuorient.orientation_estimation.base import BaseOrientationEstimation
