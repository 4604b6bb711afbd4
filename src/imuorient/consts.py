"""A set of universal constants and definitions."""

from typing import Final

import numpy as np

#: Gyro cols in sensor frame
SF_GYR_COLS = ["gyr_x", "gyr_y", "gyr_z"]

#: Acc cols
SF_ACC_COLS = ["acc_x", "acc_y", "acc_z"]

#: Sensor cols
SF_SENSOR_COLS = [*SF_ACC_COLS, *SF_GYR_COLS]

#: Quaternion cols of orientation outputs (scalar last)
QUAT_COLS = ["q_x", "q_y", "q_z", "q_w"]

#: Default time between two filter updates in seconds (~66.6 Hz)
DEFAULT_SAMPLE_PERIOD_S: Final = 0.015

#: Default gain of the accelerometer based correction step
DEFAULT_BETA: Final = 0.1

#: Identity rotation in scalar-last order (x, y, z, w)
IDENTITY_QUAT_XYZW: Final = np.array([0.0, 0.0, 0.0, 1.0])

#: Magic constant of the fast inverse square root
INV_SQRT_MAGIC: Final = 0x5F3759DF
