"""
Orientation Filter
==================

This example shows how to use the :class:`~imuorient.orientation_estimation.OrientationFilter` to track the
orientation of an IMU one sample at a time, and the :class:`~imuorient.orientation_estimation.MadgwickIMU` algorithm
to process an entire recording at once.

A single update
---------------
We create a filter with the default parameters (sample period of 0.015 s and a gain of 0.1) and pass a single gyro
reading in rad/s together with an accelerometer reading of exactly zero.
A zero acceleration disables the gravity correction, so only the gyro reading is integrated.
"""

from imuorient.orientation_estimation import OrientationFilter
from imuorient.utils import Vector3

mad = OrientationFilter()
q = mad.update(gyro=Vector3(0.05, 0.065, 0.9), accel=Vector3(0.0, 0.0, 0.0))

# %%
# The result is stored scalar last.
# Always access the components by name.
print(f"Quaternion = w: {q.w}, x: {q.x}, y: {q.y}, z: {q.z}")
print(f"Squared norm = {q.squared_norm()}")

# %%
# The squared norm is not exactly 1, as all normalizations use the fast inverse square root.
# The same quaternion is also available as scipy rotation object.
q.as_rotation().as_euler("xyz", degrees=True)

# %%
# Correction towards gravity
# --------------------------
# If the sensor is at rest, but tilted, the accelerometer based correction slowly pulls the orientation estimate
# towards the measured gravity direction.
# We simulate a sensor that is tilted by 45 deg around its x-axis and process the data with the batch version of the
# filter.
import numpy as np
import pandas as pd

from imuorient.consts import SF_ACC_COLS, SF_SENSOR_COLS
from imuorient.orientation_estimation import MadgwickIMU

data = pd.DataFrame(np.zeros((1000, 6)), columns=SF_SENSOR_COLS)
data["acc_y"] = 9.81 / np.sqrt(2)
data["acc_z"] = 9.81 / np.sqrt(2)

mad_batch = MadgwickIMU(beta=0.2).estimate(data, sampling_rate_hz=100.0)
mad_batch.orientation_

# %%
# After convergence, the rotated acceleration only points along the global z-axis.
mad_batch.rotated_data_[SF_ACC_COLS].tail()
