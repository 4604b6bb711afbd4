"""Base classes for the orientation estimation methods that can be used to estimate the orientation of an IMU."""

from typing import Any

import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation
from tpcp import Algorithm
from typing_extensions import Self, Unpack

from imuorient.consts import QUAT_COLS, SF_ACC_COLS, SF_GYR_COLS


class BaseOrientationEstimation(Algorithm):
    """Base class for the individual Orientation estimation methods that work on pd.DataFrame data."""

    _action_methods = ("estimate",)
    orientation_object_: Rotation

    data: pd.DataFrame
    sampling_rate_hz: float

    @property
    def orientation_(self) -> pd.DataFrame:
        """Orientations as pd.DataFrame."""
        df = pd.DataFrame(self.orientation_object_.as_quat(), columns=QUAT_COLS)
        df.index.name = "sample"
        return df

    @property
    def rotated_data_(self) -> pd.DataFrame:
        """Data rotated into the reference frame.

        Each sample is rotated with the orientation estimated before this sample was processed.
        """
        rotated = self.data.copy()
        if len(rotated) == 0:
            return rotated
        # The last orientation is the result after the final sample and belongs to no sample.
        rotations = self.orientation_object_[:-1]
        # Copy-on-write dataframes hand out read-only arrays, which scipy does not accept.
        for cols in (SF_GYR_COLS, SF_ACC_COLS):
            rotated[cols] = rotations.apply(np.array(rotated[cols].to_numpy(), dtype=float))
        return rotated

    def estimate(
        self,
        data: pd.DataFrame,
        *,
        sampling_rate_hz: float,
        **kwargs: Unpack[dict[str, Any]],
    ) -> Self:
        """Estimate the orientation of the sensor based on the input data."""
        raise NotImplementedError("Needs to be implemented by child class.")
