import numpy as np
import pandas as pd
import pytest

from imuorient.consts import SF_SENSOR_COLS


@pytest.fixture()
def static_tilted_data():
    """A resting sensor that is tilted by 45 deg around its x-axis."""

    def _create(n_samples: int = 3000) -> pd.DataFrame:
        data = pd.DataFrame(np.zeros((n_samples, 6)), columns=SF_SENSOR_COLS)
        data["acc_y"] = 9.81 / np.sqrt(2)
        data["acc_z"] = 9.81 / np.sqrt(2)
        return data

    return _create
