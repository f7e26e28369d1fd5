"""
Pytest Configuration and Shared Fixtures
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from polycv.data.dataset import Dataset
from polycv.data.synthetic import generate_bike_weather


@pytest.fixture
def tiny_dataset():
    """Ten records on a noisy line."""
    rng = np.random.default_rng(0)
    x = np.arange(10, dtype=float)
    y = 2.0 * x + 1.0 + rng.normal(0, 0.5, 10)
    return Dataset(feature=x, target=y, feature_name="min_temp", target_name="trips")


@pytest.fixture
def line_dataset():
    """Forty records on an exact line."""
    x = np.linspace(-5, 20, 40)
    return Dataset(feature=x, target=3.0 * x + 2.0)


@pytest.fixture(scope="session")
def bike_frame():
    return generate_bike_weather(n_days=240, seed=7)


@pytest.fixture
def bike_dataset(bike_frame):
    return Dataset.from_frame(bike_frame, feature="min_temp", target="trips")


@pytest.fixture
def messy_frame():
    return pd.DataFrame({
        "min_temp": [1.0, 2.0, np.nan, 4.0, np.inf, 6.0],
        "trips": [10, 20, 30, np.nan, 50, 60],
        "station": ["a", "b", "c", "d", "e", "f"],
    })
