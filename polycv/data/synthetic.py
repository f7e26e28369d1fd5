"""Generate synthetic daily bike-trip and weather tables."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd


class BikeWeatherGenerator:
    """Generate a daily bike-share table with a known temperature response.

    Embedded patterns:
    - Trips rise with minimum temperature and flatten out on hot days
    - Rainy days lose about a third of their riders
    - Weekends carry fewer commuter trips
    """

    def __init__(self, n_days: int = 365, seed: int = 42, start: str = "2023-01-01"):
        self.n_days = n_days
        self.rng = np.random.default_rng(seed)
        self.start = pd.Timestamp(start)

    def generate(self) -> pd.DataFrame:
        dates = pd.date_range(self.start, periods=self.n_days, freq="D")
        day_of_year = dates.dayofyear.to_numpy()

        # Seasonal cycle in Celsius, coldest in mid January
        seasonal = 9.0 - 12.0 * np.cos(2 * np.pi * (day_of_year - 15) / 365.25)
        min_temp = seasonal + self.rng.normal(0, 3.0, self.n_days)
        max_temp = min_temp + self.rng.uniform(5, 12, self.n_days)
        precipitation = np.where(
            self.rng.random(self.n_days) < 0.3,
            self.rng.exponential(6.0, self.n_days),
            0.0,
        )

        trips = self.expected_trips(min_temp)
        trips = trips * np.where(precipitation > 1.0, 0.65, 1.0)
        trips = trips * np.where(dates.dayofweek.to_numpy() >= 5, 0.8, 1.0)
        trips = trips + self.rng.normal(0, 250, self.n_days)

        return pd.DataFrame({
            "date": dates,
            "min_temp": min_temp.round(1),
            "max_temp": max_temp.round(1),
            "precipitation": precipitation.round(1),
            "trips": np.clip(trips, 0, None).round().astype(int),
        })

    @staticmethod
    def expected_trips(min_temp: np.ndarray) -> np.ndarray:
        """Noise-free trip count as a function of minimum temperature."""
        t = np.asarray(min_temp, dtype=float)
        return 2500 + 180 * t - 4.0 * t ** 2

    def save(self, path: str | Path = "data/synthetic/bike_weather.csv") -> pd.DataFrame:
        """Generate the table and write it as CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = self.generate()
        df.to_csv(path, index=False)
        return df


def generate_bike_weather(n_days: int = 365, seed: int = 42) -> pd.DataFrame:
    """Shortcut for ``BikeWeatherGenerator(n_days, seed).generate()``."""
    return BikeWeatherGenerator(n_days=n_days, seed=seed).generate()
