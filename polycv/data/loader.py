"""Data loading utilities for CSV and Parquet files."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from polycv.data.dataset import Dataset

logger = logging.getLogger(__name__)


class DataLoader:
    """Load a daily trip/weather table and turn it into a Dataset."""

    _FORMAT_MAP = {
        ".csv": "csv",
        ".parquet": "parquet",
        ".pq": "parquet",
    }

    def detect_format(self, filename: str) -> str:
        """Detect file format from extension.

        Returns ``"csv"`` or ``"parquet"``.

        Raises:
            ValueError: If the extension is not recognized.
        """
        suffix = Path(filename).suffix.lower()
        fmt = self._FORMAT_MAP.get(suffix)
        if fmt is None:
            raise ValueError(
                f"Unknown file format '{suffix}'. "
                f"Supported: {sorted(self._FORMAT_MAP.keys())}"
            )
        return fmt

    def load_file(self, path: Path | str) -> pd.DataFrame:
        """Load a single CSV or Parquet file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        fmt = self.detect_format(path.name)
        if fmt == "csv":
            df = pd.read_csv(path)
        else:
            df = pd.read_parquet(path)
        logger.info("Loaded %s: %d rows, %d columns", path.name, len(df), len(df.columns))
        return df

    def load_dataset(self, path: Path | str, feature: str, target: str) -> Dataset:
        """Load a file and select the feature and target columns."""
        dataset = Dataset.from_frame(self.load_file(path), feature=feature, target=target)
        if dataset.n_dropped:
            logger.warning(
                "Dropped %d rows with missing '%s' or '%s'", dataset.n_dropped, feature, target,
            )
        return dataset
