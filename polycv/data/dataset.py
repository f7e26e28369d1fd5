"""Immutable feature/target dataset for single-feature regression."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from polycv.errors import ConfigurationError


def _readonly(values) -> np.ndarray:
    arr = np.array(values, dtype=float, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class Dataset:
    """Ordered (feature, target) records.

    Row position is the only identity a record has. Both arrays are
    read-only copies of finite values, so a Dataset cannot change once
    built.
    """

    feature: np.ndarray
    target: np.ndarray
    feature_name: str = "x"
    target_name: str = "y"
    n_dropped: int = 0

    def __post_init__(self):
        feature = _readonly(self.feature).ravel()
        target = _readonly(self.target).ravel()
        if feature.shape != target.shape:
            raise ConfigurationError(
                f"Feature and target lengths differ: {feature.shape[0]} vs {target.shape[0]}"
            )
        n_bad = int(np.sum(~np.isfinite(feature)) + np.sum(~np.isfinite(target)))
        if n_bad:
            raise ConfigurationError(
                f"{n_bad} missing or infinite values; drop them first (Dataset.from_frame does)"
            )
        object.__setattr__(self, "feature", feature)
        object.__setattr__(self, "target", target)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        feature: str,
        target: str,
    ) -> Dataset:
        """Build a dataset from two numeric DataFrame columns.

        Rows missing either value (or holding an infinite one) are dropped;
        the number dropped is kept on ``n_dropped``.

        Raises:
            ConfigurationError: If a column is missing or not numeric.
        """
        missing = [c for c in (feature, target) if c not in df.columns]
        if missing:
            raise ConfigurationError(
                f"Columns not found: {missing}. Available: {sorted(map(str, df.columns))}"
            )
        for col in (feature, target):
            if not pd.api.types.is_numeric_dtype(df[col]):
                raise ConfigurationError(f"Column '{col}' is not numeric (dtype {df[col].dtype})")

        working = df[[feature, target]].replace([np.inf, -np.inf], np.nan).dropna()
        return cls(
            feature=working[feature].to_numpy(),
            target=working[target].to_numpy(),
            feature_name=feature,
            target_name=target,
            n_dropped=len(df) - len(working),
        )

    def __len__(self) -> int:
        return int(self.feature.shape[0])

    @property
    def X(self) -> np.ndarray:
        """Feature as the ``(n, 1)`` design matrix scikit-learn expects."""
        return self.feature.reshape(-1, 1)

    @property
    def y(self) -> np.ndarray:
        return self.target

    def subset(self, indices) -> Dataset:
        """Return the records at *indices*, in that order."""
        idx = np.asarray(indices, dtype=int)
        return Dataset(
            feature=self.feature[idx],
            target=self.target[idx],
            feature_name=self.feature_name,
            target_name=self.target_name,
        )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({self.feature_name: self.feature, self.target_name: self.target})

    def summary(self) -> dict:
        return {
            "n": len(self),
            "feature": self.feature_name,
            "target": self.target_name,
            "n_dropped": self.n_dropped,
            "feature_range": [float(self.feature.min()), float(self.feature.max())] if len(self) else [],
            "target_mean": float(self.target.mean()) if len(self) else None,
        }
