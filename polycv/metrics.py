"""Error metrics and fold aggregation."""
from __future__ import annotations

import numpy as np
from scipy import stats as sp_stats


def rmse(y_true, y_pred) -> float:
    """Root-mean-squared error, ``sqrt(mean((pred - actual)^2))``."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")
    if y_true.size == 0:
        raise ValueError("RMSE of an empty set is undefined")
    return float(np.sqrt(np.mean((y_pred - y_true) ** 2)))


def standard_error(values) -> float:
    """Standard error of the mean: sample stdev (ddof=1) over sqrt(count).

    A single value has no spread to measure and gives 0.0.
    """
    values = np.asarray(values, dtype=float)
    if values.size < 2:
        return 0.0
    if np.all(values == values[0]):
        return 0.0
    return float(sp_stats.sem(values, ddof=1))


def aggregate_folds(fold_scores) -> tuple[float, float]:
    """Unweighted mean and standard error of per-fold scores.

    Every fold counts once regardless of how many records it held.
    """
    scores = np.asarray(fold_scores, dtype=float)
    return float(np.mean(scores)), standard_error(scores)
