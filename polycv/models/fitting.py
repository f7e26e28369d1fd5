"""Fit candidates and turn numerical trouble into ``NumericalFailure``."""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any

import numpy as np
from sklearn.exceptions import ConvergenceWarning
from sklearn.pipeline import Pipeline

from polycv.data.dataset import Dataset
from polycv.errors import NumericalFailure
from polycv.models.candidates import Candidate
from polycv.metrics import rmse


def fit_estimator(
    candidate: Candidate,
    X: np.ndarray,
    y: np.ndarray,
    strict_convergence: bool = True,
) -> Pipeline:
    """Build and fit a fresh estimator for *candidate*.

    Raises:
        NumericalFailure: If the solver fails, or (with *strict_convergence*)
            warns that it did not converge.
    """
    estimator = candidate.build()
    with warnings.catch_warnings():
        if strict_convergence:
            warnings.simplefilter("error", ConvergenceWarning)
        else:
            warnings.simplefilter("ignore", ConvergenceWarning)
        try:
            estimator.fit(X, y)
        except ConvergenceWarning as exc:
            raise NumericalFailure(candidate.name, f"solver did not converge ({exc})") from exc
        except (np.linalg.LinAlgError, FloatingPointError) as exc:
            raise NumericalFailure(candidate.name, f"fit failed ({exc})") from exc
    return estimator


def predict_finite(candidate: Candidate, estimator: Any, X: np.ndarray) -> np.ndarray:
    """Predict with *estimator*, rejecting NaN or infinite output.

    Raises:
        NumericalFailure: If any prediction is not finite.
    """
    y_pred = np.asarray(estimator.predict(X), dtype=float)
    if not np.all(np.isfinite(y_pred)):
        n_bad = int(np.sum(~np.isfinite(y_pred)))
        raise NumericalFailure(candidate.name, f"{n_bad} non-finite predictions")
    return y_pred


@dataclass
class FittedModel:
    """A candidate refit on a whole dataset."""

    candidate: Candidate
    estimator: Any
    n_train: int
    train_rmse: float

    def predict(self, feature) -> np.ndarray:
        X = np.asarray(feature, dtype=float).reshape(-1, 1)
        return predict_finite(self.candidate, self.estimator, X)

    @property
    def alpha(self) -> float | None:
        """Penalty strength in effect, if the model has one."""
        model = self.estimator.named_steps["model"]
        value = getattr(model, "alpha_", getattr(model, "alpha", None))
        return None if value is None else float(value)

    def coefficients(self) -> dict[str, float]:
        """Coefficients keyed by basis term (``x^1`` .. ``x^d``).

        Terms refer to the standardized feature; lasso zeros are kept so
        the sparsity is visible.
        """
        model = self.estimator.named_steps["model"]
        coefs = np.ravel(model.coef_)
        return {f"x^{i + 1}": round(float(c), 6) for i, c in enumerate(coefs)}

    def to_dict(self) -> dict:
        model = self.estimator.named_steps["model"]
        coefs = self.coefficients()
        return {
            "candidate": self.candidate.describe(),
            "n_train": self.n_train,
            "train_rmse": round(self.train_rmse, 4),
            "intercept": round(float(np.ravel(model.intercept_)[0]), 6),
            "coefficients": coefs,
            "n_nonzero": sum(1 for v in coefs.values() if v != 0.0),
            "alpha": self.alpha,
        }


def refit(candidate: Candidate, dataset: Dataset, strict_convergence: bool = True) -> FittedModel:
    """Fit *candidate* on every record of *dataset*.

    Raises:
        ConfigurationError: If the dataset is too small for the candidate.
        NumericalFailure: If the fit fails.
    """
    candidate.check_trainable(len(dataset))
    estimator = fit_estimator(candidate, dataset.X, dataset.y, strict_convergence)
    y_pred = predict_finite(candidate, estimator, dataset.X)
    return FittedModel(
        candidate=candidate,
        estimator=estimator,
        n_train=len(dataset),
        train_rmse=rmse(dataset.y, y_pred),
    )
