"""Candidate regression models of varying complexity.

A candidate is a recipe, not a fitted model: ``build()`` returns a fresh
scikit-learn estimator every time, so folds never share fitted state.

Three families are supported:

- ``PolynomialCandidate``: ordinary least squares on ``1, x, ..., x^d``.
- ``PenalizedCandidate``: ridge or lasso with a fixed penalty on a
  polynomial basis of ``basis_degree``.
- ``InnerCVCandidate``: ridge or lasso whose penalty is picked by an inner
  cross-validation on each training set.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import PolynomialFeatures, StandardScaler

from polycv.errors import ConfigurationError

DEFAULT_RIDGE_ALPHAS = tuple(np.logspace(-4, 4, 50))
# Below alpha=1 coordinate descent stalls on the high-degree basis at trip-count scale.
DEFAULT_LASSO_ALPHAS = tuple(np.logspace(0, 4, 40))
LASSO_TOL = 1e-3

_PENALTIES = {"ridge", "lasso"}


def _basis_steps(degree: int) -> list[tuple[str, Any]]:
    # Scaling x before expansion keeps high powers well conditioned.
    return [
        ("scale", StandardScaler()),
        ("poly", PolynomialFeatures(degree=degree, include_bias=False)),
    ]


class Candidate(ABC):
    """A model complexity setting under comparison."""

    family: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def complexity(self) -> tuple[float, float]:
        """Sort key; smaller means simpler."""
        ...

    @property
    @abstractmethod
    def n_coefficients(self) -> int:
        """Number of fitted coefficients, intercept included."""
        ...

    @property
    def min_train_size(self) -> int:
        return 2

    @abstractmethod
    def build(self) -> Pipeline:
        """Return a new, unfitted estimator."""
        ...

    def check_trainable(self, n_train: int) -> None:
        """Raise if *n_train* records cannot support this candidate.

        Raises:
            ConfigurationError: If the fit would be under-determined.
        """
        if n_train < self.min_train_size:
            raise ConfigurationError(
                f"Candidate '{self.name}' needs at least {self.min_train_size} training "
                f"records, but a training fold has only {n_train}."
            )

    def describe(self) -> dict[str, Any]:
        return {"name": self.name, "family": self.family}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PolynomialCandidate(Candidate):
    family = "polynomial"

    def __init__(self, degree: int):
        if degree < 1:
            raise ConfigurationError(f"Polynomial degree must be >= 1, got {degree}")
        self.degree = int(degree)

    @property
    def name(self) -> str:
        return f"poly_deg{self.degree}"

    @property
    def complexity(self) -> tuple[float, float]:
        return (float(self.degree), 0.0)

    @property
    def n_coefficients(self) -> int:
        return self.degree + 1

    @property
    def min_train_size(self) -> int:
        return self.n_coefficients

    def build(self) -> Pipeline:
        from sklearn.linear_model import LinearRegression

        return Pipeline(_basis_steps(self.degree) + [("model", LinearRegression())])

    def describe(self) -> dict[str, Any]:
        return {**super().describe(), "degree": self.degree}


class PenalizedCandidate(Candidate):
    """Ridge or lasso with a fixed penalty strength."""

    def __init__(
        self,
        penalty: str,
        alpha: float,
        basis_degree: int = 10,
        max_iter: int = 100_000,
        tol: float = LASSO_TOL,
    ):
        if penalty not in _PENALTIES:
            raise ConfigurationError(
                f"Unknown penalty '{penalty}'. Supported: {sorted(_PENALTIES)}"
            )
        if alpha <= 0:
            raise ConfigurationError(f"Penalty strength must be positive, got {alpha}")
        if basis_degree < 1:
            raise ConfigurationError(f"Basis degree must be >= 1, got {basis_degree}")
        self.penalty = penalty
        self.alpha = float(alpha)
        self.basis_degree = int(basis_degree)
        self.max_iter = max_iter
        self.tol = tol

    @property
    def family(self) -> str:
        return self.penalty

    @property
    def name(self) -> str:
        return f"{self.penalty}_deg{self.basis_degree}_a{self.alpha:g}"

    @property
    def complexity(self) -> tuple[float, float]:
        # A stronger penalty is a simpler model.
        return (float(self.basis_degree), -self.alpha)

    @property
    def n_coefficients(self) -> int:
        return self.basis_degree + 1

    def build(self) -> Pipeline:
        if self.penalty == "ridge":
            from sklearn.linear_model import Ridge

            model = Ridge(alpha=self.alpha)
        else:
            from sklearn.linear_model import Lasso

            model = Lasso(alpha=self.alpha, max_iter=self.max_iter, tol=self.tol)
        return Pipeline(
            _basis_steps(self.basis_degree)
            + [("standardize", StandardScaler()), ("model", model)]
        )

    def describe(self) -> dict[str, Any]:
        return {**super().describe(), "alpha": self.alpha, "basis_degree": self.basis_degree}


class InnerCVCandidate(Candidate):
    """Ridge or lasso whose penalty is chosen by cross-validation on the training data."""

    def __init__(
        self,
        penalty: str,
        basis_degree: int = 10,
        alphas: tuple[float, ...] | None = None,
        inner_folds: int = 5,
        max_iter: int = 100_000,
        tol: float = LASSO_TOL,
    ):
        if penalty not in _PENALTIES:
            raise ConfigurationError(
                f"Unknown penalty '{penalty}'. Supported: {sorted(_PENALTIES)}"
            )
        if basis_degree < 1:
            raise ConfigurationError(f"Basis degree must be >= 1, got {basis_degree}")
        if inner_folds < 2:
            raise ConfigurationError(f"Inner fold count must be >= 2, got {inner_folds}")
        if alphas is None:
            alphas = DEFAULT_RIDGE_ALPHAS if penalty == "ridge" else DEFAULT_LASSO_ALPHAS
        self.penalty = penalty
        self.basis_degree = int(basis_degree)
        self.alphas = tuple(float(a) for a in alphas)
        self.inner_folds = int(inner_folds)
        self.max_iter = max_iter
        self.tol = tol

    @property
    def family(self) -> str:
        return f"{self.penalty}_cv"

    @property
    def name(self) -> str:
        return f"{self.penalty}_cv_deg{self.basis_degree}"

    @property
    def complexity(self) -> tuple[float, float]:
        return (float(self.basis_degree), 0.0)

    @property
    def n_coefficients(self) -> int:
        return self.basis_degree + 1

    @property
    def min_train_size(self) -> int:
        return max(self.inner_folds, 2)

    def build(self) -> Pipeline:
        if self.penalty == "ridge":
            from sklearn.linear_model import RidgeCV

            model = RidgeCV(alphas=np.asarray(self.alphas), cv=self.inner_folds)
        else:
            from sklearn.linear_model import LassoCV

            model = LassoCV(
                alphas=np.asarray(self.alphas),
                cv=self.inner_folds,
                max_iter=self.max_iter,
                tol=self.tol,
            )
        return Pipeline(
            _basis_steps(self.basis_degree)
            + [("standardize", StandardScaler()), ("model", model)]
        )

    def describe(self) -> dict[str, Any]:
        return {
            **super().describe(),
            "basis_degree": self.basis_degree,
            "inner_folds": self.inner_folds,
            "alpha_grid": [min(self.alphas), max(self.alphas)],
        }


# ----------------------------------------------------------------------
# Factories
# ----------------------------------------------------------------------


def polynomial_candidates(max_degree: int, min_degree: int = 1) -> list[PolynomialCandidate]:
    """Polynomial candidates for every degree in ``[min_degree, max_degree]``."""
    if max_degree < min_degree:
        raise ConfigurationError(
            f"max_degree ({max_degree}) must be >= min_degree ({min_degree})"
        )
    return [PolynomialCandidate(d) for d in range(min_degree, max_degree + 1)]


def penalized_candidates(
    penalty: str, alphas, basis_degree: int = 10,
) -> list[PenalizedCandidate]:
    """One fixed-penalty candidate per value in *alphas*."""
    return [PenalizedCandidate(penalty, a, basis_degree=basis_degree) for a in alphas]


def make_candidate(spec: dict[str, Any]) -> Candidate:
    """Build a candidate from a plain dict such as ``{"family": "polynomial", "degree": 3}``.

    Raises:
        ConfigurationError: If the family is unknown.
    """
    params = dict(spec)
    family = params.pop("family", "polynomial")
    if family == "polynomial":
        return PolynomialCandidate(**params)
    if family in _PENALTIES:
        return PenalizedCandidate(family, **params)
    if family in {f"{p}_cv" for p in _PENALTIES}:
        return InnerCVCandidate(family[: -len("_cv")], **params)
    raise ConfigurationError(
        f"Unknown candidate family '{family}'. "
        f"Supported: ['lasso', 'lasso_cv', 'polynomial', 'ridge', 'ridge_cv']"
    )
