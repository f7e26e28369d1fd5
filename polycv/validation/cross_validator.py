"""K-fold cross-validation for choosing model complexity."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from polycv.data.dataset import Dataset
from polycv.errors import ConfigurationError, NumericalFailure
from polycv.metrics import aggregate_folds, rmse
from polycv.models.candidates import Candidate
from polycv.models.fitting import fit_estimator, predict_finite
from polycv.validation.folds import FoldAssignment, assign_folds

logger = logging.getLogger(__name__)


@dataclass
class CandidateScore:
    """Held-out RMSE of one candidate, per fold and aggregated."""

    candidate: Candidate
    fold_rmse: list[float]
    mean_rmse: float
    std_error: float

    @property
    def name(self) -> str:
        return self.candidate.name

    def to_dict(self) -> dict:
        return {
            "candidate": self.candidate.name,
            "family": self.candidate.family,
            "alpha": getattr(self.candidate, "alpha", None),
            "mean_rmse": round(self.mean_rmse, 4),
            "std_error": round(self.std_error, 4),
            "fold_rmse": [round(v, 4) for v in self.fold_rmse],
        }


@dataclass
class CrossValidationResult:
    """Comparison table plus the selected candidate."""

    scores: list[CandidateScore]
    assignment: FoldAssignment
    selected: CandidateScore | None = None
    excluded: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def get(self, name: str) -> CandidateScore:
        for score in self.scores:
            if score.name == name:
                return score
        raise KeyError(f"Candidate '{name}' not in table. Available: {[s.name for s in self.scores]}")

    def to_frame(self) -> pd.DataFrame:
        """One row per scored candidate, in the order they were given."""
        rows = []
        for score in self.scores:
            rows.append({
                "candidate": score.name,
                "family": score.candidate.family,
                "complexity": score.candidate.complexity[0],
                "alpha": getattr(score.candidate, "alpha", None),
                "mean_rmse": score.mean_rmse,
                "std_error": score.std_error,
                "selected": self.selected is not None and score.name == self.selected.name,
            })
        return pd.DataFrame(
            rows,
            columns=[
                "candidate", "family", "complexity", "alpha", "mean_rmse", "std_error", "selected",
            ],
        )

    def to_dict(self) -> dict:
        return {
            "analysis_type": "cross_validation",
            "timestamp": self.timestamp,
            "folds": self.assignment.to_dict(),
            "table": [s.to_dict() for s in self.scores],
            "selected": self.selected.name if self.selected else None,
            "excluded": self.excluded,
            "warnings": self.warnings,
        }


def select_best(scores: Sequence[CandidateScore]) -> CandidateScore | None:
    """Lowest mean RMSE; exact ties go to the lowest complexity, then to list order."""
    if not scores:
        return None
    ranked = sorted(
        enumerate(scores),
        key=lambda item: (item[1].mean_rmse, item[1].candidate.complexity, item[0]),
    )
    return ranked[0][1]


def _score_fold(
    candidate: Candidate,
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
    strict_convergence: bool,
) -> tuple[float | None, str | None]:
    # Returns (rmse, None) or (None, reason); plain tuples survive joblib workers.
    try:
        estimator = fit_estimator(candidate, X_train, y_train, strict_convergence)
        y_pred = predict_finite(candidate, estimator, X_test)
    except NumericalFailure as exc:
        return None, exc.reason
    return rmse(y_test, y_pred), None


class CrossValidator:
    """Compare candidates by k-fold held-out RMSE.

    Every candidate sees the same fold assignment, drawn once from
    ``seed``. Fold RMSEs are averaged without weighting by fold size, and
    the standard error is ``stdev(ddof=1) / sqrt(k)``.

    Parameters
    ----------
    n_folds:
        Number of folds ``k``; must satisfy ``2 <= k <= n``.
    seed:
        Seed for the shuffle behind the fold assignment.
    n_jobs:
        Workers for the (candidate, fold) map. ``1`` runs inline; any other
        value except ``0`` is handed to joblib. The table does not depend on it.
    strict_convergence:
        Treat solver convergence warnings as numerical failures.
    """

    def __init__(
        self,
        n_folds: int = 5,
        seed: int = 42,
        n_jobs: int = 1,
        strict_convergence: bool = True,
    ):
        if n_jobs == 0:
            raise ConfigurationError("n_jobs must be positive, or negative to count back from all cores; 0 is not allowed")
        self.n_folds = n_folds
        self.seed = seed
        self.n_jobs = n_jobs
        self.strict_convergence = strict_convergence

    def folds_for(self, dataset: Dataset) -> FoldAssignment:
        return assign_folds(len(dataset), self.n_folds, self.seed)

    def run(self, dataset: Dataset, candidates: Sequence[Candidate]) -> CrossValidationResult:
        """Score every candidate on every fold and select the best.

        Raises:
            ConfigurationError: If the fold count does not fit the dataset,
                candidate names collide, or a training fold is too small for
                some candidate. Nothing is fitted in that case.
        """
        candidates = list(candidates)
        if not candidates:
            raise ConfigurationError("No candidates to compare")
        names = [c.name for c in candidates]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate candidate names: {duplicates}")

        assignment = self.folds_for(dataset)
        min_train = assignment.min_train_size()
        for candidate in candidates:
            candidate.check_trainable(min_train)

        logger.info(
            "Cross-validating %d candidates on %d records, %d folds (seed=%s)",
            len(candidates), len(dataset), self.n_folds, self.seed,
        )

        splits = list(assignment.splits())
        units = [(candidate, split) for candidate in candidates for split in splits]
        jobs = (
            delayed(_score_fold)(
                candidate,
                dataset.X[train_idx], dataset.y[train_idx],
                dataset.X[test_idx], dataset.y[test_idx],
                self.strict_convergence,
            )
            for candidate, (_, train_idx, test_idx) in units
        )
        if self.n_jobs == 1:
            outcomes = [fn(*args, **kwargs) for fn, args, kwargs in jobs]
        else:
            outcomes = Parallel(n_jobs=self.n_jobs)(jobs)

        result = CrossValidationResult(scores=[], assignment=assignment)
        per_candidate = len(splits)
        for i, candidate in enumerate(candidates):
            chunk = outcomes[i * per_candidate:(i + 1) * per_candidate]
            failures = [
                (fold, reason)
                for (fold, _, _), (_, reason) in zip(splits, chunk)
                if reason is not None
            ]
            if failures:
                fold, reason = failures[0]
                message = f"Excluded '{candidate.name}': fold {fold}: {reason}"
                logger.warning(message)
                result.excluded[candidate.name] = f"fold {fold}: {reason}"
                result.warnings.append(message)
                continue

            fold_scores = [score for score, _ in chunk]
            for fold, score in enumerate(fold_scores, start=1):
                logger.debug("%s fold %d: rmse=%.4f", candidate.name, fold, score)
            mean, se = aggregate_folds(fold_scores)
            result.scores.append(CandidateScore(candidate, fold_scores, mean, se))

        result.selected = select_best(result.scores)
        if result.selected is None:
            result.warnings.append("Every candidate failed; nothing selected.")
            logger.warning("Every candidate failed; nothing selected")
        else:
            logger.info(
                "Selected %s (mean rmse %.4f, se %.4f)",
                result.selected.name, result.selected.mean_rmse, result.selected.std_error,
            )
        return result
