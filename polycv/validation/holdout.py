"""Single train/validation split evaluation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd

from polycv.data.dataset import Dataset
from polycv.errors import ConfigurationError, NumericalFailure
from polycv.metrics import rmse
from polycv.models.candidates import Candidate
from polycv.models.fitting import fit_estimator, predict_finite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldoutSplit:
    train_idx: np.ndarray
    validation_idx: np.ndarray
    seed: int

    def to_dict(self) -> dict:
        return {
            "n_train": int(self.train_idx.size),
            "n_validation": int(self.validation_idx.size),
            "seed": self.seed,
        }


def holdout_split(n: int, validation_fraction: float = 0.2, seed: int = 42) -> HoldoutSplit:
    """Shuffle ``range(n)`` and hold the first ``round(n * fraction)`` out.

    Both sides always get at least one record.

    Raises:
        ConfigurationError: If the fraction is outside (0, 1) or ``n < 2``.
    """
    if not 0.0 < validation_fraction < 1.0:
        raise ConfigurationError(
            f"validation_fraction must be in (0, 1), got {validation_fraction}"
        )
    if n < 2:
        raise ConfigurationError(f"Need at least 2 records to split, got {n}")
    n_val = min(max(int(round(n * validation_fraction)), 1), n - 1)
    order = np.random.default_rng(seed).permutation(n)
    return HoldoutSplit(
        train_idx=np.sort(order[n_val:]),
        validation_idx=np.sort(order[:n_val]),
        seed=seed,
    )


@dataclass
class HoldoutScore:
    candidate: Candidate
    train_rmse: float
    validation_rmse: float

    def to_dict(self) -> dict:
        return {
            "candidate": self.candidate.name,
            "train_rmse": round(self.train_rmse, 4),
            "validation_rmse": round(self.validation_rmse, 4),
        }


@dataclass
class HoldoutResult:
    split: HoldoutSplit
    scores: list[HoldoutScore]
    selected: HoldoutScore | None = None
    excluded: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "candidate": s.candidate.name,
                    "complexity": s.candidate.complexity[0],
                    "train_rmse": s.train_rmse,
                    "validation_rmse": s.validation_rmse,
                }
                for s in self.scores
            ],
            columns=["candidate", "complexity", "train_rmse", "validation_rmse"],
        )

    def to_dict(self) -> dict:
        return {
            "analysis_type": "holdout",
            "split": self.split.to_dict(),
            "table": [s.to_dict() for s in self.scores],
            "selected": self.selected.candidate.name if self.selected else None,
            "excluded": self.excluded,
            "warnings": self.warnings,
        }


class HoldoutEvaluator:
    """Fit each candidate on one training part and score it on the rest.

    This is the quick look before cross-validation: training error keeps
    falling with complexity while validation error turns back up.
    """

    def __init__(self, validation_fraction: float = 0.2, seed: int = 42, strict_convergence: bool = True):
        self.validation_fraction = validation_fraction
        self.seed = seed
        self.strict_convergence = strict_convergence

    def run(self, dataset: Dataset, candidates: Sequence[Candidate]) -> HoldoutResult:
        split = holdout_split(len(dataset), self.validation_fraction, self.seed)
        train = dataset.subset(split.train_idx)
        valid = dataset.subset(split.validation_idx)
        for candidate in candidates:
            candidate.check_trainable(len(train))

        result = HoldoutResult(split=split, scores=[])
        for candidate in candidates:
            try:
                estimator = fit_estimator(candidate, train.X, train.y, self.strict_convergence)
                train_pred = predict_finite(candidate, estimator, train.X)
                valid_pred = predict_finite(candidate, estimator, valid.X)
            except NumericalFailure as exc:
                message = f"Excluded '{candidate.name}': {exc.reason}"
                logger.warning(message)
                result.excluded[candidate.name] = exc.reason
                result.warnings.append(message)
                continue
            result.scores.append(
                HoldoutScore(candidate, rmse(train.y, train_pred), rmse(valid.y, valid_pred))
            )

        if result.scores:
            result.selected = min(
                enumerate(result.scores),
                key=lambda item: (item[1].validation_rmse, item[1].candidate.complexity, item[0]),
            )[1]
            logger.info(
                "Holdout: best validation rmse %.4f from %s",
                result.selected.validation_rmse, result.selected.candidate.name,
            )
        return result
