"""Seeded round-robin fold assignment."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from polycv.errors import ConfigurationError


@dataclass(frozen=True)
class FoldAssignment:
    """Fold id (1..k) for every record index.

    ``fold_ids[i]`` is the fold that holds record ``i`` out.
    """

    fold_ids: np.ndarray
    n_folds: int
    seed: int

    @property
    def n(self) -> int:
        return int(self.fold_ids.shape[0])

    def test_indices(self, fold: int) -> np.ndarray:
        self._check_fold(fold)
        return np.flatnonzero(self.fold_ids == fold)

    def train_indices(self, fold: int) -> np.ndarray:
        self._check_fold(fold)
        return np.flatnonzero(self.fold_ids != fold)

    def splits(self) -> Iterator[tuple[int, np.ndarray, np.ndarray]]:
        """Yield ``(fold, train_idx, test_idx)`` for folds 1..k."""
        for fold in range(1, self.n_folds + 1):
            yield fold, self.train_indices(fold), self.test_indices(fold)

    def sizes(self) -> dict[int, int]:
        counts = np.bincount(self.fold_ids, minlength=self.n_folds + 1)
        return {fold: int(counts[fold]) for fold in range(1, self.n_folds + 1)}

    def min_train_size(self) -> int:
        """Size of the smallest training subset (n minus the largest fold)."""
        return self.n - max(self.sizes().values())

    def _check_fold(self, fold: int):
        if not 1 <= fold <= self.n_folds:
            raise ValueError(f"Fold {fold} out of range [1, {self.n_folds}]")

    def to_dict(self) -> dict:
        return {
            "n": self.n,
            "n_folds": self.n_folds,
            "seed": self.seed,
            "fold_sizes": self.sizes(),
        }


def assign_folds(n: int, n_folds: int, seed: int) -> FoldAssignment:
    """Shuffle ``range(n)`` with *seed* and deal fold ids out round-robin.

    The record at shuffled position ``p`` gets fold ``p % n_folds + 1``,
    so fold sizes are ``ceil(n / k)`` or ``floor(n / k)``. The same
    ``(n, n_folds, seed)`` always gives the same assignment.

    Raises:
        ConfigurationError: If ``n_folds < 2`` or ``n_folds > n``.
    """
    if n_folds < 2:
        raise ConfigurationError(f"Need at least 2 folds, got {n_folds}")
    if n_folds > n:
        raise ConfigurationError(
            f"Cannot split {n} records into {n_folds} folds: at least one fold would be empty"
        )
    order = np.random.default_rng(seed).permutation(n)
    fold_ids = np.empty(n, dtype=int)
    fold_ids[order] = np.arange(n) % n_folds + 1
    fold_ids.setflags(write=False)
    return FoldAssignment(fold_ids=fold_ids, n_folds=n_folds, seed=seed)
