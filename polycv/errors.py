"""Exceptions raised by polycv."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """The requested run cannot be carried out on this data.

    Raised for fold counts outside ``[2, n]``, candidates whose training
    folds are too small to fit, and unknown or non-numeric columns.
    """


class NumericalFailure(RuntimeError):
    """A candidate fit diverged, failed to converge, or predicted non-finite values."""

    def __init__(self, candidate: str, reason: str):
        super().__init__(f"{candidate}: {reason}")
        self.candidate = candidate
        self.reason = reason
