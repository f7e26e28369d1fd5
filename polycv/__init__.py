"""Model-complexity selection by k-fold cross-validation."""

from polycv.data.dataset import Dataset
from polycv.errors import ConfigurationError, NumericalFailure
from polycv.models.candidates import InnerCVCandidate, PenalizedCandidate, PolynomialCandidate
from polycv.validation.cross_validator import CrossValidationResult, CrossValidator
from polycv.validation.folds import assign_folds

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CrossValidationResult",
    "CrossValidator",
    "Dataset",
    "InnerCVCandidate",
    "NumericalFailure",
    "PenalizedCandidate",
    "PolynomialCandidate",
    "assign_folds",
]
