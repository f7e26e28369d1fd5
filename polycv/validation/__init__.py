from polycv.validation.folds import FoldAssignment, assign_folds
from polycv.validation.cross_validator import (
    CandidateScore,
    CrossValidationResult,
    CrossValidator,
    select_best,
)
from polycv.validation.holdout import HoldoutEvaluator, HoldoutResult, holdout_split
