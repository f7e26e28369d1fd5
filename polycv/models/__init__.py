from polycv.models.candidates import (
    Candidate,
    PolynomialCandidate,
    PenalizedCandidate,
    InnerCVCandidate,
    make_candidate,
    penalized_candidates,
    polynomial_candidates,
)
from polycv.models.fitting import FittedModel, refit
