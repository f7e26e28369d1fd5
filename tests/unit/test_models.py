"""Tests for polycv.models: candidates and refitting."""
import numpy as np
import pytest

from polycv.errors import ConfigurationError
from polycv.models.candidates import (
    DEFAULT_LASSO_ALPHAS,
    DEFAULT_RIDGE_ALPHAS,
    LASSO_TOL,
    InnerCVCandidate,
    PenalizedCandidate,
    PolynomialCandidate,
    make_candidate,
    penalized_candidates,
    polynomial_candidates,
)
from polycv.models.fitting import refit


class TestCandidates:
    def test_polynomial_properties(self):
        c = PolynomialCandidate(3)
        assert c.name == "poly_deg3"
        assert c.n_coefficients == 4
        assert c.min_train_size == 4
        assert c.complexity == (3.0, 0.0)

    def test_polynomial_degree_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            PolynomialCandidate(0)

    def test_check_trainable(self):
        PolynomialCandidate(2).check_trainable(3)
        with pytest.raises(ConfigurationError, match="at least 3"):
            PolynomialCandidate(2).check_trainable(2)

    def test_build_returns_fresh_estimator(self):
        c = PolynomialCandidate(2)
        assert c.build() is not c.build()

    def test_penalized_properties(self):
        c = PenalizedCandidate("lasso", 0.5, basis_degree=10)
        assert c.family == "lasso"
        assert c.name == "lasso_deg10_a0.5"
        assert c.n_coefficients == 11
        assert c.min_train_size == 2

    def test_penalized_validation(self):
        with pytest.raises(ConfigurationError):
            PenalizedCandidate("elastic", 1.0)
        with pytest.raises(ConfigurationError):
            PenalizedCandidate("ridge", 0.0)

    def test_inner_cv_properties(self):
        c = InnerCVCandidate("ridge", basis_degree=8, inner_folds=4)
        assert c.family == "ridge_cv"
        assert c.name == "ridge_cv_deg8"
        assert c.min_train_size == 4
        assert c.alphas == tuple(float(a) for a in DEFAULT_RIDGE_ALPHAS)

    def test_lasso_solver_settings(self):
        fixed = PenalizedCandidate("lasso", 1.0).build().named_steps["model"]
        inner = InnerCVCandidate("lasso").build().named_steps["model"]
        assert fixed.tol == inner.tol == LASSO_TOL
        assert min(DEFAULT_LASSO_ALPHAS) == pytest.approx(1.0)

    def test_inner_cv_needs_two_folds(self):
        with pytest.raises(ConfigurationError):
            InnerCVCandidate("lasso", inner_folds=1)

    def test_polynomial_candidates_range(self):
        names = [c.name for c in polynomial_candidates(8)]
        assert names == [f"poly_deg{d}" for d in range(1, 9)]
        with pytest.raises(ConfigurationError):
            polynomial_candidates(2, min_degree=3)

    def test_penalized_candidates(self):
        cands = penalized_candidates("ridge", [0.1, 1.0], basis_degree=4)
        assert [c.alpha for c in cands] == [0.1, 1.0]

    def test_make_candidate(self):
        assert isinstance(make_candidate({"family": "polynomial", "degree": 2}), PolynomialCandidate)
        assert isinstance(make_candidate({"family": "ridge", "alpha": 1.0}), PenalizedCandidate)
        lasso_cv = make_candidate({"family": "lasso_cv", "basis_degree": 5})
        assert isinstance(lasso_cv, InnerCVCandidate)
        assert lasso_cv.penalty == "lasso"
        with pytest.raises(ConfigurationError, match="Unknown candidate family"):
            make_candidate({"family": "spline"})


class TestRefit:
    def test_recovers_exact_line(self, line_dataset):
        fitted = refit(PolynomialCandidate(1), line_dataset)
        assert fitted.train_rmse == pytest.approx(0.0, abs=1e-8)
        assert fitted.predict([100.0])[0] == pytest.approx(302.0)
        assert fitted.alpha is None

    def test_training_error_falls_with_degree(self, bike_dataset):
        low = refit(PolynomialCandidate(1), bike_dataset)
        high = refit(PolynomialCandidate(6), bike_dataset)
        assert high.train_rmse <= low.train_rmse + 1e-9

    def test_coefficients_per_basis_term(self, bike_dataset):
        fitted = refit(PenalizedCandidate("ridge", 1.0, basis_degree=5), bike_dataset)
        assert list(fitted.coefficients()) == ["x^1", "x^2", "x^3", "x^4", "x^5"]
        assert fitted.alpha == 1.0

    def test_strong_lasso_zeroes_coefficients(self, bike_dataset):
        fitted = refit(PenalizedCandidate("lasso", 1e6, basis_degree=5), bike_dataset)
        d = fitted.to_dict()
        assert d["n_nonzero"] == 0
        assert d["intercept"] == pytest.approx(float(np.mean(bike_dataset.y)), rel=1e-6)

    def test_inner_cv_picks_alpha_from_grid(self, bike_dataset):
        candidate = InnerCVCandidate("ridge", basis_degree=5)
        fitted = refit(candidate, bike_dataset)
        assert min(candidate.alphas) <= fitted.alpha <= max(candidate.alphas)

    def test_too_small_dataset(self, tiny_dataset):
        with pytest.raises(ConfigurationError):
            refit(PolynomialCandidate(10), tiny_dataset)

    def test_to_dict(self, line_dataset):
        d = refit(PolynomialCandidate(2), line_dataset).to_dict()
        assert d["candidate"]["degree"] == 2
        assert d["n_train"] == 40
        assert set(d["coefficients"]) == {"x^1", "x^2"}
