"""Tests for polycv.metrics."""
import math

import numpy as np
import pytest

from polycv.metrics import aggregate_folds, rmse, standard_error


class TestRMSE:
    def test_known_value(self):
        assert rmse([0.0, 0.0, 0.0, 0.0], [1.0, -1.0, 1.0, -1.0]) == pytest.approx(1.0)

    def test_perfect_prediction(self):
        assert rmse([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            rmse([1.0, 2.0], [1.0])

    def test_empty(self):
        with pytest.raises(ValueError):
            rmse([], [])


class TestStandardError:
    def test_identical_values_give_zero(self):
        assert standard_error([1.5, 1.5, 1.5, 1.5, 1.5]) == 0.0

    def test_matches_sample_stdev_over_sqrt_k(self):
        values = [1.0, 2.0, 4.0, 7.0]
        expected = np.std(values, ddof=1) / math.sqrt(len(values))
        assert standard_error(values) == pytest.approx(expected)

    def test_non_negative(self):
        assert standard_error([3.0, -1.0, 10.0]) >= 0.0

    def test_single_value(self):
        assert standard_error([2.0]) == 0.0


class TestAggregateFolds:
    def test_unweighted_mean(self):
        mean, se = aggregate_folds([1.0, 2.0, 6.0])
        assert mean == pytest.approx(3.0)
        assert se == pytest.approx(np.std([1.0, 2.0, 6.0], ddof=1) / math.sqrt(3))
