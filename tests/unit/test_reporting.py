"""Tests for polycv.reporting."""
import matplotlib.pyplot as plt
import pytest

from polycv.models.candidates import PenalizedCandidate, PolynomialCandidate, polynomial_candidates
from polycv.models.fitting import refit
from polycv.reporting.plots import Visualizer
from polycv.validation.cross_validator import CrossValidator
from polycv.validation.holdout import HoldoutEvaluator


@pytest.fixture
def cv_result(bike_dataset):
    return CrossValidator(n_folds=4, seed=0).run(bike_dataset, polynomial_candidates(3))


class TestVisualizer:
    def test_cv_curve(self, cv_result):
        viz = Visualizer()
        fig = viz.create_cv_curve(cv_result)
        assert isinstance(fig, plt.Figure)
        assert list(viz.figures) == ["cv_curve_0"]
        plt.close(fig)

    def test_holdout_curve(self, bike_dataset):
        viz = Visualizer()
        result = HoldoutEvaluator().run(bike_dataset, polynomial_candidates(3))
        fig = viz.create_holdout_curve(result)
        assert len(fig.axes[0].lines) == 2
        plt.close(fig)

    def test_fit_and_coefficient_plots(self, bike_dataset):
        viz = Visualizer()
        models = [
            refit(PolynomialCandidate(2), bike_dataset),
            refit(PenalizedCandidate("ridge", 1.0, basis_degree=4), bike_dataset),
        ]
        viz.create_fit_plot(bike_dataset, models)
        viz.create_coefficient_plot(models[1:])
        assert set(viz.figures) == {"fit_plot_0", "coefficients_1"}
        for fig in viz.figures.values():
            plt.close(fig)

    def test_save_all_figures(self, cv_result, tmp_path):
        viz = Visualizer(dpi=50)
        viz.create_cv_curve(cv_result)
        saved = viz.save_all_figures(tmp_path, formats=("png",))
        paths = saved["cv_curve_0"]
        assert len(paths) == 1
        assert (tmp_path / "cv_curve_0.png").exists()
        assert viz.figures == {}
