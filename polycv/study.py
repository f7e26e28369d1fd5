"""The complete complexity-selection study as a pipeline.

Steps, in order:

1. ``load``: read the table (or generate a synthetic one) into a Dataset.
2. ``holdout``: polynomial degrees on one train/validation split.
3. ``degree_cv``: the same degrees under k-fold cross-validation.
4. ``ridge`` / ``lasso``: fixed penalties and an inner-CV penalty on a
   high-degree basis, cross-validated the same way.
5. ``refit``: the winner of each comparison refit on all records.
6. ``plots``: figures written to ``plot_dir`` (only when it is set).
"""
from __future__ import annotations

import logging
from typing import Any

from polycv.config import StudyConfig
from polycv.data.dataset import Dataset
from polycv.data.loader import DataLoader
from polycv.data.synthetic import generate_bike_weather
from polycv.errors import ConfigurationError, NumericalFailure
from polycv.models.candidates import (
    Candidate,
    InnerCVCandidate,
    penalized_candidates,
    polynomial_candidates,
)
from polycv.models.fitting import refit
from polycv.validation.cross_validator import CrossValidator
from polycv.validation.holdout import HoldoutEvaluator
from polycv.workflow.pipeline import StudyPipeline

logger = logging.getLogger(__name__)

DEFAULT_RIDGE_SWEEP = [0.001, 0.1, 10.0, 1000.0]
DEFAULT_LASSO_SWEEP = [1.0, 10.0, 100.0, 1000.0]

COMPARISON_STEPS = ("degree_cv", "ridge", "lasso")


def load_dataset(config: StudyConfig) -> Dataset:
    if config.data_path:
        return DataLoader().load_dataset(config.data_path, config.feature, config.target)
    if config.synthetic_days:
        df = generate_bike_weather(n_days=config.synthetic_days, seed=config.seed)
        return Dataset.from_frame(df, feature=config.feature, target=config.target)
    raise ConfigurationError("Set either data_path or synthetic_days")


def regularized_candidates(config: StudyConfig, penalty: str) -> list[Candidate]:
    sweep = config.ridge_alphas if penalty == "ridge" else config.lasso_alphas
    if sweep is None:
        sweep = DEFAULT_RIDGE_SWEEP if penalty == "ridge" else DEFAULT_LASSO_SWEEP
    candidates: list[Candidate] = list(
        penalized_candidates(penalty, sweep, basis_degree=config.basis_degree)
    )
    candidates.append(
        InnerCVCandidate(penalty, basis_degree=config.basis_degree, inner_folds=config.inner_folds)
    )
    return candidates


def build_study(config: StudyConfig, name: str = "polycv") -> StudyPipeline:
    """Assemble the study steps for *config* without running them."""
    validator = CrossValidator(
        n_folds=config.n_folds,
        seed=config.seed,
        n_jobs=config.n_jobs,
        strict_convergence=config.strict_convergence,
    )
    degrees = polynomial_candidates(config.max_degree, config.min_degree)

    def holdout(results: dict[str, Any]):
        evaluator = HoldoutEvaluator(
            validation_fraction=config.validation_fraction,
            seed=config.seed,
            strict_convergence=config.strict_convergence,
        )
        return evaluator.run(results["load"], degrees)

    def refit_selected(results: dict[str, Any]):
        dataset = results["load"]
        fitted = {}
        for step in COMPARISON_STEPS:
            selected = results[step].selected
            if selected is None:
                continue
            try:
                fitted[step] = refit(selected.candidate, dataset, config.strict_convergence)
            except NumericalFailure as exc:
                logger.warning("Refit of %s failed: %s", selected.candidate.name, exc.reason)
        return fitted

    pipeline = (
        StudyPipeline(name=name)
        .add_step("load", "Load feature/target data", lambda results: load_dataset(config))
        .add_step("holdout", "Polynomial degrees on a single split", holdout)
        .add_step(
            "degree_cv", "Polynomial degrees under k-fold CV",
            lambda results: validator.run(results["load"], degrees),
        )
        .add_step(
            "ridge", "Ridge penalties on a high-degree basis",
            lambda results: validator.run(results["load"], regularized_candidates(config, "ridge")),
        )
        .add_step(
            "lasso", "Lasso penalties on a high-degree basis",
            lambda results: validator.run(results["load"], regularized_candidates(config, "lasso")),
        )
        .add_step("refit", "Refit each selected candidate on all records", refit_selected)
    )
    if config.plot_dir:
        pipeline.add_step(
            "plots", f"Write figures to {config.plot_dir}",
            lambda results: render_figures(results, config.plot_dir),
        )
    return pipeline


def render_figures(results: dict[str, Any], plot_dir: str) -> dict[str, list[str]]:
    from polycv.reporting.plots import Visualizer

    viz = Visualizer()
    viz.create_holdout_curve(results["holdout"])
    for step in COMPARISON_STEPS:
        if results[step].scores:
            viz.create_cv_curve(results[step], title=f"Cross-validated RMSE: {step}")
    fitted = results["refit"]
    if fitted:
        viz.create_fit_plot(results["load"], list(fitted.values()))
    penalized = [fitted[s] for s in ("ridge", "lasso") if s in fitted]
    if penalized:
        viz.create_coefficient_plot(penalized)
    return viz.save_all_figures(plot_dir)


def study_report(pipeline: StudyPipeline) -> dict[str, Any]:
    """JSON-ready summary of every completed step."""
    results = pipeline.results
    report: dict[str, Any] = {"summary": pipeline.summary()}
    if "load" in results:
        report["data"] = results["load"].summary()
    for step in ("holdout",) + COMPARISON_STEPS:
        if step in results:
            report[step] = results[step].to_dict()
    if "refit" in results:
        report["refit"] = {step: model.to_dict() for step, model in results["refit"].items()}
    if "plots" in results:
        report["figures"] = results["plots"]
    return report


def run_study(config: StudyConfig) -> dict[str, Any]:
    """Build, run and summarize the study."""
    pipeline = build_study(config)
    pipeline.run_all()
    return study_report(pipeline)
