"""
Figures for model-complexity comparisons:
- Cross-validated RMSE with standard-error bars
- Training vs validation RMSE from a single split
- Fitted curves over the data
- Coefficient magnitudes of regularized fits
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from polycv.data.dataset import Dataset
from polycv.models.fitting import FittedModel
from polycv.validation.cross_validator import CrossValidationResult
from polycv.validation.holdout import HoldoutResult


class Visualizer:
    """Build figures from result tables and keep them until saved."""

    def __init__(self, figsize: tuple[int, int] = (8, 5), dpi: int = 150):
        self.figsize = figsize
        self.dpi = dpi
        self.figures: dict[str, plt.Figure] = {}

    def _store(self, prefix: str, fig: plt.Figure) -> plt.Figure:
        self.figures[f"{prefix}_{len(self.figures)}"] = fig
        return fig

    def create_cv_curve(
        self, result: CrossValidationResult, title: str = "Cross-validated RMSE",
    ) -> plt.Figure:
        """Mean held-out RMSE per candidate with one-standard-error bars."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        frame = result.to_frame()
        x = np.arange(len(frame))
        ax.errorbar(
            x, frame["mean_rmse"], yerr=frame["std_error"],
            fmt="o-", capsize=4, color="tab:blue", label="mean ± 1 SE",
        )
        if result.selected is not None:
            best = frame.index[frame["candidate"] == result.selected.name][0]
            ax.plot(x[best], frame["mean_rmse"].iloc[best], "r*", markersize=14, label="selected")

        ax.set_xticks(x)
        ax.set_xticklabels(frame["candidate"], rotation=45, ha="right")
        ax.set_ylabel("RMSE")
        ax.set_title(f"{title} ({result.assignment.n_folds}-fold)")
        ax.legend()
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        return self._store("cv_curve", fig)

    def create_holdout_curve(
        self, result: HoldoutResult, title: str = "Training vs validation RMSE",
    ) -> plt.Figure:
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        frame = result.to_frame()
        x = np.arange(len(frame))
        ax.plot(x, frame["train_rmse"], "o-", label="training")
        ax.plot(x, frame["validation_rmse"], "s-", label="validation")

        ax.set_xticks(x)
        ax.set_xticklabels(frame["candidate"], rotation=45, ha="right")
        ax.set_ylabel("RMSE")
        ax.set_title(title)
        ax.legend()
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        return self._store("holdout_curve", fig)

    def create_fit_plot(
        self,
        dataset: Dataset,
        models: Sequence[FittedModel],
        title: str = "Fitted curves",
        n_grid: int = 200,
    ) -> plt.Figure:
        """Scatter the data and overlay each fitted model's prediction curve."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        ax.scatter(dataset.feature, dataset.target, s=10, alpha=0.4, color="gray", label="observed")
        grid = np.linspace(dataset.feature.min(), dataset.feature.max(), n_grid)
        for model in models:
            ax.plot(grid, model.predict(grid), lw=2, label=model.candidate.name)

        ax.set_xlabel(dataset.feature_name)
        ax.set_ylabel(dataset.target_name)
        ax.set_title(title)
        ax.legend()
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        return self._store("fit_plot", fig)

    def create_coefficient_plot(
        self, models: Sequence[FittedModel], title: str = "Coefficient magnitudes",
    ) -> plt.Figure:
        """Absolute coefficient per basis term, one bar group per model."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        width = 0.8 / max(len(models), 1)
        for i, model in enumerate(models):
            coefs = model.coefficients()
            x = np.arange(len(coefs))
            ax.bar(x + i * width, np.abs(list(coefs.values())), width=width, label=model.candidate.name)
            ax.set_xticks(x + width * (len(models) - 1) / 2)
            ax.set_xticklabels(list(coefs.keys()))

        ax.set_yscale("symlog")
        ax.set_ylabel("|coefficient|")
        ax.set_title(title)
        ax.legend()
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        return self._store("coefficients", fig)

    def save_all_figures(
        self, output_dir: str | Path = "./figures", formats: Sequence[str] = ("png",),
    ) -> dict[str, list[str]]:
        """Save every stored figure and close it."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        saved: dict[str, list[str]] = {}
        for figure_id, fig in self.figures.items():
            paths = []
            for fmt in formats:
                path = output_dir / f"{figure_id}.{fmt}"
                fig.savefig(path, format=fmt, dpi=self.dpi, bbox_inches="tight")
                paths.append(str(path))
            saved[figure_id] = paths
            plt.close(fig)
        self.figures.clear()
        return saved
