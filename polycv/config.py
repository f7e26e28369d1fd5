"""Study configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from polycv.errors import ConfigurationError


class StudyConfig(BaseModel):
    """Declarative settings for a complexity-selection study."""

    model_config = ConfigDict(extra="forbid")

    data_path: str | None = None
    synthetic_days: int | None = Field(default=None, ge=2)
    feature: str = "min_temp"
    target: str = "trips"

    n_folds: int = Field(default=10, ge=2)
    seed: int = 42
    n_jobs: int = 1
    strict_convergence: bool = True

    min_degree: int = Field(default=1, ge=1)
    max_degree: int = Field(default=8, ge=1)
    validation_fraction: float = Field(default=0.2, gt=0.0, lt=1.0)

    basis_degree: int = Field(default=10, ge=1)
    inner_folds: int = Field(default=5, ge=2)
    ridge_alphas: list[float] | None = None
    lasso_alphas: list[float] | None = None

    plot_dir: str | None = None

    @model_validator(mode="after")
    def _check_ranges(self) -> StudyConfig:
        if self.max_degree < self.min_degree:
            raise ValueError(
                f"max_degree ({self.max_degree}) must be >= min_degree ({self.min_degree})"
            )
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be positive, or negative to count back from all cores; 0 is not allowed")
        for name in ("ridge_alphas", "lasso_alphas"):
            alphas = getattr(self, name)
            if alphas is not None and (not alphas or any(a <= 0 for a in alphas)):
                raise ValueError(f"{name} must be a non-empty list of positive values")
        return self

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> StudyConfig:
        """Read a JSON config file; non-None *overrides* win over file values.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file content is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.build(**data)

    @classmethod
    def build(cls, **values: Any) -> StudyConfig:
        """Validate *values*, reporting problems as ``ConfigurationError``."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
