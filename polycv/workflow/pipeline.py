"""Study pipeline for chaining load, compare and refit steps."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable
from polycv.data.dataset import Dataset
from polycv.workflow.state import StudyState

logger = logging.getLogger(__name__)

@dataclass
class PipelineStep:
    name: str
    description: str
    function: Callable[[dict[str, Any]], Any] | None = None
    result: Any = None
    status: str = "pending"  # pending, running, completed, failed
    error: str = ""

class StudyPipeline:
    """Run named steps in order; each step receives the results of earlier ones."""

    def __init__(self, name: str = ""):
        self.name = name
        self._steps: list[PipelineStep] = []
        self._state = StudyState(study_name=name)
        self._results: dict[str, Any] = {}

    @property
    def state(self) -> StudyState:
        return self._state

    @property
    def results(self) -> dict[str, Any]:
        return dict(self._results)

    def add_step(
        self, name: str, description: str, function: Callable[[dict[str, Any]], Any] | None = None,
    ) -> StudyPipeline:
        if any(step.name == name for step in self._steps):
            raise ValueError(f"Step '{name}' already defined")
        self._steps.append(PipelineStep(name=name, description=description, function=function))
        return self

    def run_step(self, step_name: str) -> Any:
        """Run a specific step by name."""
        for step in self._steps:
            if step.name == step_name:
                step.status = "running"
                self._state = self._state.with_update(current_step=step_name)
                logger.info("Step %s: %s", step.name, step.description)
                try:
                    result = step.function(self.results) if step.function else None
                except Exception as e:
                    step.status = "failed"
                    step.error = str(e)
                    logger.error("Step %s failed: %s", step.name, e)
                    raise
                step.result = result
                step.status = "completed"
                self._results[step_name] = result
                self._record(step_name, result)
                return result
        raise KeyError(f"Step '{step_name}' not found")

    def run_all(self) -> dict[str, Any]:
        """Run all steps in order, skipping those already completed."""
        for step in self._steps:
            if step.status != "completed":
                self.run_step(step.name)
        return self.results

    def get_result(self, step_name: str) -> Any:
        return self._results.get(step_name)

    def _record(self, step_name: str, result: Any):
        state = self._state.complete_step(step_name)
        if isinstance(result, Dataset):
            state = state.with_update(data_loaded=True, n_records=len(result))
        selected = getattr(result, "selected", None)
        if selected is not None:
            state = state.with_selection(step_name, selected.candidate.name)
        self._state = state

    def summary(self) -> dict:
        return {
            "name": self.name,
            "steps": [
                {"name": s.name, "status": s.status, "description": s.description, "error": s.error}
                for s in self._steps
            ],
            "state": self._state.summary(),
        }
