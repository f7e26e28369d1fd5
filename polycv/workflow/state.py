"""Immutable study progress snapshots."""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

@dataclass(frozen=True)
class StudyState:
    """Snapshot of how far a study has run."""
    study_name: str = ""
    data_loaded: bool = False
    n_records: int = 0
    steps_completed: tuple[str, ...] = ()
    current_step: str = "not_started"
    selected: tuple[tuple[str, str], ...] = ()
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def with_update(self, **kwargs) -> StudyState:
        """Return a new state with the given fields replaced and a fresh timestamp."""
        kwargs["timestamp"] = datetime.now(timezone.utc).isoformat()
        return replace(self, **kwargs)

    def complete_step(self, step_name: str) -> StudyState:
        return self.with_update(steps_completed=self.steps_completed + (step_name,))

    def with_selection(self, step_name: str, candidate: str) -> StudyState:
        """Record the candidate a comparison step picked."""
        kept = tuple((s, c) for s, c in self.selected if s != step_name)
        return self.with_update(selected=kept + ((step_name, candidate),))

    def summary(self) -> dict:
        return {
            "study_name": self.study_name,
            "current_step": self.current_step,
            "data_loaded": self.data_loaded,
            "n_records": self.n_records,
            "steps_completed": list(self.steps_completed),
            "selected": dict(self.selected),
            "timestamp": self.timestamp,
        }
