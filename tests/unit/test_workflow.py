"""Tests for polycv.workflow: pipeline and state."""
import pytest

from polycv.models.candidates import polynomial_candidates
from polycv.validation.cross_validator import CrossValidator
from polycv.workflow.pipeline import StudyPipeline
from polycv.workflow.state import StudyState


class TestStudyState:
    def test_immutability(self):
        state = StudyState(study_name="test")
        with pytest.raises(AttributeError):
            state.study_name = "changed"

    def test_with_update(self):
        state = StudyState(study_name="test")
        new_state = state.with_update(data_loaded=True, n_records=12)
        assert new_state.data_loaded is True
        assert new_state.n_records == 12
        assert state.data_loaded is False  # original unchanged

    def test_complete_step(self):
        state = StudyState()
        state2 = state.complete_step("load")
        state3 = state2.complete_step("degree_cv")
        assert state.steps_completed == ()
        assert state2.steps_completed == ("load",)
        assert state3.steps_completed == ("load", "degree_cv")

    def test_with_selection_replaces_previous(self):
        state = StudyState().with_selection("cv", "poly_deg2").with_selection("cv", "poly_deg3")
        assert state.summary()["selected"] == {"cv": "poly_deg3"}


class TestStudyPipeline:
    def test_add_and_run_step(self):
        pipeline = StudyPipeline(name="test")
        pipeline.add_step("load", "Load data", function=lambda results: "loaded")
        assert pipeline.run_step("load") == "loaded"

    def test_steps_see_earlier_results(self):
        pipeline = (
            StudyPipeline(name="test")
            .add_step("a", "First", lambda results: 2)
            .add_step("b", "Second", lambda results: results["a"] * 10)
        )
        assert pipeline.run_all() == {"a": 2, "b": 20}

    def test_duplicate_step_name(self):
        pipeline = StudyPipeline().add_step("a", "A")
        with pytest.raises(ValueError):
            pipeline.add_step("a", "Again")

    def test_missing_step_raises(self):
        with pytest.raises(KeyError):
            StudyPipeline().run_step("nonexistent")

    def test_step_failure(self):
        pipeline = StudyPipeline()

        def fail(results):
            raise RuntimeError("boom")

        pipeline.add_step("bad", "Fails", function=fail)
        with pytest.raises(RuntimeError):
            pipeline.run_step("bad")
        step = pipeline.summary()["steps"][0]
        assert step["status"] == "failed"
        assert step["error"] == "boom"

    def test_get_result(self):
        pipeline = StudyPipeline()
        pipeline.add_step("step", "A step", function=lambda results: 42)
        pipeline.run_step("step")
        assert pipeline.get_result("step") == 42
        assert pipeline.get_result("nonexistent") is None

    def test_state_tracks_dataset_and_selection(self, tiny_dataset):
        validator = CrossValidator(n_folds=5, seed=42)
        pipeline = (
            StudyPipeline(name="study")
            .add_step("load", "Load", lambda results: tiny_dataset)
            .add_step("cv", "CV", lambda results: validator.run(results["load"], polynomial_candidates(2)))
        )
        pipeline.run_all()
        state = pipeline.state
        assert state.data_loaded is True
        assert state.n_records == 10
        assert state.steps_completed == ("load", "cv")
        assert "cv" in state.summary()["selected"]

    def test_summary(self):
        pipeline = StudyPipeline(name="my_pipeline")
        pipeline.add_step("a", "Step A")
        s = pipeline.summary()
        assert s["name"] == "my_pipeline"
        assert len(s["steps"]) == 1
        assert "state" in s
