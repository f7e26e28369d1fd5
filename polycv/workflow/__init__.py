from polycv.workflow.pipeline import StudyPipeline, PipelineStep
from polycv.workflow.state import StudyState
