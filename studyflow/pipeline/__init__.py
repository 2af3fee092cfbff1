"""Pipeline orchestration components for StudyFlow."""

from studyflow.pipeline.orchestrator import StudyFlowPipeline
from studyflow.pipeline.progress_tracker import ProgressTracker

__all__ = [
    "ProgressTracker",
    "StudyFlowPipeline",
]
