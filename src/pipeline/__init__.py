"""
Orchestration of a full checklist run.

preprocess -> year detection -> quadrant split -> per-quadrant recognition,
row grouping and extraction (thread pool) -> reconciliation -> review.

Failures surface as exceptions from `errors`; saving reviewed records goes
through a `SubjectSink`.
"""

from .config import PipelineConfig
from .errors import EmptyResult, PersistenceFailure, PipelineError, ProcessingException, ValidationRejection
from .module import run_curriculum_pipeline
from .persistence import JsonFileSink, SubjectSink, persist_subjects, serialize_subjects
from .states import ALLOWED_TRANSITIONS, TERMINAL_STATES, InvalidTransition, PipelineRun, PipelineState

__all__ = [
    "ALLOWED_TRANSITIONS",
    "EmptyResult",
    "InvalidTransition",
    "JsonFileSink",
    "PersistenceFailure",
    "PipelineConfig",
    "PipelineError",
    "PipelineRun",
    "PipelineState",
    "ProcessingException",
    "SubjectSink",
    "TERMINAL_STATES",
    "ValidationRejection",
    "persist_subjects",
    "run_curriculum_pipeline",
    "serialize_subjects",
]
