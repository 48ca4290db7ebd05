"""Recommendation pipeline and calendar reconciliation."""

from .errors import PipelineStageError
from .pipeline import SchedulingPipeline
from .reconciler import ActionReconciler
from .report import RunReport
from .types import ActionOutcome, OutcomeStatus, ReportEntry

__all__ = [
    "ActionOutcome",
    "ActionReconciler",
    "OutcomeStatus",
    "PipelineStageError",
    "ReportEntry",
    "RunReport",
    "SchedulingPipeline",
]
