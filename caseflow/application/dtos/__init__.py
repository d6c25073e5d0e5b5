"""Application DTOs: read-models and write payloads passed across layer boundaries."""

from caseflow.application.dtos.dossier import CommentCreate, CommentResult, DossierResult
from caseflow.application.dtos.progress import (
    ProgressInit,
    ProgressPatch,
    ProgressResult,
    TransitionResult,
)
from caseflow.application.dtos.timeline import (
    DossierTimeline,
    ProgressSummary,
    SideEvent,
    TimelineGroup,
)
from caseflow.application.dtos.workflow import WorkflowOverview

__all__ = [
    "CommentCreate",
    "CommentResult",
    "DossierResult",
    "DossierTimeline",
    "ProgressInit",
    "ProgressPatch",
    "ProgressResult",
    "ProgressSummary",
    "SideEvent",
    "TimelineGroup",
    "TransitionResult",
    "WorkflowOverview",
]
