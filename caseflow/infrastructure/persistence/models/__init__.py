"""ORM models. Importing this package registers every table on Base.metadata."""

from caseflow.infrastructure.persistence.models.dossier import Dossier, DossierComment
from caseflow.infrastructure.persistence.models.progress import DossierWorkflowProgress
from caseflow.infrastructure.persistence.models.side_events import (
    Appointment,
    DossierAttachment,
    DossierStepAnnotation,
    Task,
)
from caseflow.infrastructure.persistence.models.workflow import WorkflowStep, WorkflowTemplate

__all__ = [
    "Appointment",
    "Dossier",
    "DossierAttachment",
    "DossierComment",
    "DossierStepAnnotation",
    "DossierWorkflowProgress",
    "Task",
    "WorkflowStep",
    "WorkflowTemplate",
]
