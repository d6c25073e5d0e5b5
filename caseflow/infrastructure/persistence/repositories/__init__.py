"""SQLAlchemy repositories implementing the application ports."""

from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.infrastructure.persistence.repositories.dossier_repo import (
    CommentRepository,
    DossierRepository,
)
from caseflow.infrastructure.persistence.repositories.progress_repo import ProgressRepository
from caseflow.infrastructure.persistence.repositories.side_event_repo import SideEventRepository
from caseflow.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "DossierRepository",
    "ProgressRepository",
    "SideEventRepository",
    "WorkflowRepository",
]
