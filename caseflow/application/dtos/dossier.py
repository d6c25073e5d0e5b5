"""DTOs for dossiers and their audit comments."""

from dataclasses import dataclass
from datetime import datetime

from caseflow.domain.enums import CommentType


@dataclass(frozen=True)
class DossierResult:
    """Dossier read-model (only what progression needs: its world)."""

    id: str
    world_id: str
    title: str | None = None


@dataclass(frozen=True)
class CommentCreate:
    """Audit or user comment to attach to a dossier."""

    dossier_id: str
    content: str
    comment_type: CommentType
    created_by: str | None = None
    workflow_step_id: str | None = None


@dataclass(frozen=True)
class CommentResult:
    id: str
    dossier_id: str
    content: str
    comment_type: CommentType
    created_at: datetime
    created_by: str | None = None
    workflow_step_id: str | None = None
