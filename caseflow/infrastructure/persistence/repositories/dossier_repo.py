"""Dossier and comment repositories (implement IDossierRepository, ICommentRepository)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.dossier import CommentCreate, CommentResult, DossierResult
from caseflow.domain.enums import CommentType
from caseflow.infrastructure.persistence.models.dossier import Dossier, DossierComment
from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class DossierRepository(BaseRepository[Dossier]):
    """Read-only access to dossiers. Implements IDossierRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Dossier)

    async def get_by_id(self, dossier_id: str) -> DossierResult | None:  # type: ignore[override]
        dossier = await super().get_by_id(dossier_id)
        if not dossier:
            return None
        return DossierResult(id=dossier.id, world_id=dossier.world_id, title=dossier.title)


def _comment_to_result(c: DossierComment) -> CommentResult:
    return CommentResult(
        id=c.id,
        dossier_id=c.dossier_id,
        content=c.content,
        comment_type=CommentType(c.comment_type),
        created_at=c.created_at,
        created_by=c.user_id,
        workflow_step_id=(c.comment_metadata or {}).get("workflow_step_id"),
    )


class CommentRepository(BaseRepository[DossierComment]):
    """Appends dossier comments. Implements ICommentRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DossierComment)

    async def create_comment(self, data: CommentCreate) -> CommentResult:
        comment = DossierComment(
            dossier_id=data.dossier_id,
            user_id=data.created_by,
            content=data.content,
            comment_type=data.comment_type.value,
            comment_metadata=(
                {"workflow_step_id": data.workflow_step_id} if data.workflow_step_id else None
            ),
        )
        comment = await self.create(comment)
        return _comment_to_result(comment)

    async def _on_after_create(self, obj: DossierComment) -> None:
        logger.debug(
            "Dossier comment created: dossier=%s type=%s id=%s",
            obj.dossier_id,
            obj.comment_type,
            obj.id,
        )
