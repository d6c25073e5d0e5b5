"""Side-event repository: timeline events of a dossier (implements ISideEventRepository).

Timestamps: created_at for every kind except appointments, which sit at their
scheduled start_time.

Tasks belong to the dossier by dossier_id. A task with no dossier_id that
hangs off one of the template's steps is shared by every dossier on that
template and is included too; a task owned by another dossier never is.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.timeline import SideEvent
from caseflow.domain.enums import SideEventKind
from caseflow.infrastructure.persistence.models.dossier import DossierComment
from caseflow.infrastructure.persistence.models.side_events import (
    Appointment,
    DossierAttachment,
    DossierStepAnnotation,
    Task,
)
from caseflow.shared.utils import ensure_utc


def task_condition(dossier_id: str, step_ids: list[str]) -> ColumnElement[bool]:
    """WHERE clause for the tasks shown on a dossier's timeline."""
    condition = Task.dossier_id == dossier_id
    if step_ids:
        condition = or_(
            condition,
            and_(Task.dossier_id.is_(None), Task.workflow_step_id.in_(step_ids)),
        )
    return condition


def appointment_event(a: Appointment) -> SideEvent:
    return SideEvent(
        kind=SideEventKind.APPOINTMENT,
        id=a.id,
        timestamp=ensure_utc(a.start_time),  # type: ignore[arg-type]
        title=a.title,
        content=a.description,
        status=a.status,
        created_by=a.user_id,
        workflow_step_id=a.workflow_step_id,
    )


class SideEventRepository:
    """Reads comments, documents, tasks, appointments and annotations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_dossier(self, dossier_id: str, step_ids: list[str]) -> list[SideEvent]:
        events: list[SideEvent] = []
        events.extend(await self._comments(dossier_id))
        events.extend(await self._documents(dossier_id))
        events.extend(await self._tasks(dossier_id, step_ids))
        events.extend(await self._appointments(dossier_id))
        events.extend(await self._annotations(dossier_id))
        return events

    async def _comments(self, dossier_id: str) -> list[SideEvent]:
        result = await self.db.execute(
            select(DossierComment).where(DossierComment.dossier_id == dossier_id)
        )
        return [
            SideEvent(
                kind=SideEventKind.COMMENT,
                id=c.id,
                timestamp=ensure_utc(c.created_at),  # type: ignore[arg-type]
                title=c.comment_type,
                content=c.content,
                created_by=c.user_id,
                workflow_step_id=(c.comment_metadata or {}).get("workflow_step_id"),
            )
            for c in result.scalars().all()
        ]

    async def _documents(self, dossier_id: str) -> list[SideEvent]:
        result = await self.db.execute(
            select(DossierAttachment).where(DossierAttachment.dossier_id == dossier_id)
        )
        return [
            SideEvent(
                kind=SideEventKind.DOCUMENT,
                id=d.id,
                timestamp=ensure_utc(d.created_at),  # type: ignore[arg-type]
                title=d.file_name,
                content=d.document_type,
                created_by=d.uploaded_by,
                workflow_step_id=d.workflow_step_id,
            )
            for d in result.scalars().all()
        ]

    async def _tasks(self, dossier_id: str, step_ids: list[str]) -> list[SideEvent]:
        result = await self.db.execute(select(Task).where(task_condition(dossier_id, step_ids)))
        return [
            SideEvent(
                kind=SideEventKind.TASK,
                id=t.id,
                timestamp=ensure_utc(t.created_at),  # type: ignore[arg-type]
                title=t.title,
                content=t.description,
                status=t.status,
                created_by=t.created_by,
                assigned_to=t.assigned_to,
                workflow_step_id=t.workflow_step_id,
            )
            for t in result.scalars().all()
        ]

    async def _appointments(self, dossier_id: str) -> list[SideEvent]:
        result = await self.db.execute(
            select(Appointment).where(Appointment.dossier_id == dossier_id)
        )
        return [appointment_event(a) for a in result.scalars().all()]

    async def _annotations(self, dossier_id: str) -> list[SideEvent]:
        result = await self.db.execute(
            select(DossierStepAnnotation).where(DossierStepAnnotation.dossier_id == dossier_id)
        )
        return [
            SideEvent(
                kind=SideEventKind.ANNOTATION,
                id=n.id,
                timestamp=ensure_utc(n.created_at),  # type: ignore[arg-type]
                title=n.title,
                content=n.content,
                created_by=n.created_by,
                workflow_step_id=n.workflow_step_id,
            )
            for n in result.scalars().all()
        ]
