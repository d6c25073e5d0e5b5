"""Progress repository: per-dossier workflow progress rows (implements IProgressRepository).

Transitions on a dossier are serialized by lock_dossier, which takes
row-level write locks (SELECT ... FOR UPDATE) on all of the dossier's
progress rows. Locks are held until the surrounding transaction
(get_db_transactional) commits or rolls back; a concurrent transition on
the same dossier blocks and then reads the committed state.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.dtos.progress import ProgressPatch, ProgressResult
from caseflow.application.services.progress_init import plan_initial_progress
from caseflow.domain.entities.workflow import WorkflowStepEntity
from caseflow.domain.enums import ProgressStatus
from caseflow.domain.exceptions import AlreadyInitializedError, ResourceNotFoundException
from caseflow.infrastructure.persistence.models.progress import DossierWorkflowProgress
from caseflow.infrastructure.persistence.repositories.base import BaseRepository
from caseflow.shared.utils import utc_now


def _to_result(p: DossierWorkflowProgress) -> ProgressResult:
    """Map DossierWorkflowProgress ORM to ProgressResult DTO."""
    return ProgressResult(
        id=p.id,
        dossier_id=p.dossier_id,
        workflow_step_id=p.workflow_step_id,
        status=ProgressStatus(p.status),
        started_at=p.started_at,
        completed_at=p.completed_at,
        completed_by=p.completed_by,
        decision_taken=p.decision_taken,
        notes=p.notes,
        form_data=p.form_data,
    )


class ProgressRepository(BaseRepository[DossierWorkflowProgress]):
    """Progress store. Implements IProgressRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DossierWorkflowProgress)

    async def _rows(self, dossier_id: str, *, for_update: bool = False) -> list[DossierWorkflowProgress]:
        stmt = (
            select(DossierWorkflowProgress)
            .where(DossierWorkflowProgress.dossier_id == dossier_id)
            .order_by(DossierWorkflowProgress.id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def initialize_progress(
        self,
        dossier_id: str,
        steps: list[WorkflowStepEntity],
        now: datetime | None = None,
    ) -> list[ProgressResult]:
        """Insert one row per step (first step in_progress, others pending).

        The (dossier_id, workflow_step_id) unique constraint backs the
        existence check against concurrent initialization.
        """
        if await self._rows(dossier_id):
            raise AlreadyInitializedError(dossier_id)
        plan = plan_initial_progress(steps, now or utc_now())
        rows = [
            DossierWorkflowProgress(
                dossier_id=dossier_id,
                workflow_step_id=item.workflow_step_id,
                status=item.status.value,
                started_at=item.started_at,
            )
            for item in plan
        ]
        self.db.add_all(rows)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise AlreadyInitializedError(dossier_id) from e
        return [_to_result(r) for r in rows]

    async def get_progress(self, dossier_id: str) -> list[ProgressResult]:
        return [_to_result(r) for r in await self._rows(dossier_id)]

    async def apply_transition(self, progress_id: str, patch: ProgressPatch) -> ProgressResult:
        row = await self.get_by_id(progress_id)
        if not row:
            raise ResourceNotFoundException("dossier_workflow_progress", progress_id)
        row.status = patch.status.value
        row.started_at = patch.started_at
        row.completed_at = patch.completed_at
        row.completed_by = patch.completed_by
        row.decision_taken = patch.decision_taken
        row.notes = patch.notes
        row.form_data = patch.form_data
        row = await self.save(row)
        return _to_result(row)

    @asynccontextmanager
    async def lock_dossier(self, dossier_id: str) -> AsyncIterator[list[ProgressResult]]:
        """Lock the dossier's progress rows for the rest of the transaction; yield them."""
        rows = await self._rows(dossier_id, for_update=True)
        yield [_to_result(r) for r in rows]
