"""Workflow engine: authoritative step transitions for a dossier.

Every transition runs inside ProgressRepository.lock_dossier so that two
concurrent completions of the same step serialize: the second observes the
committed state and fails with AlreadyCompletedError. The audit comment is
written through the same session, so it commits or rolls back with the
progress mutation.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from caseflow.application.dtos.dossier import CommentCreate, DossierResult
from caseflow.application.dtos.progress import ProgressResult, TransitionResult
from caseflow.application.interfaces.repositories import (
    ICommentRepository,
    IDossierRepository,
    IProgressRepository,
    IWorkflowRepository,
)
from caseflow.application.services.form_validator import validate_form_data
from caseflow.application.use_cases.workflow.progress_operations import get_dossier_or_raise
from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.entities.workflow import WorkflowStepEntity, resolve_successors
from caseflow.domain.enums import CommentType, ProgressStatus
from caseflow.domain.exceptions import (
    AlreadyCompletedError,
    DecisionRequiredError,
    InvalidStatusChangeError,
    LoopBackNotAllowedError,
    ProgressNotFoundError,
    StepNotActiveError,
    StepNotFoundError,
)
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils import utc_now

logger = get_logger(__name__)

# Administrative status changes: current status -> allowed targets.
_ADMIN_TRANSITIONS: dict[ProgressStatus, frozenset[ProgressStatus]] = {
    ProgressStatus.PENDING: frozenset({ProgressStatus.BLOCKED, ProgressStatus.SKIPPED}),
    ProgressStatus.IN_PROGRESS: frozenset({ProgressStatus.BLOCKED, ProgressStatus.SKIPPED}),
    ProgressStatus.BLOCKED: frozenset(
        {ProgressStatus.PENDING, ProgressStatus.IN_PROGRESS, ProgressStatus.SKIPPED}
    ),
    ProgressStatus.SKIPPED: frozenset({ProgressStatus.PENDING}),
    ProgressStatus.COMPLETED: frozenset(),
}


def _find_row(rows: list[ProgressResult], dossier_id: str, step_id: str) -> ProgressResult:
    for row in rows:
        if row.workflow_step_id == step_id:
            return row
    raise ProgressNotFoundError(dossier_id, step_id)


class WorkflowEngine:
    """Completes, decides, reopens and administratively sets dossier workflow steps."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        dossier_repo: IDossierRepository,
        progress_repo: IProgressRepository,
        comment_repo: ICommentRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.dossier_repo = dossier_repo
        self.progress_repo = progress_repo
        self.comment_repo = comment_repo
        self._clock = clock or utc_now

    def _now(self) -> datetime:
        return self._clock()

    async def _load(
        self, dossier_id: str, step_id: str
    ) -> tuple[WorkflowStepEntity, DossierResult]:
        step = await self.workflow_repo.get_step(step_id)
        if not step:
            raise StepNotFoundError(step_id)
        dossier = await get_dossier_or_raise(self.dossier_repo, dossier_id)
        return step, dossier

    async def complete_step(
        self,
        dossier_id: str,
        step_id: str,
        acting_user: ActingUser,
        *,
        decision: bool | None = None,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
        completed_by: str | None = None,
    ) -> TransitionResult:
        """Complete a step and activate its pending successors.

        Args:
            dossier_id: Dossier id.
            step_id: Workflow step id.
            acting_user: Caller; needs write access to the dossier's world.
            decision: Yes/no for decision steps; ignored for other steps.
            notes: Free text stored on the progress row.
            form_data: Values for the step's form fields.
            completed_by: User recorded as completer (defaults to acting_user.id).

        Returns:
            TransitionResult with the dossier's progress and activated step ids.

        Raises:
            StepNotFoundError, ProgressNotFoundError, AlreadyCompletedError,
            StepNotActiveError, DecisionRequiredError, ValidationError,
            AuthorizationException.
        """
        step, dossier = await self._load(dossier_id, step_id)
        acting_user.require_write(dossier.world_id, "complete_step")

        async with self.progress_repo.lock_dossier(dossier_id) as rows:
            row = _find_row(rows, dossier_id, step_id)
            if row.status == ProgressStatus.COMPLETED:
                logger.warning(
                    "Rejected completion of already completed step: dossier=%s step=%s",
                    dossier_id,
                    step_id,
                )
                raise AlreadyCompletedError(dossier_id, step_id)
            if row.status != ProgressStatus.IN_PROGRESS:
                logger.warning(
                    "Rejected completion of inactive step: dossier=%s step=%s status=%s",
                    dossier_id,
                    step_id,
                    row.status.value,
                )
                raise StepNotActiveError(dossier_id, step_id, row.status.value)
            if step.requires_decision and decision is None:
                raise DecisionRequiredError(step_id)
            validate_form_data(step, form_data)

            effective_decision = decision if step.requires_decision else None
            successors = resolve_successors(step, effective_decision)
            now = self._now()
            await self.progress_repo.apply_transition(
                row.id,
                row.to_patch().with_changes(
                    status=ProgressStatus.COMPLETED,
                    completed_at=now,
                    completed_by=completed_by or acting_user.id,
                    decision_taken=effective_decision,
                    notes=notes,
                    form_data=form_data,
                ),
            )

            by_step = {r.workflow_step_id: r for r in rows}
            activated: list[str] = []
            for successor_id in successors:
                successor = by_step.get(successor_id)
                if successor is None or successor.status != ProgressStatus.PENDING:
                    continue
                await self.progress_repo.apply_transition(
                    successor.id,
                    successor.to_patch().with_changes(
                        status=ProgressStatus.IN_PROGRESS, started_at=now
                    ),
                )
                activated.append(successor_id)

            if step.requires_decision:
                content = f"Decision for {step.name}: {'yes' if effective_decision else 'no'}"
                comment_type = CommentType.DECISION_MADE
            else:
                content = f"Step {step.name} completed"
                comment_type = CommentType.STEP_COMPLETED
            await self.comment_repo.create_comment(
                CommentCreate(
                    dossier_id=dossier_id,
                    content=content,
                    comment_type=comment_type,
                    created_by=completed_by or acting_user.id,
                    workflow_step_id=step_id,
                )
            )
            progress = await self.progress_repo.get_progress(dossier_id)

        logger.info(
            "Step completed: dossier=%s step=%s decision=%s activated=%s",
            dossier_id,
            step_id,
            effective_decision,
            activated,
        )
        return TransitionResult(progress=progress, activated_step_ids=activated)

    async def make_decision(
        self,
        dossier_id: str,
        step_id: str,
        acting_user: ActingUser,
        *,
        decision: bool | None,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
        completed_by: str | None = None,
    ) -> TransitionResult:
        """complete_step for a decision; a missing decision is DecisionRequiredError."""
        if decision is None:
            raise DecisionRequiredError(step_id)
        return await self.complete_step(
            dossier_id,
            step_id,
            acting_user,
            decision=decision,
            notes=notes,
            form_data=form_data,
            completed_by=completed_by,
        )

    async def reopen_step(
        self,
        dossier_id: str,
        step_id: str,
        target_step_id: str,
        acting_user: ActingUser,
        *,
        notes: str | None = None,
    ) -> TransitionResult:
        """Explicit loop-back: reactivate an earlier step from a can_loop_back step.

        The target row becomes in_progress with completion fields cleared.
        If the source step is still in_progress it returns to pending.

        Raises:
            StepNotFoundError, ProgressNotFoundError, LoopBackNotAllowedError,
            AuthorizationException.
        """
        step, dossier = await self._load(dossier_id, step_id)
        target = await self.workflow_repo.get_step(target_step_id)
        if not target:
            raise StepNotFoundError(target_step_id)
        acting_user.require_write(dossier.world_id, "reopen_step")

        if not step.can_loop_back:
            raise LoopBackNotAllowedError(step_id, target_step_id, "step does not allow loop-back")
        if target.workflow_template_id != step.workflow_template_id:
            raise LoopBackNotAllowedError(step_id, target_step_id, "target is in another template")
        if target.step_number >= step.step_number:
            raise LoopBackNotAllowedError(step_id, target_step_id, "target is not an earlier step")

        async with self.progress_repo.lock_dossier(dossier_id) as rows:
            row = _find_row(rows, dossier_id, step_id)
            target_row = _find_row(rows, dossier_id, target_step_id)
            if row.status not in (ProgressStatus.COMPLETED, ProgressStatus.IN_PROGRESS):
                raise LoopBackNotAllowedError(
                    step_id, target_step_id, f"step is {row.status.value}"
                )
            now = self._now()
            if row.status == ProgressStatus.IN_PROGRESS:
                await self.progress_repo.apply_transition(
                    row.id, row.to_patch().with_changes(status=ProgressStatus.PENDING)
                )
            await self.progress_repo.apply_transition(
                target_row.id,
                target_row.to_patch().with_changes(
                    status=ProgressStatus.IN_PROGRESS,
                    started_at=now,
                    completed_at=None,
                    completed_by=None,
                    decision_taken=None,
                    notes=notes if notes is not None else target_row.notes,
                ),
            )
            await self.comment_repo.create_comment(
                CommentCreate(
                    dossier_id=dossier_id,
                    content=f"Step {target.name} reopened from {step.name}",
                    comment_type=CommentType.STATUS_CHANGE,
                    created_by=acting_user.id,
                    workflow_step_id=target_step_id,
                )
            )
            progress = await self.progress_repo.get_progress(dossier_id)

        logger.info(
            "Step reopened: dossier=%s from=%s target=%s", dossier_id, step_id, target_step_id
        )
        return TransitionResult(progress=progress, activated_step_ids=[target_step_id])

    async def set_step_status(
        self,
        dossier_id: str,
        step_id: str,
        status: ProgressStatus,
        acting_user: ActingUser,
        *,
        notes: str | None = None,
    ) -> TransitionResult:
        """Administrative status change (block, skip, release). Never completes a step.

        Raises:
            StepNotFoundError, ProgressNotFoundError, InvalidStatusChangeError,
            AuthorizationException.
        """
        step, dossier = await self._load(dossier_id, step_id)
        acting_user.require_admin(dossier.world_id, "set_step_status")

        async with self.progress_repo.lock_dossier(dossier_id) as rows:
            row = _find_row(rows, dossier_id, step_id)
            if status not in _ADMIN_TRANSITIONS[row.status]:
                raise InvalidStatusChangeError(step_id, row.status.value, status.value)
            now = self._now()
            changes: dict[str, Any] = {"status": status}
            if status == ProgressStatus.IN_PROGRESS:
                changes["started_at"] = now
            elif status == ProgressStatus.PENDING:
                changes["started_at"] = None
            if notes is not None:
                changes["notes"] = notes
            await self.progress_repo.apply_transition(row.id, row.to_patch().with_changes(**changes))
            await self.comment_repo.create_comment(
                CommentCreate(
                    dossier_id=dossier_id,
                    content=f"Step {step.name} status changed from {row.status.value} to {status.value}",
                    comment_type=CommentType.STATUS_CHANGE,
                    created_by=acting_user.id,
                    workflow_step_id=step_id,
                )
            )
            progress = await self.progress_repo.get_progress(dossier_id)

        logger.info(
            "Step status set: dossier=%s step=%s %s -> %s",
            dossier_id,
            step_id,
            row.status.value,
            status.value,
        )
        activated = [step_id] if status == ProgressStatus.IN_PROGRESS else []
        return TransitionResult(progress=progress, activated_step_ids=activated)
