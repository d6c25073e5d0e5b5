"""Optimistic local view of one dossier's workflow.

On a user action the local step is marked completed immediately, the remote
transition runs, and local state is then replaced wholesale by a refetch of
progress and timeline, on success and on failure alike. A failed action is
re-raised after the refetch; it is never retried automatically.

If the refetch itself fails, a failed action restores the rows held before
the optimistic mark and re-raises the action's own error (the refetch error
is its __cause__); a successful action takes progress from the transition
response and sets stale, since the timeline could not be reloaded.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from caseflow.client.engine_client import WorkflowEngineClient
from caseflow.domain.enums import ProgressStatus
from caseflow.schemas.progress import ProgressResponse
from caseflow.schemas.timeline import TimelineResponse
from caseflow.schemas.workflow_engine import TransitionResponse
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils import utc_now

logger = get_logger(__name__)


class OptimisticWorkflowView:
    """Local progress + timeline for a dossier, reconciled by refetch after every action.

    in_flight is True while a transition (and its refetch) is running; UIs
    use it to disable duplicate submission. It does not block a second call.
    stale is True when the last refetch failed and timeline is out of date.
    """

    def __init__(self, client: WorkflowEngineClient, dossier_id: str) -> None:
        self.client = client
        self.dossier_id = dossier_id
        self.progress: list[ProgressResponse] = []
        self.timeline: TimelineResponse | None = None
        self.in_flight = False
        self.stale = False

    def step_status(self, step_id: str) -> ProgressStatus | None:
        for row in self.progress:
            if row.workflow_step_id == step_id:
                return row.status
        return None

    async def refresh(self) -> None:
        """Replace local progress and timeline with the server's state."""
        progress = await self.client.get_progress(self.dossier_id)
        timeline = await self.client.get_timeline(self.dossier_id)
        self.progress = progress
        self.timeline = timeline
        self.stale = False

    def _mark(self, step_id: str, status: ProgressStatus, **changes: Any) -> None:
        self.progress = [
            row.model_copy(update={"status": status, **changes})
            if row.workflow_step_id == step_id
            else row
            for row in self.progress
        ]

    async def _run(
        self,
        optimistic: Callable[[], None],
        call: Callable[[], Awaitable[TransitionResponse]],
    ) -> TransitionResponse:
        self.in_flight = True
        before = list(self.progress)
        try:
            optimistic()
            try:
                result = await call()
            except Exception as transition_error:
                logger.info("Transition failed on dossier %s; reverting by refetch", self.dossier_id)
                try:
                    await self.refresh()
                except Exception as refresh_error:
                    logger.warning(
                        "Refetch after failed transition on dossier %s failed: %s",
                        self.dossier_id,
                        refresh_error,
                    )
                    self.progress = before
                    raise transition_error from refresh_error
                raise
            try:
                await self.refresh()
            except Exception as refresh_error:
                # The transition committed; its response carries the dossier progress.
                logger.warning(
                    "Refetch after transition on dossier %s failed: %s",
                    self.dossier_id,
                    refresh_error,
                )
                self.progress = list(result.progress)
                self.stale = True
            return result
        finally:
            self.in_flight = False

    async def complete_step(
        self,
        step_id: str,
        *,
        decision: bool | None = None,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
    ) -> TransitionResponse:
        return await self._run(
            lambda: self._mark(step_id, ProgressStatus.COMPLETED, completed_at=utc_now()),
            lambda: self.client.complete_step(
                self.dossier_id, step_id, decision=decision, notes=notes, form_data=form_data
            ),
        )

    async def make_decision(
        self,
        step_id: str,
        decision: bool,
        *,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
    ) -> TransitionResponse:
        return await self._run(
            lambda: self._mark(
                step_id,
                ProgressStatus.COMPLETED,
                completed_at=utc_now(),
                decision_taken=decision,
            ),
            lambda: self.client.make_decision(
                self.dossier_id, step_id, decision, notes=notes, form_data=form_data
            ),
        )

    async def reopen_step(
        self, step_id: str, target_step_id: str, *, notes: str | None = None
    ) -> TransitionResponse:
        return await self._run(
            lambda: self._mark(
                target_step_id,
                ProgressStatus.IN_PROGRESS,
                completed_at=None,
                completed_by=None,
                decision_taken=None,
            ),
            lambda: self.client.reopen_step(
                self.dossier_id, step_id, target_step_id, notes=notes
            ),
        )
