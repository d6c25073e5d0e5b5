"""Progress use cases: initialize, read, and overview of a dossier's workflow."""

from __future__ import annotations

from datetime import datetime

from caseflow.application.dtos.dossier import DossierResult
from caseflow.application.dtos.progress import ProgressResult
from caseflow.application.dtos.timeline import ProgressSummary
from caseflow.application.dtos.workflow import WorkflowOverview
from caseflow.application.interfaces.repositories import (
    IDossierRepository,
    IProgressRepository,
    IWorkflowRepository,
)
from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.entities.workflow import WorkflowGraph
from caseflow.domain.enums import ProgressStatus
from caseflow.domain.exceptions import ResourceNotFoundException
from caseflow.shared.telemetry.logging import get_logger
from caseflow.shared.utils import utc_now

logger = get_logger(__name__)


async def get_dossier_or_raise(
    dossier_repo: IDossierRepository, dossier_id: str
) -> DossierResult:
    dossier = await dossier_repo.get_by_id(dossier_id)
    if not dossier:
        raise ResourceNotFoundException("dossier", dossier_id)
    return dossier


async def load_dossier_graph(
    workflow_repo: IWorkflowRepository,
    dossier: DossierResult,
    progress: list[ProgressResult],
) -> WorkflowGraph:
    """Return the template the dossier's progress was created from.

    Falls back to the world's active template when the dossier has no
    progress rows yet.

    Raises:
        ResourceNotFoundException: no template could be resolved.
    """
    if progress:
        step = await workflow_repo.get_step(progress[0].workflow_step_id)
        if step:
            graph = await workflow_repo.get_graph(step.workflow_template_id)
            if graph:
                return graph
    graph = await workflow_repo.get_active_graph(dossier.world_id)
    if not graph:
        raise ResourceNotFoundException("workflow_template", dossier.world_id)
    return graph


def summarize_progress(graph: WorkflowGraph, progress: list[ProgressResult]) -> ProgressSummary:
    """Completed count, rounded percentage and in-progress step ids (step_number order)."""
    by_step = {p.workflow_step_id: p for p in progress}
    total = len(graph)
    completed = sum(
        1
        for step in graph
        if (row := by_step.get(step.id)) and row.status == ProgressStatus.COMPLETED
    )
    current = [
        step.id
        for step in graph
        if (row := by_step.get(step.id)) and row.status == ProgressStatus.IN_PROGRESS
    ]
    # round half up
    percentage = (completed * 200 + total) // (2 * total) if total else 0
    return ProgressSummary(
        total_steps=total,
        completed_steps=completed,
        percentage=percentage,
        current_steps=current,
    )


class InitializeProgressUseCase:
    """Creates the progress rows of a dossier from its world's active template."""

    def __init__(
        self,
        dossier_repo: IDossierRepository,
        workflow_repo: IWorkflowRepository,
        progress_repo: IProgressRepository,
    ) -> None:
        self._dossier_repo = dossier_repo
        self._workflow_repo = workflow_repo
        self._progress_repo = progress_repo

    async def execute(
        self,
        dossier_id: str,
        acting_user: ActingUser,
        now: datetime | None = None,
    ) -> list[ProgressResult]:
        """Initialize progress.

        Raises:
            ResourceNotFoundException: dossier or active template missing.
            AuthorizationException: user may not write in the dossier's world.
            AlreadyInitializedError: rows already exist (from the store).
        """
        dossier = await get_dossier_or_raise(self._dossier_repo, dossier_id)
        acting_user.require_write(dossier.world_id, "initialize_progress")
        graph = await self._workflow_repo.get_active_graph(dossier.world_id)
        if not graph:
            raise ResourceNotFoundException("workflow_template", dossier.world_id)
        graph.validate()
        rows = await self._progress_repo.initialize_progress(
            dossier_id, list(graph), now or utc_now()
        )
        logger.info(
            "Initialized workflow progress: dossier=%s template=%s steps=%s",
            dossier_id,
            graph.template_id,
            len(rows),
        )
        return rows


class GetProgressUseCase:
    def __init__(
        self, dossier_repo: IDossierRepository, progress_repo: IProgressRepository
    ) -> None:
        self._dossier_repo = dossier_repo
        self._progress_repo = progress_repo

    async def execute(self, dossier_id: str, acting_user: ActingUser) -> list[ProgressResult]:
        dossier = await get_dossier_or_raise(self._dossier_repo, dossier_id)
        acting_user.require_read(dossier.world_id)
        return await self._progress_repo.get_progress(dossier_id)


class GetWorkflowOverviewUseCase:
    """Graph edges, progress rows and summary for the workflow diagram view."""

    def __init__(
        self,
        dossier_repo: IDossierRepository,
        workflow_repo: IWorkflowRepository,
        progress_repo: IProgressRepository,
    ) -> None:
        self._dossier_repo = dossier_repo
        self._workflow_repo = workflow_repo
        self._progress_repo = progress_repo

    async def execute(self, dossier_id: str, acting_user: ActingUser) -> WorkflowOverview:
        dossier = await get_dossier_or_raise(self._dossier_repo, dossier_id)
        acting_user.require_read(dossier.world_id)
        progress = await self._progress_repo.get_progress(dossier_id)
        graph = await load_dossier_graph(self._workflow_repo, dossier, progress)
        return WorkflowOverview(
            dossier_id=dossier_id,
            graph=graph,
            edges=graph.edges(),
            progress=progress,
            summary=summarize_progress(graph, progress),
        )
