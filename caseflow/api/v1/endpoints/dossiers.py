"""Dossier workflow read/maintenance endpoints: progress, timeline, workflow overview."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from caseflow.api.v1.dependencies import (
    CurrentUser,
    get_compose_timeline_use_case,
    get_initialize_progress_use_case,
    get_progress_use_case,
    get_workflow_engine,
    get_workflow_overview_use_case,
)
from caseflow.api.v1.endpoints.workflow_engine import to_transition_response
from caseflow.application.use_cases.timeline import ComposeTimelineUseCase
from caseflow.application.use_cases.workflow import (
    GetProgressUseCase,
    GetWorkflowOverviewUseCase,
    InitializeProgressUseCase,
)
from caseflow.core.limiter import limit_writes
from caseflow.infrastructure.services import WorkflowEngine
from caseflow.schemas.progress import (
    ProgressResponse,
    ProgressSummaryResponse,
    StepStatusUpdate,
    WorkflowEdgeResponse,
    WorkflowOverviewResponse,
    WorkflowStepResponse,
)
from caseflow.schemas.timeline import TimelineResponse
from caseflow.schemas.workflow_engine import TransitionResponse

router = APIRouter()


@router.get("/{dossier_id}/progress", response_model=list[ProgressResponse])
async def get_progress(
    dossier_id: str,
    acting_user: CurrentUser,
    use_case: Annotated[GetProgressUseCase, Depends(get_progress_use_case)],
):
    """Return all progress rows of the dossier."""
    rows = await use_case.execute(dossier_id, acting_user)
    return [ProgressResponse.model_validate(r) for r in rows]


@router.post(
    "/{dossier_id}/progress",
    response_model=list[ProgressResponse],
    status_code=status.HTTP_201_CREATED,
)
@limit_writes
async def initialize_progress(
    request: Request,
    dossier_id: str,
    acting_user: CurrentUser,
    use_case: Annotated[InitializeProgressUseCase, Depends(get_initialize_progress_use_case)],
):
    """Create progress rows from the world's active template (409 if already initialized)."""
    rows = await use_case.execute(dossier_id, acting_user)
    return [ProgressResponse.model_validate(r) for r in rows]


@router.patch("/{dossier_id}/progress/{step_id}", response_model=TransitionResponse)
@limit_writes
async def set_step_status(
    request: Request,
    dossier_id: str,
    step_id: str,
    body: StepStatusUpdate,
    acting_user: CurrentUser,
    engine: Annotated[WorkflowEngine, Depends(get_workflow_engine)],
) -> TransitionResponse:
    """Administrative status change: block, skip or release a step (admin only)."""
    result = await engine.set_step_status(
        dossier_id, step_id, body.status, acting_user, notes=body.notes
    )
    return to_transition_response(result)


@router.get("/{dossier_id}/timeline", response_model=TimelineResponse)
async def get_timeline(
    dossier_id: str,
    acting_user: CurrentUser,
    use_case: Annotated[ComposeTimelineUseCase, Depends(get_compose_timeline_use_case)],
) -> TimelineResponse:
    """Return steps (most recent first) with their interleaved side events."""
    timeline = await use_case.execute(dossier_id, acting_user)
    return TimelineResponse.from_timeline(timeline)


@router.get("/{dossier_id}/workflow", response_model=WorkflowOverviewResponse)
async def get_workflow(
    dossier_id: str,
    acting_user: CurrentUser,
    use_case: Annotated[GetWorkflowOverviewUseCase, Depends(get_workflow_overview_use_case)],
) -> WorkflowOverviewResponse:
    """Return the dossier's workflow graph (steps + tagged edges), progress and summary."""
    overview = await use_case.execute(dossier_id, acting_user)
    return WorkflowOverviewResponse(
        dossier_id=overview.dossier_id,
        template_id=overview.graph.template_id,
        world_id=overview.graph.world_id,
        name=overview.graph.name,
        steps=[WorkflowStepResponse.from_entity(s) for s in overview.graph],
        edges=[WorkflowEdgeResponse.from_edge(e) for e in overview.edges],
        progress=[ProgressResponse.model_validate(p) for p in overview.progress],
        summary=ProgressSummaryResponse.model_validate(overview.summary),
    )
