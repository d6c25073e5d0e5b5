"""Remote transition endpoint: POST /workflow-engine.

A single action-dispatched route (complete_step, make_decision,
reopen_step). Each call runs in one transaction; typed errors are returned
as {error, message, details} by the exception handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from caseflow.api.v1.dependencies import CurrentUser, get_workflow_engine
from caseflow.application.dtos.progress import TransitionResult
from caseflow.core.limiter import limit_transitions
from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.exceptions import AuthorizationException
from caseflow.infrastructure.services import WorkflowEngine
from caseflow.schemas.progress import ProgressResponse
from caseflow.schemas.workflow_engine import (
    ErrorResponse,
    TransitionResponse,
    WorkflowEngineRequest,
)

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict] = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def _completed_by(body: WorkflowEngineRequest, acting_user: ActingUser) -> str:
    """userId in the body may only name someone else when the caller is superadmin."""
    if body.user_id and body.user_id != acting_user.id and not acting_user.is_superadmin:
        raise AuthorizationException(
            message="userId must match the authenticated user",
        )
    return body.user_id or acting_user.id


def to_transition_response(result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        progress=[ProgressResponse.model_validate(p) for p in result.progress],
        activated_step_ids=result.activated_step_ids,
    )


@router.post("", response_model=TransitionResponse, responses=_ERROR_RESPONSES)
@limit_transitions
async def invoke_workflow_engine(
    request: Request,
    body: WorkflowEngineRequest,
    acting_user: CurrentUser,
    engine: Annotated[WorkflowEngine, Depends(get_workflow_engine)],
) -> TransitionResponse:
    """Apply a transition to a dossier's workflow and return its updated progress."""
    completed_by = _completed_by(body, acting_user)
    if body.action == "complete_step":
        result = await engine.complete_step(
            body.dossier_id,
            body.step_id,
            acting_user,
            decision=body.decision,
            notes=body.notes,
            form_data=body.form_data,
            completed_by=completed_by,
        )
    elif body.action == "make_decision":
        result = await engine.make_decision(
            body.dossier_id,
            body.step_id,
            acting_user,
            decision=body.decision,
            notes=body.notes,
            form_data=body.form_data,
            completed_by=completed_by,
        )
    else:
        result = await engine.reopen_step(
            body.dossier_id,
            body.step_id,
            body.target_step_id or "",
            acting_user,
            notes=body.notes,
        )
    return to_transition_response(result)
