"""Remote transition contract schemas (POST /workflow-engine).

Field names on the wire are camelCase (dossierId, stepId, formData, ...);
snake_case names are accepted too.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from caseflow.schemas.progress import ProgressResponse

TransitionAction = Literal["complete_step", "make_decision", "reopen_step"]


class WorkflowEngineRequest(BaseModel):
    """Request body for a workflow transition."""

    model_config = ConfigDict(populate_by_name=True)

    action: TransitionAction
    dossier_id: str = Field(..., alias="dossierId", min_length=1)
    step_id: str = Field(..., alias="stepId", min_length=1)
    user_id: str | None = Field(default=None, alias="userId")
    decision: bool | None = None
    notes: str | None = Field(default=None, max_length=10_000)
    form_data: dict[str, Any] | None = Field(default=None, alias="formData")
    target_step_id: str | None = Field(default=None, alias="targetStepId")

    @model_validator(mode="after")
    def target_required_for_reopen(self) -> "WorkflowEngineRequest":
        if self.action == "reopen_step" and not self.target_step_id:
            raise ValueError("targetStepId is required for reopen_step")
        return self


class TransitionResponse(BaseModel):
    """Updated progress of the dossier and the steps the transition activated."""

    model_config = ConfigDict(populate_by_name=True)

    progress: list[ProgressResponse]
    activated_step_ids: list[str] = Field(default_factory=list, alias="activatedStepIds")


class ErrorResponse(BaseModel):
    """Typed error body: error is the machine-readable code (e.g. AlreadyCompletedError)."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
