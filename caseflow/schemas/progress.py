"""Progress and workflow graph API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from caseflow.domain.entities.workflow import WorkflowEdge, WorkflowStepEntity
from caseflow.domain.enums import EdgeKind, ProgressStatus, StepType


class ProgressResponse(BaseModel):
    """One dossier_workflow_progress row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    dossier_id: str
    workflow_step_id: str
    status: ProgressStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    decision_taken: bool | None = None
    notes: str | None = None
    form_data: dict[str, Any] | None = None


class StepStatusUpdate(BaseModel):
    """Request body for PATCH /dossiers/{id}/progress/{step_id} (administrative)."""

    status: ProgressStatus = Field(..., description="blocked, skipped, pending or in_progress")
    notes: str | None = Field(default=None, max_length=10_000)


class WorkflowStepResponse(BaseModel):
    id: str
    workflow_template_id: str
    step_number: int
    name: str
    description: str | None
    step_type: StepType
    requires_decision: bool
    form_fields: list[dict[str, Any]]
    next_step_id: str | None
    decision_yes_next_step_id: str | None
    decision_no_next_step_id: str | None
    parallel_steps: list[str]
    can_loop_back: bool

    @classmethod
    def from_entity(cls, step: WorkflowStepEntity) -> "WorkflowStepResponse":
        return cls(
            id=step.id,
            workflow_template_id=step.workflow_template_id,
            step_number=step.step_number,
            name=step.name,
            description=step.description,
            step_type=step.step_type,
            requires_decision=step.requires_decision,
            form_fields=[f.to_descriptor() for f in step.form_fields],
            next_step_id=step.next_step_id,
            decision_yes_next_step_id=step.decision_yes_next_step_id,
            decision_no_next_step_id=step.decision_no_next_step_id,
            parallel_steps=list(step.parallel_steps),
            can_loop_back=step.can_loop_back,
        )


class WorkflowEdgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_id: str
    target_id: str
    kind: EdgeKind

    @classmethod
    def from_edge(cls, edge: WorkflowEdge) -> "WorkflowEdgeResponse":
        return cls.model_validate(edge)


class ProgressSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_steps: int
    completed_steps: int
    percentage: int
    current_steps: list[str]


class WorkflowOverviewResponse(BaseModel):
    """Response for GET /dossiers/{id}/workflow."""

    dossier_id: str
    template_id: str
    world_id: str
    name: str
    steps: list[WorkflowStepResponse]
    edges: list[WorkflowEdgeResponse]
    progress: list[ProgressResponse]
    summary: ProgressSummaryResponse
