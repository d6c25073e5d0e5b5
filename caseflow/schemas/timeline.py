"""Timeline API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from caseflow.application.dtos.timeline import DossierTimeline
from caseflow.domain.enums import SideEventKind
from caseflow.schemas.progress import (
    ProgressResponse,
    ProgressSummaryResponse,
    WorkflowStepResponse,
)


class SideEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: SideEventKind
    id: str
    timestamp: datetime
    title: str
    content: str | None = None
    status: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    workflow_step_id: str | None = None


class TimelineGroupResponse(BaseModel):
    step: WorkflowStepResponse
    progress: ProgressResponse | None
    anchor: datetime
    lane_a: list[SideEventResponse]
    lane_b: list[SideEventResponse]


class TimelineResponse(BaseModel):
    """Response for GET /dossiers/{id}/timeline. Groups are most recent first."""

    dossier_id: str
    groups: list[TimelineGroupResponse]
    summary: ProgressSummaryResponse

    @classmethod
    def from_timeline(cls, timeline: DossierTimeline) -> "TimelineResponse":
        return cls(
            dossier_id=timeline.dossier_id,
            groups=[
                TimelineGroupResponse(
                    step=WorkflowStepResponse.from_entity(g.step),
                    progress=ProgressResponse.model_validate(g.progress) if g.progress else None,
                    anchor=g.anchor,
                    lane_a=[SideEventResponse.model_validate(e) for e in g.lane_a],
                    lane_b=[SideEventResponse.model_validate(e) for e in g.lane_b],
                )
                for g in timeline.groups
            ],
            summary=ProgressSummaryResponse.model_validate(timeline.summary),
        )
