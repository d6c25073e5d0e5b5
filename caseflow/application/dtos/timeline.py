"""DTOs for the dossier timeline (steps interleaved with side events)."""

from dataclasses import dataclass, field
from datetime import datetime

from caseflow.application.dtos.progress import ProgressResult
from caseflow.domain.entities.workflow import WorkflowStepEntity
from caseflow.domain.enums import SideEventKind

LANE_A_KINDS = frozenset({SideEventKind.DOCUMENT, SideEventKind.COMMENT, SideEventKind.ANNOTATION})
LANE_B_KINDS = frozenset({SideEventKind.TASK, SideEventKind.APPOINTMENT})


@dataclass(frozen=True)
class SideEvent:
    """Comment, document, task, appointment or annotation placed on the timeline."""

    kind: SideEventKind
    id: str
    timestamp: datetime
    title: str
    content: str | None = None
    status: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    workflow_step_id: str | None = None


@dataclass(frozen=True)
class TimelineGroup:
    """One workflow step with the side events that fall in its window.

    lane_a holds documents, comments and annotations; lane_b holds tasks and
    appointments. Both lanes are newest first.
    """

    step: WorkflowStepEntity
    progress: ProgressResult | None
    anchor: datetime
    lane_a: list[SideEvent] = field(default_factory=list)
    lane_b: list[SideEvent] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressSummary:
    total_steps: int
    completed_steps: int
    percentage: int
    current_steps: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DossierTimeline:
    """Composed timeline: groups most recent first, plus the progress summary."""

    dossier_id: str
    groups: list[TimelineGroup]
    summary: ProgressSummary
