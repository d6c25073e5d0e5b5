"""Initial progress rows for a dossier opened against a template."""

from datetime import datetime

from caseflow.application.dtos.progress import ProgressInit
from caseflow.domain.entities.workflow import WorkflowStepEntity
from caseflow.domain.enums import ProgressStatus


def plan_initial_progress(
    steps: list[WorkflowStepEntity], now: datetime
) -> list[ProgressInit]:
    """One row per step: the smallest step_number is in_progress (started now), the rest pending."""
    if not steps:
        return []
    first = min(steps, key=lambda s: s.step_number)
    return [
        ProgressInit(
            workflow_step_id=step.id,
            status=ProgressStatus.IN_PROGRESS if step.id == first.id else ProgressStatus.PENDING,
            started_at=now if step.id == first.id else None,
        )
        for step in sorted(steps, key=lambda s: s.step_number)
    ]
