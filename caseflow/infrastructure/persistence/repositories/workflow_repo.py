"""Workflow repository: templates and steps as domain graphs (implements IWorkflowRepository)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.application.services.form_validator import parse_form_fields
from caseflow.domain.entities.workflow import WorkflowGraph, WorkflowStepEntity
from caseflow.domain.enums import StepType
from caseflow.infrastructure.persistence.models.workflow import WorkflowStep, WorkflowTemplate
from caseflow.infrastructure.persistence.repositories.base import BaseRepository


def _to_entity(s: WorkflowStep) -> WorkflowStepEntity:
    """Map WorkflowStep ORM to domain entity (form_fields schema-checked and parsed)."""
    return WorkflowStepEntity(
        id=s.id,
        workflow_template_id=s.workflow_template_id,
        step_number=s.step_number,
        name=s.name,
        step_type=StepType(s.step_type),
        description=s.description,
        requires_decision=bool(s.requires_decision),
        form_fields=parse_form_fields(s.form_fields, s.workflow_template_id, s.id),
        next_step_id=s.next_step_id,
        decision_yes_next_step_id=s.decision_yes_next_step_id,
        decision_no_next_step_id=s.decision_no_next_step_id,
        parallel_steps=tuple(s.parallel_steps or ()),
        can_loop_back=bool(s.can_loop_back),
    )


def _to_graph(t: WorkflowTemplate) -> WorkflowGraph:
    return WorkflowGraph(
        template_id=t.id,
        world_id=t.world_id,
        name=t.name,
        steps=[_to_entity(s) for s in t.steps],
    )


class WorkflowRepository(BaseRepository[WorkflowTemplate]):
    """Workflow template repository. Implements IWorkflowRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowTemplate)

    async def get_active_graph(self, world_id: str) -> WorkflowGraph | None:
        result = await self.db.execute(
            select(WorkflowTemplate)
            .where(WorkflowTemplate.world_id == world_id, WorkflowTemplate.is_active.is_(True))
            .order_by(WorkflowTemplate.version.desc())
            .limit(1)
        )
        template = result.scalar_one_or_none()
        return _to_graph(template) if template else None

    async def get_graph(self, template_id: str) -> WorkflowGraph | None:
        template = await self.get_by_id(template_id)
        return _to_graph(template) if template else None

    async def get_step(self, step_id: str) -> WorkflowStepEntity | None:
        result = await self.db.execute(select(WorkflowStep).where(WorkflowStep.id == step_id))
        step = result.scalar_one_or_none()
        return _to_entity(step) if step else None
