"""WorkflowTemplate and WorkflowStep ORM models. Per-world step graph."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from caseflow.domain.enums import StepType
from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class WorkflowTemplate(CuidMixin, TimestampMixin, Base):
    """Workflow template of a world. Table: workflow_templates. One active per world."""

    __tablename__ = "workflow_templates"

    world_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default=sa.text("1")
    )

    steps: Mapped[list["WorkflowStep"]] = relationship(
        back_populates="template",
        order_by="WorkflowStep.step_number",
        lazy="selectin",
    )

    __table_args__ = (
        Index(
            "uq_workflow_templates_active_world",
            "world_id",
            unique=True,
            postgresql_where=sa.text("is_active"),
        ),
    )


class WorkflowStep(CuidMixin, TimestampMixin, Base):
    """Workflow step (graph node). Table: workflow_steps.

    Successor columns reference steps of the same template; the engine
    never follows them across templates.
    """

    __tablename__ = "workflow_steps"

    workflow_template_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    step_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=StepType.ACTION.value
    )
    requires_decision: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    form_fields: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    next_step_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workflow_steps.id", ondelete="SET NULL"), nullable=True
    )
    decision_yes_next_step_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workflow_steps.id", ondelete="SET NULL"), nullable=True
    )
    decision_no_next_step_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workflow_steps.id", ondelete="SET NULL"), nullable=True
    )
    parallel_steps: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    can_loop_back: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )

    template: Mapped[WorkflowTemplate] = relationship(back_populates="steps")

    __table_args__ = (
        UniqueConstraint(
            "workflow_template_id", "step_number", name="uq_workflow_steps_template_number"
        ),
        CheckConstraint(
            "step_type IN (" + ", ".join(f"'{v}'" for v in StepType.values()) + ")",
            name="ck_workflow_steps_step_type",
        ),
    )
