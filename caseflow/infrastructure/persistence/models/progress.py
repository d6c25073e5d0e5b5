"""DossierWorkflowProgress ORM model. One row per (dossier, workflow step)."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.domain.enums import ProgressStatus
from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class DossierWorkflowProgress(CuidMixin, TimestampMixin, Base):
    """Progress of a dossier on one step. Table: dossier_workflow_progress."""

    __tablename__ = "dossier_workflow_progress"

    dossier_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    workflow_step_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_steps.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ProgressStatus.PENDING.value,
        server_default=ProgressStatus.PENDING.value,
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_by: Mapped[str | None] = mapped_column(String, nullable=True)
    decision_taken: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    form_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "dossier_id", "workflow_step_id", name="uq_dossier_workflow_progress_step"
        ),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{v}'" for v in ProgressStatus.values()) + ")",
            name="ck_dossier_workflow_progress_status",
        ),
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL AND completed_by IS NOT NULL)",
            name="ck_dossier_workflow_progress_completion",
        ),
    )
