"""Side-event ORM models read by the timeline: attachments, tasks, appointments, annotations."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class DossierAttachment(CuidMixin, CreatedAtMixin, Base):
    """Uploaded or generated document. Table: dossier_attachments."""

    __tablename__ = "dossier_attachments"

    dossier_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    document_type: Mapped[str | None] = mapped_column(String, nullable=True)
    uploaded_by: Mapped[str | None] = mapped_column(String, nullable=True)
    workflow_step_id: Mapped[str | None] = mapped_column(String, nullable=True)


class Task(CuidMixin, CreatedAtMixin, Base):
    """Task, attached to a dossier and/or a workflow step. Table: tasks."""

    __tablename__ = "tasks"

    world_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    dossier_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    workflow_step_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String, nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Appointment(CuidMixin, CreatedAtMixin, Base):
    """Appointment on a dossier. Table: appointments."""

    __tablename__ = "appointments"

    dossier_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    workflow_step_id: Mapped[str | None] = mapped_column(String, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="scheduled")
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class DossierStepAnnotation(CuidMixin, CreatedAtMixin, Base):
    """Free-form note pinned to a dossier step. Table: dossier_step_annotations."""

    __tablename__ = "dossier_step_annotations"

    dossier_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    workflow_step_id: Mapped[str | None] = mapped_column(String, nullable=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    annotation_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
