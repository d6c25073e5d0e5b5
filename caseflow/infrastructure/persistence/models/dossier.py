"""Dossier and DossierComment ORM models.

Both tables belong to the case-management schema; this service reads
dossiers and appends audit comments.
"""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.domain.enums import CommentType
from caseflow.infrastructure.persistence.database import Base
from caseflow.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)


class Dossier(CuidMixin, TimestampMixin, Base):
    """Case file. Table: dossiers."""

    __tablename__ = "dossiers"

    world_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    owner_id: Mapped[str | None] = mapped_column(String, nullable=True)


class DossierComment(CuidMixin, CreatedAtMixin, Base):
    """Comment or audit entry on a dossier. Table: dossier_comments."""

    __tablename__ = "dossier_comments"

    dossier_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    comment_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=CommentType.COMMENT.value
    )
    # {"workflow_step_id": ...} for engine-written entries
    comment_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "comment_type IN (" + ", ".join(f"'{v}'" for v in CommentType.values()) + ")",
            name="ck_dossier_comments_comment_type",
        ),
        Index("ix_dossier_comments_dossier_created", "dossier_id", "created_at"),
    )
