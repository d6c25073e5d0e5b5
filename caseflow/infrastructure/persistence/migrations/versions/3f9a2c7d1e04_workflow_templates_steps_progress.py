"""Workflow templates, steps and dossier progress

Revision ID: 3f9a2c7d1e04
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a2c7d1e04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create workflow_templates, workflow_steps and dossier_workflow_progress."""
    op.create_table(
        "workflow_templates",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("world_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workflow_templates_world_id", "workflow_templates", ["world_id"])
    # One active template per world
    op.create_index(
        "uq_workflow_templates_active_world",
        "workflow_templates",
        ["world_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "workflow_steps",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_template_id", sa.String(), nullable=False),
        sa.Column("step_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("step_type", sa.String(length=32), nullable=False),
        sa.Column(
            "requires_decision", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("form_fields", sa.JSON(), nullable=True),
        sa.Column("next_step_id", sa.String(), nullable=True),
        sa.Column("decision_yes_next_step_id", sa.String(), nullable=True),
        sa.Column("decision_no_next_step_id", sa.String(), nullable=True),
        sa.Column("parallel_steps", sa.JSON(), nullable=True),
        sa.Column(
            "can_loop_back", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["workflow_template_id"], ["workflow_templates.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["next_step_id"], ["workflow_steps.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["decision_yes_next_step_id"], ["workflow_steps.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["decision_no_next_step_id"], ["workflow_steps.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "workflow_template_id", "step_number", name="uq_workflow_steps_template_number"
        ),
        sa.CheckConstraint(
            "step_type IN ('action', 'decision', 'document', 'meeting', 'notification')",
            name="ck_workflow_steps_step_type",
        ),
    )
    op.create_index(
        "ix_workflow_steps_workflow_template_id", "workflow_steps", ["workflow_template_id"]
    )

    op.create_table(
        "dossier_workflow_progress",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("dossier_id", sa.String(), nullable=False),
        sa.Column("workflow_step_id", sa.String(), nullable=False),
        sa.Column(
            "status", sa.String(length=32), server_default="pending", nullable=False
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", sa.String(), nullable=True),
        sa.Column("decision_taken", sa.Boolean(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("form_data", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["workflow_step_id"], ["workflow_steps.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "dossier_id", "workflow_step_id", name="uq_dossier_workflow_progress_step"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed', 'blocked', 'skipped')",
            name="ck_dossier_workflow_progress_status",
        ),
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL AND completed_by IS NOT NULL)",
            name="ck_dossier_workflow_progress_completion",
        ),
    )
    op.create_index(
        "ix_dossier_workflow_progress_dossier_id", "dossier_workflow_progress", ["dossier_id"]
    )
    op.create_index(
        "ix_dossier_workflow_progress_workflow_step_id",
        "dossier_workflow_progress",
        ["workflow_step_id"],
    )


def downgrade() -> None:
    """Drop workflow progress tables."""
    op.drop_table("dossier_workflow_progress")
    op.drop_table("workflow_steps")
    op.drop_table("workflow_templates")
