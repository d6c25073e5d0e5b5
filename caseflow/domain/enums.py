"""Domain enumerations for workflow progression.

Enums represent fixed sets of domain values stored as strings in the
relational schema (step types, progress status, side-event kinds).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class StepType(_ValuesMixin, str, Enum):
    """Kind of work a workflow step represents (display and icon hint only)."""

    ACTION = "action"
    DECISION = "decision"
    DOCUMENT = "document"
    MEETING = "meeting"
    NOTIFICATION = "notification"


class ProgressStatus(_ValuesMixin, str, Enum):
    """Per-dossier, per-step progress status.

    pending -> in_progress -> completed is the transition-engine path;
    blocked and skipped are reached only through administrative action.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    SKIPPED = "skipped"


class EdgeKind(_ValuesMixin, str, Enum):
    """Kind of successor edge in the workflow graph."""

    LINEAR = "linear"
    DECISION_YES = "decision_yes"
    DECISION_NO = "decision_no"
    PARALLEL = "parallel"
    LOOP_BACK = "loop_back"


class FormFieldType(_ValuesMixin, str, Enum):
    """Closed set of form field types a step may collect before completion."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    DATE = "date"
    NUMBER = "number"
    BOOLEAN = "boolean"
    EMAIL = "email"


class SideEventKind(_ValuesMixin, str, Enum):
    """Side-event kinds interleaved with workflow steps on the timeline."""

    COMMENT = "comment"
    DOCUMENT = "document"
    TASK = "task"
    APPOINTMENT = "appointment"
    ANNOTATION = "annotation"


class CommentType(_ValuesMixin, str, Enum):
    """dossier_comments.comment_type values."""

    COMMENT = "comment"
    STATUS_CHANGE = "status_change"
    STEP_COMPLETED = "step_completed"
    DOCUMENT_ADDED = "document_added"
    DECISION_MADE = "decision_made"


class AppRole(_ValuesMixin, str, Enum):
    """Application roles carried in the access token."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
