"""DTOs for dossier workflow progress rows and transitions."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from caseflow.domain.enums import ProgressStatus


@dataclass(frozen=True)
class ProgressResult:
    """Progress read-model: one row per (dossier, workflow step)."""

    id: str
    dossier_id: str
    workflow_step_id: str
    status: ProgressStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    decision_taken: bool | None = None
    notes: str | None = None
    form_data: dict[str, Any] | None = None

    def to_patch(self) -> "ProgressPatch":
        """Return a patch that rewrites this row unchanged (base for edits)."""
        return ProgressPatch(
            status=self.status,
            started_at=self.started_at,
            completed_at=self.completed_at,
            completed_by=self.completed_by,
            decision_taken=self.decision_taken,
            notes=self.notes,
            form_data=self.form_data,
        )


@dataclass(frozen=True)
class ProgressPatch:
    """Full set of mutable progress columns written by apply_transition.

    Every field is written; build from ProgressResult.to_patch() and
    replace() the columns that change.
    """

    status: ProgressStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    decision_taken: bool | None = None
    notes: str | None = None
    form_data: dict[str, Any] | None = None

    def with_changes(self, **changes: Any) -> "ProgressPatch":
        return replace(self, **changes)


@dataclass(frozen=True)
class ProgressInit:
    """Row to insert when a dossier is first opened against a template."""

    workflow_step_id: str
    status: ProgressStatus
    started_at: datetime | None = None


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition: the dossier's progress after commit and newly activated steps."""

    progress: list[ProgressResult]
    activated_step_ids: list[str] = field(default_factory=list)
