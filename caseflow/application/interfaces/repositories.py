"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from caseflow.application.dtos.dossier import CommentCreate, CommentResult, DossierResult
    from caseflow.application.dtos.progress import ProgressPatch, ProgressResult
    from caseflow.application.dtos.timeline import SideEvent
    from caseflow.domain.entities.workflow import WorkflowGraph, WorkflowStepEntity


class IWorkflowRepository(Protocol):
    """Protocol for workflow template/step reads (DIP)."""

    async def get_active_graph(self, world_id: str) -> WorkflowGraph | None:
        """Return the active template of a world as a graph (steps ordered by step_number)."""

    async def get_graph(self, template_id: str) -> WorkflowGraph | None:
        """Return a template's graph by template id."""

    async def get_step(self, step_id: str) -> WorkflowStepEntity | None:
        """Return one workflow step by id."""


class IDossierRepository(Protocol):
    """Protocol for dossier reads (world resolution)."""

    async def get_by_id(self, dossier_id: str) -> DossierResult | None:
        """Return dossier by ID."""


class IProgressRepository(Protocol):
    """Protocol for the per-dossier progress store."""

    async def initialize_progress(
        self,
        dossier_id: str,
        steps: list[WorkflowStepEntity],
        now: datetime | None = None,
    ) -> list[ProgressResult]:
        """Insert one row per step; the smallest step_number starts in_progress.

        Raises AlreadyInitializedError if rows already exist for the dossier.
        """

    async def get_progress(self, dossier_id: str) -> list[ProgressResult]:
        """Return all progress rows of a dossier."""

    async def apply_transition(self, progress_id: str, patch: ProgressPatch) -> ProgressResult:
        """Atomically rewrite the mutable columns of one row."""

    def lock_dossier(
        self, dossier_id: str
    ) -> AbstractAsyncContextManager[list[ProgressResult]]:
        """Serialize transitions on a dossier; yields its rows as seen under the lock."""


class ICommentRepository(Protocol):
    """Protocol for dossier comment writes (audit trail)."""

    async def create_comment(self, data: CommentCreate) -> CommentResult:
        """Insert a comment row."""


class ISideEventRepository(Protocol):
    """Protocol for reading timeline side events of a dossier."""

    async def list_for_dossier(
        self, dossier_id: str, step_ids: list[str]
    ) -> list[SideEvent]:
        """Return comments, documents, annotations, appointments (by dossier) and tasks
        (by dossier or by workflow_step_id in step_ids)."""
