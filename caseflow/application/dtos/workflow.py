"""DTOs for the workflow overview (graph edges plus dossier progress)."""

from dataclasses import dataclass

from caseflow.application.dtos.progress import ProgressResult
from caseflow.application.dtos.timeline import ProgressSummary
from caseflow.domain.entities.workflow import WorkflowEdge, WorkflowGraph


@dataclass(frozen=True)
class WorkflowOverview:
    dossier_id: str
    graph: WorkflowGraph
    edges: list[WorkflowEdge]
    progress: list[ProgressResult]
    summary: ProgressSummary
