"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.entities.workflow import (
    FormField,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowStepEntity,
    resolve_successors,
)

__all__ = [
    "ActingUser",
    "FormField",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowStepEntity",
    "resolve_successors",
]
