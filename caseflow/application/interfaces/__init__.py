"""Application ports (repository protocols)."""

from caseflow.application.interfaces.repositories import (
    ICommentRepository,
    IDossierRepository,
    IProgressRepository,
    ISideEventRepository,
    IWorkflowRepository,
)

__all__ = [
    "ICommentRepository",
    "IDossierRepository",
    "IProgressRepository",
    "ISideEventRepository",
    "IWorkflowRepository",
]
