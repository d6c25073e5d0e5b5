"""Remote client for the workflow API and an optimistic local view over it."""

from caseflow.client.engine_client import (
    RemoteTransitionError,
    WorkflowEngineClient,
    error_from_body,
)
from caseflow.client.optimistic import OptimisticWorkflowView

__all__ = [
    "OptimisticWorkflowView",
    "RemoteTransitionError",
    "WorkflowEngineClient",
    "error_from_body",
]
