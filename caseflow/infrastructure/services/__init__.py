"""Infrastructure services."""

from caseflow.infrastructure.services.workflow_engine import WorkflowEngine

__all__ = ["WorkflowEngine"]
