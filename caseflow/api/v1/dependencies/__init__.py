"""FastAPI dependencies for v1 routes (composition root)."""

from caseflow.api.v1.dependencies.auth import CurrentUser, get_acting_user
from caseflow.api.v1.dependencies.workflow import (
    get_compose_timeline_use_case,
    get_initialize_progress_use_case,
    get_progress_use_case,
    get_workflow_engine,
    get_workflow_overview_use_case,
)

__all__ = [
    "CurrentUser",
    "get_acting_user",
    "get_compose_timeline_use_case",
    "get_initialize_progress_use_case",
    "get_progress_use_case",
    "get_workflow_engine",
    "get_workflow_overview_use_case",
]
