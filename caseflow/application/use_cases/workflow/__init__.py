"""Workflow progress use cases: initialize, read, overview."""

from caseflow.application.use_cases.workflow.progress_operations import (
    GetProgressUseCase,
    GetWorkflowOverviewUseCase,
    InitializeProgressUseCase,
    get_dossier_or_raise,
    load_dossier_graph,
    summarize_progress,
)

__all__ = [
    "GetProgressUseCase",
    "GetWorkflowOverviewUseCase",
    "InitializeProgressUseCase",
    "get_dossier_or_raise",
    "load_dossier_graph",
    "summarize_progress",
]
