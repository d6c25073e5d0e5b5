"""Workflow engine and use-case dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from caseflow.application.use_cases.timeline import ComposeTimelineUseCase
from caseflow.application.use_cases.workflow import (
    GetProgressUseCase,
    GetWorkflowOverviewUseCase,
    InitializeProgressUseCase,
)
from caseflow.core.config import get_settings
from caseflow.infrastructure.services import WorkflowEngine

from .db import ReadRepositories, WriteRepositories

Reads = Annotated[ReadRepositories, Depends()]
Writes = Annotated[WriteRepositories, Depends()]


async def get_workflow_engine(repos: Writes) -> WorkflowEngine:
    """Transition engine on the request transaction."""
    return WorkflowEngine(repos.workflow, repos.dossier, repos.progress, repos.comments)


async def get_initialize_progress_use_case(repos: Writes) -> InitializeProgressUseCase:
    return InitializeProgressUseCase(repos.dossier, repos.workflow, repos.progress)


async def get_progress_use_case(repos: Reads) -> GetProgressUseCase:
    return GetProgressUseCase(repos.dossier, repos.progress)


async def get_workflow_overview_use_case(repos: Reads) -> GetWorkflowOverviewUseCase:
    return GetWorkflowOverviewUseCase(repos.dossier, repos.workflow, repos.progress)


async def get_compose_timeline_use_case(repos: Reads) -> ComposeTimelineUseCase:
    """Timeline compositor; tag pinning follows settings.timeline_pin_tagged_events."""
    return ComposeTimelineUseCase(
        repos.dossier,
        repos.workflow,
        repos.progress,
        repos.side_events,
        pin_tagged_events=get_settings().timeline_pin_tagged_events,
    )
