"""Repository dependencies (composition root).

Read routes use get_db; write routes use get_db_transactional. FastAPI
caches a dependency per request, so every repository built for one request
shares the same session (and transaction).
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.infrastructure.persistence.database import get_db, get_db_transactional
from caseflow.infrastructure.persistence.repositories import (
    CommentRepository,
    DossierRepository,
    ProgressRepository,
    SideEventRepository,
    WorkflowRepository,
)

ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteSession = Annotated[AsyncSession, Depends(get_db_transactional)]


class ReadRepositories:
    """Repositories bound to a read-only session."""

    def __init__(self, db: ReadSession) -> None:
        self.workflow = WorkflowRepository(db)
        self.dossier = DossierRepository(db)
        self.progress = ProgressRepository(db)
        self.side_events = SideEventRepository(db)


class WriteRepositories:
    """Repositories bound to the request transaction (commit on success, rollback on error)."""

    def __init__(self, db: WriteSession) -> None:
        self.workflow = WorkflowRepository(db)
        self.dossier = DossierRepository(db)
        self.progress = ProgressRepository(db)
        self.comments = CommentRepository(db)
