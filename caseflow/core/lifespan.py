"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring; no business logic here.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from caseflow.core.config import get_settings
from caseflow.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup; dispose the SQL engine on shutdown."""
    setup_logging()
    settings = get_settings()
    if not settings.database_url:
        logger.warning("DATABASE_URL not set: SQL-backed routes will return 503")
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    from caseflow.infrastructure.persistence import database

    if database.engine is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
