"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from caseflow.api.v1.dependencies.
"""

from fastapi import APIRouter

from caseflow.api.v1.endpoints import dossiers, health, workflow_engine

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    workflow_engine.router, prefix="/workflow-engine", tags=["workflow-engine"]
)
api_router.include_router(dossiers.router, prefix="/dossiers", tags=["dossiers"])
