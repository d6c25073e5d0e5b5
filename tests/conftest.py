"""Pytest configuration and fixtures for caseflow.

Uses caseflow.main:app for HTTP tests and caseflow.infrastructure.persistence.database
for DB-dependent fixtures. Engine, use cases and endpoints are otherwise
tested against the in-memory repositories in tests/fakes.py.
"""

import os

# Settings are validated when the app module is imported; tests sign their own tokens.
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-not-for-production")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.core.limiter import limiter
from caseflow.domain.entities.actor import ActingUser
from caseflow.infrastructure.persistence import database
from caseflow.infrastructure.services import WorkflowEngine
from caseflow.main import app
from fakes import FIXED_NOW, WORLD_ID, FakeStore, build_graph


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    """Rate limits are keyed by client address; every test request comes from the same one."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (postgresql+asyncpg://...) with migrations applied.
    Skips when Postgres is not configured; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def editor() -> ActingUser:
    return ActingUser(id="user-editor", roles=frozenset({"editor"}), world_access=frozenset({WORLD_ID}))


@pytest.fixture
def admin() -> ActingUser:
    return ActingUser(id="user-admin", roles=frozenset({"admin"}), world_access=frozenset({WORLD_ID}))


@pytest.fixture
def viewer() -> ActingUser:
    return ActingUser(id="user-viewer", roles=frozenset({"viewer"}), world_access=frozenset({WORLD_ID}))


@pytest.fixture
def outsider() -> ActingUser:
    return ActingUser(id="user-outsider", roles=frozenset({"editor"}), world_access=frozenset({"other-world"}))


@pytest.fixture
def store() -> FakeStore:
    """In-memory repositories holding the intake workflow and two dossiers (d1, d2)."""
    return FakeStore(build_graph())


@pytest.fixture
async def started_store(store: FakeStore) -> FakeStore:
    """Store with progress initialized for dossier d1 at FIXED_NOW."""
    await store.progress.initialize_progress("d1", list(store.graph), FIXED_NOW)
    return store


@pytest.fixture
def engine(started_store: FakeStore) -> WorkflowEngine:
    """Engine over the started store with a fixed clock."""
    return started_store.engine(clock=lambda: FIXED_NOW)

