"""Workflow and progress repository integration tests. Require Postgres.

The db_session tests roll back; the concurrency test commits through two
sessions and deletes its template afterwards.
"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import delete

from caseflow.application.dtos.dossier import DossierResult
from caseflow.application.dtos.progress import ProgressPatch, TransitionResult
from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.enums import ProgressStatus, StepType
from caseflow.domain.exceptions import (
    AlreadyCompletedError,
    AlreadyInitializedError,
    ResourceNotFoundException,
)
from caseflow.infrastructure.persistence import database
from caseflow.infrastructure.persistence.models.workflow import WorkflowStep, WorkflowTemplate
from caseflow.infrastructure.persistence.repositories import (
    ProgressRepository,
    WorkflowRepository,
)
from caseflow.infrastructure.services import WorkflowEngine
from caseflow.shared.utils import generate_cuid
from fakes import InMemoryCommentRepository, InMemoryDossierRepository

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


async def _seed_template(db_session, world_id: str) -> WorkflowTemplate:
    """Three steps: review (decision) -> yes: sign / no: archive."""
    review = WorkflowStep(
        step_number=1,
        name="Review",
        step_type=StepType.DECISION.value,
        requires_decision=True,
        form_fields=[{"name": "reviewer", "type": "text", "required": True}],
    )
    sign = WorkflowStep(step_number=2, name="Sign", step_type=StepType.ACTION.value)
    archive = WorkflowStep(
        step_number=3, name="Archive", step_type=StepType.ACTION.value, can_loop_back=True
    )
    template = WorkflowTemplate(
        world_id=world_id, name="Review flow", is_active=True, steps=[review, sign, archive]
    )
    db_session.add(template)
    await db_session.flush()
    review.decision_yes_next_step_id = sign.id
    review.decision_no_next_step_id = archive.id
    await db_session.flush()
    return template


@pytest.mark.requires_db
async def test_get_active_graph(db_session) -> None:
    world_id = f"world-{generate_cuid()}"
    template = await _seed_template(db_session, world_id)

    graph = await WorkflowRepository(db_session).get_active_graph(world_id)

    assert graph is not None
    assert graph.template_id == template.id
    assert [s.name for s in graph] == ["Review", "Sign", "Archive"]
    review = graph.first_step()
    assert review.requires_decision
    assert review.form_fields[0].name == "reviewer"
    graph.validate()


@pytest.mark.requires_db
async def test_get_active_graph_unknown_world_returns_none(db_session) -> None:
    assert await WorkflowRepository(db_session).get_active_graph("no-such-world") is None


@pytest.mark.requires_db
async def test_initialize_and_get_progress(db_session) -> None:
    template = await _seed_template(db_session, f"world-{generate_cuid()}")
    graph = await WorkflowRepository(db_session).get_graph(template.id)
    repo = ProgressRepository(db_session)
    dossier_id = generate_cuid()

    rows = await repo.initialize_progress(dossier_id, list(graph), NOW)

    assert [r.status for r in rows] == [
        ProgressStatus.IN_PROGRESS,
        ProgressStatus.PENDING,
        ProgressStatus.PENDING,
    ]
    assert rows[0].started_at == NOW
    stored = await repo.get_progress(dossier_id)
    assert {r.workflow_step_id for r in stored} == {s.id for s in graph}

    with pytest.raises(AlreadyInitializedError):
        await repo.initialize_progress(dossier_id, list(graph), NOW)


@pytest.mark.requires_db
async def test_apply_transition_under_lock(db_session) -> None:
    template = await _seed_template(db_session, f"world-{generate_cuid()}")
    graph = await WorkflowRepository(db_session).get_graph(template.id)
    repo = ProgressRepository(db_session)
    dossier_id = generate_cuid()
    await repo.initialize_progress(dossier_id, list(graph), NOW)

    async with repo.lock_dossier(dossier_id) as locked:
        first = next(r for r in locked if r.status == ProgressStatus.IN_PROGRESS)
        updated = await repo.apply_transition(
            first.id,
            first.to_patch().with_changes(
                status=ProgressStatus.COMPLETED,
                completed_at=NOW,
                completed_by="u1",
                decision_taken=True,
                form_data={"reviewer": "Ada"},
            ),
        )

    assert updated.status == ProgressStatus.COMPLETED
    assert updated.decision_taken is True
    assert updated.form_data == {"reviewer": "Ada"}
    reread = {r.id: r for r in await repo.get_progress(dossier_id)}
    assert reread[first.id].completed_by == "u1"


@pytest.mark.requires_db
async def test_apply_transition_unknown_row(db_session) -> None:
    repo = ProgressRepository(db_session)
    with pytest.raises(ResourceNotFoundException):
        await repo.apply_transition(
            "missing-progress-id", ProgressPatch(status=ProgressStatus.PENDING)
        )



@pytest.fixture
def session_factory():
    """Session maker for tests that commit and need more than one connection."""
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    return database.AsyncSessionLocal


@pytest.mark.requires_db
async def test_concurrent_completion_from_two_sessions(session_factory) -> None:
    """Two connections complete the same step at once: the row lock lets exactly one win."""
    world_id = f"world-{generate_cuid()}"
    dossier_id = generate_cuid()
    async with session_factory() as session:
        async with session.begin():
            template = await _seed_template(session, world_id)
            graph = await WorkflowRepository(session).get_graph(template.id)
            await ProgressRepository(session).initialize_progress(dossier_id, list(graph), NOW)
    review = graph.first_step()
    review_id = review.id
    user = ActingUser(id="user-editor", roles=frozenset({"editor"}), world_access=frozenset({world_id}))

    async def complete(minutes: int) -> TransitionResult:
        async with session_factory() as session:
            async with session.begin():
                engine = WorkflowEngine(
                    WorkflowRepository(session),
                    InMemoryDossierRepository([DossierResult(id=dossier_id, world_id=world_id)]),
                    ProgressRepository(session),
                    InMemoryCommentRepository(),
                    clock=lambda: NOW + timedelta(minutes=minutes),
                )
                return await engine.complete_step(
                    dossier_id, review_id, user, decision=True, form_data={"reviewer": "Ada"}
                )

    try:
        outcomes = await asyncio.gather(complete(1), complete(2), return_exceptions=True)

        winners = [o for o in outcomes if isinstance(o, TransitionResult)]
        losers = [o for o in outcomes if isinstance(o, AlreadyCompletedError)]
        assert len(winners) == 1, outcomes
        assert len(losers) == 1, outcomes
        async with session_factory() as session:
            stored = {
                r.workflow_step_id: r for r in await ProgressRepository(session).get_progress(dossier_id)
            }
        won = next(r for r in winners[0].progress if r.workflow_step_id == review_id)
        assert stored[review_id].status == ProgressStatus.COMPLETED
        assert stored[review_id].completed_at == won.completed_at
        assert winners[0].activated_step_ids == [review.decision_yes_next_step_id]
    finally:
        async with session_factory() as session:
            async with session.begin():
                await session.execute(delete(WorkflowTemplate).where(WorkflowTemplate.id == template.id))
