"""Side-event mapping and task selection, checked without a database."""

from datetime import UTC, datetime

from caseflow.application.dtos.progress import ProgressResult
from caseflow.application.use_cases.timeline import compose_timeline
from caseflow.domain.entities.workflow import WorkflowGraph, WorkflowStepEntity
from caseflow.domain.enums import ProgressStatus, SideEventKind
from caseflow.infrastructure.persistence.models.side_events import Appointment
from caseflow.infrastructure.persistence.repositories.side_event_repo import (
    appointment_event,
    task_condition,
)

NOW = datetime(2025, 3, 10, 15, 0, tzinfo=UTC)


def _at(hour: int) -> datetime:
    return datetime(2025, 3, 10, hour, 0, tzinfo=UTC)


def _sql(clause) -> str:
    return str(clause.compile(compile_kwargs={"literal_binds": True}))


def test_appointment_is_placed_at_its_start_time() -> None:
    """Booked at 09:00 for 13:00: it belongs to the step running at 13:00."""
    appointment = Appointment(
        id="ap1",
        dossier_id="d1",
        title="Hearing",
        status="scheduled",
        created_at=_at(9),
        start_time=_at(13),
        end_time=_at(14),
    )
    event = appointment_event(appointment)
    assert event.kind == SideEventKind.APPOINTMENT
    assert event.timestamp == _at(13)

    steps = [
        WorkflowStepEntity(id=sid, workflow_template_id="t", step_number=n, name=sid.upper())
        for n, sid in enumerate(["a", "b"], start=1)
    ]
    graph = WorkflowGraph(template_id="t", world_id="w", name="T", steps=steps)
    progress = [
        ProgressResult(
            id="pa", dossier_id="d1", workflow_step_id="a", status=ProgressStatus.COMPLETED,
            started_at=_at(8), completed_at=_at(10), completed_by="u",
        ),
        ProgressResult(
            id="pb", dossier_id="d1", workflow_step_id="b", status=ProgressStatus.IN_PROGRESS,
            started_at=_at(10),
        ),
    ]
    groups = {g.step.id: g for g in compose_timeline(graph, progress, [event], NOW)}

    assert [e.id for e in groups["b"].lane_b] == ["ap1"]
    assert groups["a"].lane_b == []


def test_naive_start_time_is_taken_as_utc() -> None:
    appointment = Appointment(
        id="ap2",
        title="Call",
        status="scheduled",
        start_time=datetime(2025, 3, 10, 13, 0),
        end_time=datetime(2025, 3, 10, 13, 30),
    )
    assert appointment_event(appointment).timestamp == _at(13)


def test_task_condition_without_steps_is_dossier_only() -> None:
    assert _sql(task_condition("d1", [])) == "tasks.dossier_id = 'd1'"


def test_step_tasks_of_other_dossiers_are_excluded() -> None:
    sql = _sql(task_condition("d1", ["s1", "s2"]))

    assert sql.startswith("tasks.dossier_id = 'd1' OR ")
    assert "tasks.dossier_id IS NULL AND tasks.workflow_step_id IN ('s1', 's2')" in sql
