"""WorkflowEngineClient and OptimisticWorkflowView over httpx.MockTransport."""

import json

import httpx
import pytest

from caseflow.client import (
    OptimisticWorkflowView,
    RemoteTransitionError,
    WorkflowEngineClient,
    error_from_body,
)
from caseflow.domain.enums import ProgressStatus
from caseflow.domain.exceptions import (
    AlreadyCompletedError,
    AuthorizationException,
    ValidationError,
)


def _row(step_id: str, status: str, **extra) -> dict:
    return {
        "id": f"p-{step_id}",
        "dossier_id": "d1",
        "workflow_step_id": step_id,
        "status": status,
        **extra,
    }


SUMMARY = {"total_steps": 2, "completed_steps": 0, "percentage": 0, "current_steps": ["s1"]}
TIMELINE = {"dossier_id": "d1", "groups": [], "summary": SUMMARY}


class FakeServer:
    """Answers the workflow API routes; records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.progress = [_row("s1", "in_progress"), _row("s2", "pending")]
        self.transition_response: httpx.Response | None = None
        self.on_transition = None
        self.reads_fail = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/v1/workflow-engine":
            if self.on_transition:
                self.on_transition(request)
            if self.transition_response is not None:
                return self.transition_response
            self.progress = [_row("s1", "completed", completed_by="u1"), _row("s2", "in_progress")]
            return httpx.Response(200, json={"progress": self.progress, "activatedStepIds": ["s2"]})
        if self.reads_fail and request.method == "GET":
            raise httpx.ConnectError("connection reset", request=request)
        if path == "/api/v1/dossiers/d1/progress":
            return httpx.Response(200, json=self.progress)
        if path == "/api/v1/dossiers/d1/timeline":
            return httpx.Response(200, json=TIMELINE)
        return httpx.Response(404, json={"error": "HTTP_ERROR", "message": "Not Found", "details": {}})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def remote(server: FakeServer):
    http = httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="http://caseflow")
    client = WorkflowEngineClient(http=http, token="tok")
    yield client
    await http.aclose()


async def test_complete_step_sends_contract_body(remote, server) -> None:
    result = await remote.complete_step("d1", "s1", notes="done", form_data={"a": 1})

    assert result.activated_step_ids == ["s2"]
    assert result.progress[0].status == ProgressStatus.COMPLETED
    request = server.requests[0]
    assert request.headers["authorization"] == "Bearer tok"
    assert json.loads(request.content) == {
        "action": "complete_step",
        "dossierId": "d1",
        "stepId": "s1",
        "notes": "done",
        "formData": {"a": 1},
    }


async def test_make_decision_and_reopen_bodies(remote, server) -> None:
    await remote.make_decision("d1", "s1", False)
    await remote.reopen_step("d1", "s2", "s1")

    decision, reopen = (json.loads(r.content) for r in server.requests)
    assert decision == {"action": "make_decision", "dossierId": "d1", "stepId": "s1", "decision": False}
    assert reopen == {"action": "reopen_step", "dossierId": "d1", "stepId": "s2", "targetStepId": "s1"}


async def test_typed_error_is_rebuilt(remote, server) -> None:
    server.transition_response = httpx.Response(
        409,
        json={
            "error": "AlreadyCompletedError",
            "message": "Step s1 is already completed on dossier d1",
            "details": {"dossier_id": "d1", "step_id": "s1"},
        },
    )
    with pytest.raises(AlreadyCompletedError) as exc_info:
        await remote.complete_step("d1", "s1")

    assert exc_info.value.message == "Step s1 is already completed on dossier d1"
    assert exc_info.value.details == {"dossier_id": "d1", "step_id": "s1"}


async def test_validation_error_keeps_missing_fields(remote, server) -> None:
    server.transition_response = httpx.Response(
        422,
        json={
            "error": "ValidationError",
            "message": "Form validation failed",
            "details": {"step_id": "s1", "missing_fields": ["name"], "invalid_fields": {}},
        },
    )
    with pytest.raises(ValidationError) as exc_info:
        await remote.complete_step("d1", "s1")
    assert exc_info.value.details["missing_fields"] == ["name"]


def test_error_from_body_generic_codes() -> None:
    exc = error_from_body({"error": "PERMISSION_DENIED", "message": "no", "details": {}}, 403)
    assert isinstance(exc, AuthorizationException)
    assert exc.error_code == "PERMISSION_DENIED"


def test_error_from_body_unknown_code() -> None:
    exc = error_from_body({"error": "TEAPOT", "message": "short and stout"}, 418)
    assert isinstance(exc, RemoteTransitionError)
    assert exc.error_code == "TEAPOT"
    assert exc.status_code == 418


def test_error_from_body_without_error_body() -> None:
    exc = error_from_body("<html>Bad gateway</html>", 502)
    assert isinstance(exc, RemoteTransitionError)
    assert exc.details == {"status_code": 502}


async def test_non_json_error_response(remote, server) -> None:
    server.transition_response = httpx.Response(502, text="<html>Bad gateway</html>")
    with pytest.raises(RemoteTransitionError) as exc_info:
        await remote.complete_step("d1", "s1")
    assert exc_info.value.status_code == 502


async def test_transport_failure_raises_remote_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://x") as http:
        client = WorkflowEngineClient(http=http)
        with pytest.raises(RemoteTransitionError) as exc_info:
            await client.get_progress("d1")
    assert exc_info.value.status_code is None


async def test_get_progress_and_timeline(remote) -> None:
    progress = await remote.get_progress("d1")
    timeline = await remote.get_timeline("d1")
    assert [p.workflow_step_id for p in progress] == ["s1", "s2"]
    assert timeline.summary.current_steps == ["s1"]


async def test_owned_http_client_is_closed() -> None:
    async with WorkflowEngineClient("http://caseflow.invalid") as client:
        assert client._owns_http
    assert client._http.is_closed


# --- OptimisticWorkflowView ---


async def test_optimistic_mark_then_refetch(remote, server) -> None:
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    seen: dict = {}

    def capture(request: httpx.Request) -> None:
        seen["status"] = view.step_status("s1")
        seen["in_flight"] = view.in_flight

    server.on_transition = capture

    result = await view.complete_step("s1")

    assert seen == {"status": ProgressStatus.COMPLETED, "in_flight": True}
    assert result.activated_step_ids == ["s2"]
    assert view.in_flight is False
    assert view.step_status("s2") == ProgressStatus.IN_PROGRESS
    assert view.timeline is not None
    assert server.paths()[-2:] == ["/api/v1/dossiers/d1/progress", "/api/v1/dossiers/d1/timeline"]


async def test_failure_is_corrected_by_refetch_and_reraised(remote, server) -> None:
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    server.transition_response = httpx.Response(
        409,
        json={"error": "AlreadyCompletedError", "message": "done already", "details": {}},
    )

    with pytest.raises(AlreadyCompletedError):
        await view.complete_step("s1")

    # the server still reports s1 in progress; the optimistic mark is gone
    assert view.step_status("s1") == ProgressStatus.IN_PROGRESS
    assert view.in_flight is False
    transitions = [p for p in server.paths() if p == "/api/v1/workflow-engine"]
    assert len(transitions) == 1


async def test_optimistic_decision_sets_decision(remote, server) -> None:
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    seen: dict = {}
    server.on_transition = lambda request: seen.update(
        row=next(r for r in view.progress if r.workflow_step_id == "s1")
    )

    await view.make_decision("s1", True)

    assert seen["row"].status == ProgressStatus.COMPLETED
    assert seen["row"].decision_taken is True


async def test_optimistic_reopen_marks_target_active(remote, server) -> None:
    server.progress = [_row("s1", "completed"), _row("s2", "completed")]
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    seen: dict = {}
    server.on_transition = lambda request: seen.update(status=view.step_status("s1"))

    await view.reopen_step("s2", "s1")

    assert seen["status"] == ProgressStatus.IN_PROGRESS


async def test_failed_transition_and_failed_refetch_restores_rows(remote, server) -> None:
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    server.transition_response = httpx.Response(
        409,
        json={"error": "AlreadyCompletedError", "message": "done already", "details": {}},
    )
    server.reads_fail = True

    with pytest.raises(AlreadyCompletedError) as exc_info:
        await view.complete_step("s1")

    assert isinstance(exc_info.value.__cause__, RemoteTransitionError)
    assert view.step_status("s1") == ProgressStatus.IN_PROGRESS
    assert view.in_flight is False


async def test_successful_transition_survives_failed_refetch(remote, server) -> None:
    view = OptimisticWorkflowView(remote, "d1")
    await view.refresh()
    server.reads_fail = True

    result = await view.complete_step("s1")

    assert result.activated_step_ids == ["s2"]
    assert view.stale is True
    assert view.step_status("s1") == ProgressStatus.COMPLETED
    assert view.step_status("s2") == ProgressStatus.IN_PROGRESS
    assert view.in_flight is False
