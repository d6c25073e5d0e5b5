"""Async HTTP client for the caseflow workflow API.

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Error bodies ({error, message, details}) are raised as the matching domain
exception; anything that is not a typed error body (connection failure,
timeout, proxy HTML page) is raised as RemoteTransitionError.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter

from caseflow.domain import exceptions as domain_errors
from caseflow.domain.exceptions import CaseflowException
from caseflow.schemas.progress import ProgressResponse
from caseflow.schemas.timeline import TimelineResponse
from caseflow.schemas.workflow_engine import TransitionResponse
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_PROGRESS_LIST = TypeAdapter(list[ProgressResponse])

# Wire error code -> exception class raised on the client side.
_ERROR_CLASSES: dict[str, type[CaseflowException]] = {
    "StepNotFoundError": domain_errors.StepNotFoundError,
    "ProgressNotFoundError": domain_errors.ProgressNotFoundError,
    "AlreadyCompletedError": domain_errors.AlreadyCompletedError,
    "StepNotActiveError": domain_errors.StepNotActiveError,
    "DecisionRequiredError": domain_errors.DecisionRequiredError,
    "InvalidDecisionError": domain_errors.InvalidDecisionError,
    "ValidationError": domain_errors.ValidationError,
    "AlreadyInitializedError": domain_errors.AlreadyInitializedError,
    "LoopBackNotAllowedError": domain_errors.LoopBackNotAllowedError,
    "InvalidStatusChangeError": domain_errors.InvalidStatusChangeError,
    "InvalidWorkflowTemplateError": domain_errors.InvalidWorkflowTemplateError,
    "RESOURCE_NOT_FOUND": domain_errors.ResourceNotFoundException,
    "AUTHENTICATION_ERROR": domain_errors.AuthenticationException,
    "PERMISSION_DENIED": domain_errors.AuthorizationException,
    "SQL_NOT_CONFIGURED": domain_errors.SqlNotConfiguredException,
}


class RemoteTransitionError(CaseflowException):
    """Raised when the workflow API could not be reached or answered without a typed error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(
            message,
            "REMOTE_TRANSITION_ERROR",
            {"status_code": status_code} if status_code is not None else None,
        )
        self.status_code = status_code


def error_from_body(body: Any, status_code: int) -> CaseflowException:
    """Rebuild the typed exception from an error body.

    The instance carries the server's message and details unchanged; the
    class constructor is bypassed because the wire only has the rendered
    message.
    """
    if not isinstance(body, dict) or "error" not in body:
        return RemoteTransitionError(f"Unexpected error response ({status_code})", status_code)
    code = str(body["error"])
    cls = _ERROR_CLASSES.get(code)
    if cls is None:
        exc: CaseflowException = RemoteTransitionError(
            str(body.get("message") or code), status_code
        )
        exc.error_code = code
        return exc
    exc = cls.__new__(cls)
    CaseflowException.__init__(
        exc, str(body.get("message") or code), code, body.get("details") or {}
    )
    return exc


class WorkflowEngineClient:
    """Client for POST /api/v1/workflow-engine and the dossier read routes.

    Pass an existing httpx.AsyncClient (tests use one with MockTransport or
    ASGITransport) or let the client own one built from base_url.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        token: str | None = None,
        timeout: float = 30.0,
        http: httpx.AsyncClient | None = None,
        api_prefix: str = "/api/v1",
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._token = token
        self._prefix = api_prefix.rstrip("/")

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> WorkflowEngineClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        url = f"{self._prefix}{path}"
        try:
            resp = await self._http.request(method, url, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("Workflow API request failed: %s %s: %s", method, url, e)
            raise RemoteTransitionError(f"Request to {url} failed: {e}") from e
        try:
            body = resp.json() if resp.content else None
        except ValueError:
            body = None
        if resp.is_success:
            return body
        raise error_from_body(body, resp.status_code)

    async def _transition(self, payload: dict[str, Any]) -> TransitionResponse:
        body = await self._request(
            "POST",
            "/workflow-engine",
            json={k: v for k, v in payload.items() if v is not None},
        )
        return TransitionResponse.model_validate(body)

    async def complete_step(
        self,
        dossier_id: str,
        step_id: str,
        *,
        user_id: str | None = None,
        decision: bool | None = None,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
    ) -> TransitionResponse:
        return await self._transition(
            {
                "action": "complete_step",
                "dossierId": dossier_id,
                "stepId": step_id,
                "userId": user_id,
                "decision": decision,
                "notes": notes,
                "formData": form_data,
            }
        )

    async def make_decision(
        self,
        dossier_id: str,
        step_id: str,
        decision: bool,
        *,
        user_id: str | None = None,
        notes: str | None = None,
        form_data: dict[str, Any] | None = None,
    ) -> TransitionResponse:
        return await self._transition(
            {
                "action": "make_decision",
                "dossierId": dossier_id,
                "stepId": step_id,
                "userId": user_id,
                "decision": decision,
                "notes": notes,
                "formData": form_data,
            }
        )

    async def reopen_step(
        self,
        dossier_id: str,
        step_id: str,
        target_step_id: str,
        *,
        notes: str | None = None,
    ) -> TransitionResponse:
        return await self._transition(
            {
                "action": "reopen_step",
                "dossierId": dossier_id,
                "stepId": step_id,
                "targetStepId": target_step_id,
                "notes": notes,
            }
        )

    async def get_progress(self, dossier_id: str) -> list[ProgressResponse]:
        body = await self._request("GET", f"/dossiers/{dossier_id}/progress")
        return _PROGRESS_LIST.validate_python(body)

    async def get_timeline(self, dossier_id: str) -> TimelineResponse:
        body = await self._request("GET", f"/dossiers/{dossier_id}/timeline")
        return TimelineResponse.model_validate(body)
