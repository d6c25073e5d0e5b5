"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the {error, message, details} error body used by the remote
transition contract.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from caseflow.core.config import get_settings
from caseflow.domain.exceptions import CaseflowException
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    # validation: reported inline, nothing mutated
    "ValidationError": 422,
    "DecisionRequiredError": 422,
    "InvalidDecisionError": 422,
    # conflicts: resolved by refetching current state
    "AlreadyCompletedError": 409,
    "StepNotActiveError": 409,
    "AlreadyInitializedError": 409,
    "LoopBackNotAllowedError": 409,
    "InvalidStatusChangeError": 409,
    # stale references
    "StepNotFoundError": 404,
    "ProgressNotFoundError": 404,
    "RESOURCE_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "InvalidWorkflowTemplateError": 500,
    "SQL_NOT_CONFIGURED": 503,
}


def _caseflow_exception_handler(request: Request, exc: CaseflowException) -> JSONResponse:
    """Return JSON from CaseflowException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with request validation details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "REQUEST_VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic error list without non-serializable ctx values."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: CaseflowException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(CaseflowException, _caseflow_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
