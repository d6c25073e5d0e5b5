"""Domain exceptions for caseflow.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. The
presentation layer maps them to HTTP responses in exception handlers, and
the remote client maps the wire error code back to the same classes.

The error_code of the workflow errors is the class name; it is the
`error` field of the remote transition contract and must stay stable.
"""

from typing import Any


class CaseflowException(Exception):
    """Base exception for all caseflow errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (defaults to class name).
        details: Additional error context (e.g. step_id, missing_fields).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation: error, message, details."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ResourceNotFoundException(CaseflowException):
    """Raised when a requested resource (dossier, template) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AuthenticationException(CaseflowException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CaseflowException):
    """Raised when the acting user lacks role or world access for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'dossier').
            action: Optional action that was attempted (e.g. 'complete_step').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class InvalidWorkflowTemplateError(CaseflowException):
    """Raised when a template's step graph violates its invariants."""

    def __init__(self, template_id: str, problems: list[str]) -> None:
        super().__init__(
            f"Workflow template {template_id} is invalid",
            details={"template_id": template_id, "problems": problems},
        )


# --- Transition engine errors (wire contract) ---


class StepNotFoundError(CaseflowException):
    """Raised when the requested workflow step does not exist."""

    def __init__(self, step_id: str) -> None:
        super().__init__(
            f"Workflow step not found: {step_id}",
            details={"step_id": step_id},
        )


class ProgressNotFoundError(CaseflowException):
    """Raised when the dossier has no progress row for the step."""

    def __init__(self, dossier_id: str, step_id: str) -> None:
        super().__init__(
            f"No progress for step {step_id} on dossier {dossier_id}",
            details={"dossier_id": dossier_id, "step_id": step_id},
        )


class AlreadyCompletedError(CaseflowException):
    """Raised when completing a step whose progress is already completed."""

    def __init__(self, dossier_id: str, step_id: str) -> None:
        super().__init__(
            f"Step {step_id} is already completed on dossier {dossier_id}",
            details={"dossier_id": dossier_id, "step_id": step_id},
        )


class StepNotActiveError(CaseflowException):
    """Raised when completing a step that is not in_progress (pending, blocked, skipped)."""

    def __init__(self, dossier_id: str, step_id: str, status: str) -> None:
        super().__init__(
            f"Step {step_id} is {status} on dossier {dossier_id}; only in_progress steps can be completed",
            details={"dossier_id": dossier_id, "step_id": step_id, "status": status},
        )


class DecisionRequiredError(CaseflowException):
    """Raised when a decision step is completed without a decision."""

    def __init__(self, step_id: str) -> None:
        super().__init__(
            f"Step {step_id} requires a yes/no decision",
            details={"step_id": step_id},
        )


class InvalidDecisionError(CaseflowException):
    """Raised when successor resolution needs a decision that was not supplied or not applicable."""

    def __init__(self, step_id: str, reason: str) -> None:
        super().__init__(
            f"Invalid decision for step {step_id}: {reason}",
            details={"step_id": step_id, "reason": reason},
        )


class ValidationError(CaseflowException):
    """Raised when step form data is missing required fields or violates constraints.

    details.missing_fields lists exactly the required fields absent from the
    submission; details.invalid_fields maps field name to the violation.
    """

    def __init__(
        self,
        step_id: str,
        missing_fields: list[str],
        invalid_fields: dict[str, str] | None = None,
    ) -> None:
        parts = []
        if missing_fields:
            parts.append(f"missing required field(s): {', '.join(missing_fields)}")
        if invalid_fields:
            parts.append(f"invalid field(s): {', '.join(invalid_fields)}")
        super().__init__(
            f"Form validation failed for step {step_id}: {'; '.join(parts)}",
            details={
                "step_id": step_id,
                "missing_fields": missing_fields,
                "invalid_fields": invalid_fields or {},
            },
        )


class AlreadyInitializedError(CaseflowException):
    """Raised when initializing progress for a dossier that already has rows."""

    def __init__(self, dossier_id: str) -> None:
        super().__init__(
            f"Workflow progress already initialized for dossier {dossier_id}",
            details={"dossier_id": dossier_id},
        )


class LoopBackNotAllowedError(CaseflowException):
    """Raised when an explicit reopen (loop-back) transition is not permitted."""

    def __init__(self, step_id: str, target_step_id: str, reason: str) -> None:
        super().__init__(
            f"Cannot loop back from step {step_id} to {target_step_id}: {reason}",
            details={
                "step_id": step_id,
                "target_step_id": target_step_id,
                "reason": reason,
            },
        )


class InvalidStatusChangeError(CaseflowException):
    """Raised when an administrative status change is not allowed from the current status."""

    def __init__(self, step_id: str, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot change step {step_id} from {current} to {requested}",
            details={"step_id": step_id, "current": current, "requested": requested},
        )


class SqlNotConfiguredException(CaseflowException):
    """Raised when a SQL-backed operation runs without DATABASE_URL configured."""

    def __init__(self) -> None:
        super().__init__(
            "SQL database is not configured. Set DATABASE_URL "
            "(postgresql+asyncpg://...) and run: alembic upgrade head",
            "SQL_NOT_CONFIGURED",
        )
