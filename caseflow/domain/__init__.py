"""Domain layer: workflow graph, acting user, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from caseflow.domain.entities import (
    ActingUser,
    FormField,
    WorkflowGraph,
    WorkflowStepEntity,
    resolve_successors,
)
from caseflow.domain.enums import (
    AppRole,
    CommentType,
    EdgeKind,
    FormFieldType,
    ProgressStatus,
    SideEventKind,
    StepType,
)
from caseflow.domain.exceptions import (
    AlreadyCompletedError,
    AlreadyInitializedError,
    AuthenticationException,
    AuthorizationException,
    CaseflowException,
    DecisionRequiredError,
    InvalidDecisionError,
    InvalidStatusChangeError,
    InvalidWorkflowTemplateError,
    LoopBackNotAllowedError,
    ProgressNotFoundError,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    StepNotActiveError,
    StepNotFoundError,
    ValidationError,
)

__all__ = [
    # Entities
    "ActingUser",
    "FormField",
    "WorkflowGraph",
    "WorkflowStepEntity",
    "resolve_successors",
    # Enums
    "AppRole",
    "CommentType",
    "EdgeKind",
    "FormFieldType",
    "ProgressStatus",
    "SideEventKind",
    "StepType",
    # Exceptions
    "AlreadyCompletedError",
    "AlreadyInitializedError",
    "AuthenticationException",
    "AuthorizationException",
    "CaseflowException",
    "DecisionRequiredError",
    "InvalidDecisionError",
    "InvalidStatusChangeError",
    "InvalidWorkflowTemplateError",
    "LoopBackNotAllowedError",
    "ProgressNotFoundError",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "StepNotActiveError",
    "StepNotFoundError",
    "ValidationError",
]
