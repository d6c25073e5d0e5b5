"""Application services: form parsing/validation and progress planning."""

from caseflow.application.services.form_validator import (
    FORM_FIELDS_SCHEMA,
    parse_form_fields,
    validate_form_data,
)
from caseflow.application.services.progress_init import plan_initial_progress

__all__ = [
    "FORM_FIELDS_SCHEMA",
    "parse_form_fields",
    "plan_initial_progress",
    "validate_form_data",
]
