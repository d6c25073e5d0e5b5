"""Step form parsing and validation.

Templates store form_fields as a JSON list of descriptors. On load the list
is checked against FORM_FIELDS_SCHEMA and parsed into FormField values.
Submitted form_data is checked with one validator per FormFieldType; the
table must cover every member of the enum.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date
from typing import Any

import jsonschema
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from caseflow.domain.entities.workflow import FormField, WorkflowStepEntity
from caseflow.domain.enums import FormFieldType
from caseflow.domain.exceptions import InvalidWorkflowTemplateError, ValidationError
from caseflow.shared.utils.datetime import parse_iso_utc

FORM_FIELDS_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "type"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "label": {"type": "string"},
            "type": {"enum": FormFieldType.values()},
            "required": {"type": "boolean"},
            "options": {"type": "array", "items": {"type": "string"}},
            "placeholder": {"type": "string"},
            "description": {"type": "string"},
            "validation": {
                "type": "object",
                "properties": {
                    "min": {"type": "number"},
                    "max": {"type": "number"},
                    "pattern": {"type": "string", "format": "regex"},
                },
                "additionalProperties": False,
            },
        },
    },
}

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


def parse_form_fields(
    raw: list[dict[str, Any]] | None, template_id: str, step_id: str
) -> tuple[FormField, ...]:
    """Check stored descriptors against FORM_FIELDS_SCHEMA and parse them.

    Raises:
        InvalidWorkflowTemplateError: descriptor list does not match the schema
            (including a validation.pattern that is not a valid regex).
    """
    if not raw:
        return ()
    try:
        jsonschema.validate(
            instance=raw, schema=FORM_FIELDS_SCHEMA, format_checker=jsonschema.FormatChecker()
        )
    except jsonschema.ValidationError as e:
        raise InvalidWorkflowTemplateError(
            template_id, [f"step {step_id} form_fields: {e.message}"]
        ) from e
    return tuple(FormField.from_descriptor(item) for item in raw)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_length(field: FormField, value: str) -> str | None:
    if field.min is not None and len(value) < field.min:
        return f"must be at least {field.min:g} characters"
    if field.max is not None and len(value) > field.max:
        return f"must be at most {field.max:g} characters"
    if field.pattern is not None and re.search(field.pattern, value) is None:
        return "does not match the required format"
    return None


def _validate_text(field: FormField, value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be a string"
    return _check_length(field, value)


def _validate_select(field: FormField, value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be a string"
    if field.options and value not in field.options:
        return f"must be one of: {', '.join(field.options)}"
    return _check_length(field, value)


def _validate_number(field: FormField, value: Any) -> str | None:
    if isinstance(value, bool):
        return "must be a number"
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return "must be a number"
    if not isinstance(value, int | float):
        return "must be a number"
    if field.min is not None and value < field.min:
        return f"must be at least {field.min:g}"
    if field.max is not None and value > field.max:
        return f"must be at most {field.max:g}"
    return None


def _validate_date(field: FormField, value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be an ISO 8601 date"
    try:
        date.fromisoformat(value)
    except ValueError:
        try:
            parse_iso_utc(value)
        except ValueError:
            return "must be an ISO 8601 date"
    return None


def _validate_boolean(field: FormField, value: Any) -> str | None:
    if not isinstance(value, bool):
        return "must be true or false"
    return None


def _validate_email(field: FormField, value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be an email address"
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return "must be a valid email address"
    return None


FIELD_VALIDATORS: dict[FormFieldType, Callable[[FormField, Any], str | None]] = {
    FormFieldType.TEXT: _validate_text,
    FormFieldType.TEXTAREA: _validate_text,
    FormFieldType.SELECT: _validate_select,
    FormFieldType.DATE: _validate_date,
    FormFieldType.NUMBER: _validate_number,
    FormFieldType.BOOLEAN: _validate_boolean,
    FormFieldType.EMAIL: _validate_email,
}


def collect_form_errors(
    fields: tuple[FormField, ...], form_data: dict[str, Any] | None
) -> tuple[list[str], dict[str, str]]:
    """Return (missing required field names, {field name: violation}) in field order."""
    data = form_data or {}
    missing: list[str] = []
    invalid: dict[str, str] = {}
    for field in fields:
        value = data.get(field.name)
        if _is_blank(value):
            if field.required:
                missing.append(field.name)
            continue
        error = FIELD_VALIDATORS[field.field_type](field, value)
        if error is not None:
            invalid[field.name] = error
    return missing, invalid


def validate_form_data(step: WorkflowStepEntity, form_data: dict[str, Any] | None) -> None:
    """Validate submitted form data against the step's fields.

    Keys not declared by the step are ignored.

    Raises:
        ValidationError: with details.missing_fields and details.invalid_fields.
        InvalidWorkflowTemplateError: a field pattern of the step does not compile.
    """
    try:
        missing, invalid = collect_form_errors(step.form_fields, form_data)
    except re.error as e:
        raise InvalidWorkflowTemplateError(
            step.workflow_template_id, [f"step {step.id} form field pattern: {e}"]
        ) from e
    if missing or invalid:
        raise ValidationError(step.id, missing, invalid)
