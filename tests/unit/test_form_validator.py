"""Step form parsing (jsonschema) and submitted form data validation."""

import pytest

from caseflow.application.services.form_validator import (
    FIELD_VALIDATORS,
    collect_form_errors,
    parse_form_fields,
    validate_form_data,
)
from caseflow.domain.entities.workflow import FormField, WorkflowStepEntity
from caseflow.domain.enums import FormFieldType
from caseflow.domain.exceptions import InvalidWorkflowTemplateError, ValidationError


def _field(name: str, field_type: FormFieldType, **kwargs) -> FormField:
    return FormField(name=name, label=name.title(), field_type=field_type, **kwargs)


def _step(*fields: FormField) -> WorkflowStepEntity:
    return WorkflowStepEntity(
        id="s1", workflow_template_id="t1", step_number=1, name="S1", form_fields=fields
    )


def test_every_field_type_has_a_validator() -> None:
    assert set(FIELD_VALIDATORS) == set(FormFieldType)


def test_parse_form_fields_accepts_descriptors() -> None:
    fields = parse_form_fields(
        [
            {"name": "reason", "label": "Reason", "type": "select", "options": ["a", "b"]},
            {"name": "due", "type": "date", "required": True},
        ],
        "t1",
        "s1",
    )
    assert [f.name for f in fields] == ["reason", "due"]
    assert fields[0].options == ("a", "b")
    assert fields[1].required is True


def test_parse_form_fields_empty_or_missing() -> None:
    assert parse_form_fields(None, "t1", "s1") == ()
    assert parse_form_fields([], "t1", "s1") == ()


def test_parse_form_fields_rejects_unknown_type() -> None:
    with pytest.raises(InvalidWorkflowTemplateError) as exc_info:
        parse_form_fields([{"name": "x", "type": "signature"}], "t1", "s1")
    assert exc_info.value.details["template_id"] == "t1"
    assert "step s1 form_fields" in exc_info.value.details["problems"][0]


def test_parse_form_fields_rejects_missing_name() -> None:
    with pytest.raises(InvalidWorkflowTemplateError):
        parse_form_fields([{"type": "text"}], "t1", "s1")


def test_parse_form_fields_rejects_invalid_pattern() -> None:
    with pytest.raises(InvalidWorkflowTemplateError) as exc_info:
        parse_form_fields(
            [{"name": "ref", "type": "text", "validation": {"pattern": "("}}], "t1", "s1"
        )
    assert "step s1 form_fields" in exc_info.value.details["problems"][0]


def test_parse_form_fields_accepts_valid_pattern() -> None:
    [field] = parse_form_fields(
        [{"name": "ref", "type": "text", "validation": {"pattern": "^[A-Z]{2}-\\d+$"}}], "t1", "s1"
    )
    assert field.pattern == "^[A-Z]{2}-\\d+$"


def test_broken_pattern_on_step_is_a_template_error() -> None:
    step = _step(_field("ref", FormFieldType.TEXT, pattern="("))
    with pytest.raises(InvalidWorkflowTemplateError) as exc_info:
        validate_form_data(step, {"ref": "AB-1"})
    assert exc_info.value.details["template_id"] == "t1"
    assert exc_info.value.details["problems"][0].startswith("step s1 form field pattern")


def test_missing_required_fields_listed_in_field_order() -> None:
    step = _step(
        _field("b", FormFieldType.TEXT, required=True),
        _field("a", FormFieldType.TEXT, required=True),
        _field("c", FormFieldType.TEXT),
    )
    with pytest.raises(ValidationError) as exc_info:
        validate_form_data(step, {"c": "x"})
    assert exc_info.value.details["missing_fields"] == ["b", "a"]
    assert exc_info.value.details["step_id"] == "s1"
    assert exc_info.value.error_code == "ValidationError"


def test_blank_string_counts_as_missing() -> None:
    step = _step(_field("name", FormFieldType.TEXT, required=True))
    with pytest.raises(ValidationError) as exc_info:
        validate_form_data(step, {"name": "   "})
    assert exc_info.value.details["missing_fields"] == ["name"]


def test_no_form_data_with_required_fields() -> None:
    step = _step(_field("name", FormFieldType.TEXT, required=True))
    with pytest.raises(ValidationError):
        validate_form_data(step, None)


def test_step_without_fields_accepts_anything() -> None:
    validate_form_data(_step(), None)
    validate_form_data(_step(), {"extra": 1})


def test_undeclared_keys_are_ignored() -> None:
    step = _step(_field("name", FormFieldType.TEXT, required=True))
    validate_form_data(step, {"name": "Ada", "unexpected": [1, 2]})


def test_optional_field_may_be_absent() -> None:
    step = _step(_field("email", FormFieldType.EMAIL))
    validate_form_data(step, {})


@pytest.mark.parametrize(
    ("field", "value", "ok"),
    [
        (_field("n", FormFieldType.NUMBER, min=1, max=10), 5, True),
        (_field("n", FormFieldType.NUMBER, min=1, max=10), "7.5", True),
        (_field("n", FormFieldType.NUMBER, min=1, max=10), 11, False),
        (_field("n", FormFieldType.NUMBER, min=1, max=10), 0, False),
        (_field("n", FormFieldType.NUMBER), True, False),
        (_field("n", FormFieldType.NUMBER), "seven", False),
        (_field("s", FormFieldType.SELECT, options=("yes", "no")), "yes", True),
        (_field("s", FormFieldType.SELECT, options=("yes", "no")), "maybe", False),
        (_field("d", FormFieldType.DATE), "2025-03-10", True),
        (_field("d", FormFieldType.DATE), "2025-03-10T09:30:00Z", True),
        (_field("d", FormFieldType.DATE), "10/03/2025", False),
        (_field("b", FormFieldType.BOOLEAN), False, True),
        (_field("b", FormFieldType.BOOLEAN), "true", False),
        (_field("e", FormFieldType.EMAIL), "ada@lovelace.io", True),
        (_field("e", FormFieldType.EMAIL), "not-an-email", False),
        (_field("t", FormFieldType.TEXT, min=3), "ab", False),
        (_field("t", FormFieldType.TEXTAREA, max=5), "abcdef", False),
        (_field("t", FormFieldType.TEXT, pattern=r"^[A-Z]{2}\d{4}$"), "AB1234", True),
        (_field("t", FormFieldType.TEXT, pattern=r"^[A-Z]{2}\d{4}$"), "ab1234", False),
        (_field("t", FormFieldType.TEXT), 42, False),
    ],
)
def test_field_type_validation(field: FormField, value, ok: bool) -> None:
    missing, invalid = collect_form_errors((field,), {field.name: value})
    assert missing == []
    assert (field.name not in invalid) is ok


def test_invalid_fields_reported_with_reason() -> None:
    step = _step(
        _field("amount", FormFieldType.NUMBER, required=True, max=100),
        _field("kind", FormFieldType.SELECT, options=("a", "b")),
    )
    with pytest.raises(ValidationError) as exc_info:
        validate_form_data(step, {"amount": 150, "kind": "c"})
    details = exc_info.value.details
    assert details["missing_fields"] == []
    assert details["invalid_fields"] == {
        "amount": "must be at most 100",
        "kind": "must be one of: a, b",
    }
