"""Workflow graph: successor resolution, tagged edges, template validation."""

import pytest

from caseflow.domain.entities.workflow import (
    FormField,
    WorkflowGraph,
    WorkflowStepEntity,
    resolve_successors,
)
from caseflow.domain.enums import EdgeKind, FormFieldType
from caseflow.domain.exceptions import InvalidDecisionError, InvalidWorkflowTemplateError
from fakes import TEMPLATE_ID, build_graph


def _step(step_id: str, number: int, **kwargs) -> WorkflowStepEntity:
    return WorkflowStepEntity(
        id=step_id, workflow_template_id=TEMPLATE_ID, step_number=number, name=step_id, **kwargs
    )


def test_linear_step_resolves_next() -> None:
    assert resolve_successors(_step("a", 1, next_step_id="b")) == ["b"]


def test_parallel_steps_are_added_to_next() -> None:
    step = _step("a", 1, next_step_id="b", parallel_steps=("c", "d"))
    assert resolve_successors(step) == ["b", "c", "d"]


def test_parallel_only_step_without_next() -> None:
    assert resolve_successors(_step("a", 1, parallel_steps=("c",))) == ["c"]


def test_duplicate_parallel_and_next_listed_once() -> None:
    step = _step("a", 1, next_step_id="b", parallel_steps=("b", "c"))
    assert resolve_successors(step) == ["b", "c"]


def test_terminal_step_has_no_successors() -> None:
    assert resolve_successors(_step("z", 9)) == []


def test_decision_step_follows_branch() -> None:
    step = _step(
        "d", 2, requires_decision=True, decision_yes_next_step_id="y", decision_no_next_step_id="n"
    )
    assert resolve_successors(step, True) == ["y"]
    assert resolve_successors(step, False) == ["n"]


def test_decision_step_missing_branch_is_terminal() -> None:
    step = _step("d", 2, requires_decision=True, decision_yes_next_step_id="y")
    assert resolve_successors(step, False) == []


def test_decision_step_without_decision_raises() -> None:
    step = _step("d", 2, requires_decision=True, decision_yes_next_step_id="y")
    with pytest.raises(InvalidDecisionError) as exc_info:
        resolve_successors(step)
    assert exc_info.value.details["step_id"] == "d"


def test_decision_step_ignores_linear_pointer() -> None:
    step = _step(
        "d", 2, requires_decision=True, next_step_id="x", decision_yes_next_step_id="y"
    )
    assert resolve_successors(step, True) == ["y"]


def test_graph_orders_steps_by_step_number() -> None:
    graph = WorkflowGraph(
        template_id=TEMPLATE_ID,
        world_id="w",
        name="t",
        steps=[_step("c", 3), _step("a", 1), _step("b", 2)],
    )
    assert graph.step_ids() == ["a", "b", "c"]
    assert graph.first_step().id == "a"
    assert "b" in graph
    assert "zz" not in graph
    assert len(graph) == 3


def test_empty_graph_has_no_first_step() -> None:
    graph = WorkflowGraph(template_id=TEMPLATE_ID, world_id="w", name="t")
    assert graph.first_step() is None
    assert graph.edges() == []


def test_edges_are_tagged_by_kind() -> None:
    graph = build_graph()
    edges = {(e.source_id, e.target_id, e.kind) for e in graph.edges()}

    assert ("intake", "eligibility", EdgeKind.LINEAR) in edges
    assert ("eligibility", "documents", EdgeKind.DECISION_YES) in edges
    assert ("eligibility", "closing", EdgeKind.DECISION_NO) in edges
    assert ("documents", "drafting", EdgeKind.LINEAR) in edges
    assert ("documents", "scheduling", EdgeKind.PARALLEL) in edges
    loop_backs = {t for s, t, k in edges if k == EdgeKind.LOOP_BACK}
    assert loop_backs == {"intake", "eligibility", "documents", "drafting", "scheduling"}


def test_loop_back_targets_only_for_flagged_steps() -> None:
    graph = build_graph()
    assert graph.loop_back_targets(graph.get("drafting")) == []
    targets = [s.id for s in graph.loop_back_targets(graph.get("closing"))]
    assert targets == ["intake", "eligibility", "documents", "drafting", "scheduling"]


def test_sample_graph_is_valid() -> None:
    build_graph().validate()


def test_cycles_are_allowed() -> None:
    graph = WorkflowGraph(
        template_id=TEMPLATE_ID,
        world_id="w",
        name="t",
        steps=[_step("a", 1, next_step_id="b"), _step("b", 2, next_step_id="a")],
    )
    graph.validate()
    assert graph.successors("b") == ["a"]


def test_validate_reports_every_problem() -> None:
    graph = WorkflowGraph(
        template_id=TEMPLATE_ID,
        world_id="w",
        name="t",
        steps=[
            _step("a", 1, next_step_id="missing"),
            _step("b", 1, decision_yes_next_step_id="a"),
            WorkflowStepEntity(
                id="c", workflow_template_id="other", step_number=3, name="c"
            ),
            _step(
                "d",
                4,
                form_fields=(
                    FormField(name="x", label="X", field_type=FormFieldType.TEXT),
                    FormField(name="x", label="X again", field_type=FormFieldType.NUMBER),
                ),
            ),
        ],
    )
    with pytest.raises(InvalidWorkflowTemplateError) as exc_info:
        graph.validate()

    problems = exc_info.value.details["problems"]
    assert exc_info.value.details["template_id"] == TEMPLATE_ID
    assert len(problems) == 5
    assert any("unknown step missing" in p for p in problems)
    assert any("share step_number 1" in p for p in problems)
    assert any("does not require a decision" in p for p in problems)
    assert any("belongs to template other" in p for p in problems)
    assert any("repeats form field(s) x" in p for p in problems)


def test_form_field_descriptor_round_trip_keeps_validation() -> None:
    raw = {
        "name": "amount",
        "label": "Amount",
        "type": "number",
        "required": True,
        "validation": {"min": 0, "max": 100},
    }
    field = FormField.from_descriptor(raw)
    assert field.field_type == FormFieldType.NUMBER
    assert field.min == 0
    assert field.max == 100
    assert field.to_descriptor() == raw


def test_form_field_label_defaults_to_name() -> None:
    field = FormField.from_descriptor({"name": "notes", "type": "textarea"})
    assert field.label == "notes"
    assert field.required is False


def test_validate_reports_invalid_field_pattern() -> None:
    graph = WorkflowGraph(
        template_id=TEMPLATE_ID,
        world_id="w",
        name="t",
        steps=[
            _step(
                "a",
                1,
                form_fields=(
                    FormField(name="ref", label="Ref", field_type=FormFieldType.TEXT, pattern="("),
                ),
            )
        ],
    )
    with pytest.raises(InvalidWorkflowTemplateError) as exc_info:
        graph.validate()
    assert exc_info.value.details["problems"] == ["step a field ref has an invalid pattern"]
