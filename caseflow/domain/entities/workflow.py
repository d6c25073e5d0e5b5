"""Workflow graph domain model.

A workflow template is a per-world directed graph of steps. Successors are
explicit tagged edges: linear (next_step_id), decision_yes / decision_no
(branch targets of a decision step), parallel (additive fan-out) and
loop_back (from a can_loop_back step to any earlier step; never followed
automatically). The graph is not required to be acyclic; termination of a
dossier's progression comes from completed steps never being re-entered
automatically.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from caseflow.domain.enums import EdgeKind, FormFieldType, StepType
from caseflow.domain.exceptions import InvalidDecisionError, InvalidWorkflowTemplateError


@dataclass(frozen=True)
class FormField:
    """Typed form field a step collects before completion.

    For number fields min/max bound the value; for text-like fields they
    bound the length. pattern applies to text-like fields only.
    """

    name: str
    label: str
    field_type: FormFieldType
    required: bool = False
    options: tuple[str, ...] = ()
    placeholder: str | None = None
    description: str | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None

    @classmethod
    def from_descriptor(cls, raw: dict[str, Any]) -> "FormField":
        """Build from a stored JSON descriptor (already schema-checked)."""
        validation = raw.get("validation") or {}
        return cls(
            name=raw["name"],
            label=raw.get("label") or raw["name"],
            field_type=FormFieldType(raw["type"]),
            required=bool(raw.get("required", False)),
            options=tuple(raw.get("options") or ()),
            placeholder=raw.get("placeholder"),
            description=raw.get("description"),
            min=validation.get("min"),
            max=validation.get("max"),
            pattern=validation.get("pattern"),
        )

    def to_descriptor(self) -> dict[str, Any]:
        """Return the JSON descriptor shape stored in workflow_steps.form_fields."""
        out: dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "type": self.field_type.value,
            "required": self.required,
        }
        if self.options:
            out["options"] = list(self.options)
        if self.placeholder is not None:
            out["placeholder"] = self.placeholder
        if self.description is not None:
            out["description"] = self.description
        validation = {
            k: v
            for k, v in (("min", self.min), ("max", self.max), ("pattern", self.pattern))
            if v is not None
        }
        if validation:
            out["validation"] = validation
        return out


@dataclass(frozen=True)
class WorkflowStepEntity:
    """One node of a workflow template."""

    id: str
    workflow_template_id: str
    step_number: int
    name: str
    step_type: StepType = StepType.ACTION
    description: str | None = None
    requires_decision: bool = False
    form_fields: tuple[FormField, ...] = ()
    next_step_id: str | None = None
    decision_yes_next_step_id: str | None = None
    decision_no_next_step_id: str | None = None
    parallel_steps: tuple[str, ...] = ()
    can_loop_back: bool = False

    def required_field_names(self) -> list[str]:
        return [f.name for f in self.form_fields if f.required]


def resolve_successors(step: WorkflowStepEntity, decision: bool | None = None) -> list[str]:
    """Return the ids of the steps that follow `step`.

    Decision steps follow exactly one branch; a missing branch target means
    the branch is terminal. Other steps follow next_step_id (if any) plus
    every parallel step, in that order.

    Raises:
        InvalidDecisionError: step requires a decision and none was given.
    """
    if step.requires_decision:
        if decision is None:
            raise InvalidDecisionError(step.id, "decision step requires a yes/no decision")
        target = step.decision_yes_next_step_id if decision else step.decision_no_next_step_id
        return [target] if target else []

    successors: list[str] = []
    if step.next_step_id:
        successors.append(step.next_step_id)
    for step_id in step.parallel_steps:
        if step_id not in successors:
            successors.append(step_id)
    return successors


@dataclass(frozen=True)
class WorkflowEdge:
    source_id: str
    target_id: str
    kind: EdgeKind


@dataclass
class WorkflowGraph:
    """Steps of one template, indexed by id, with edge helpers.

    Iteration order is display order: step_number ascending.
    """

    template_id: str
    world_id: str
    name: str
    steps: list[WorkflowStepEntity] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.steps = sorted(self.steps, key=lambda s: s.step_number)
        self._by_id = {s.id: s for s in self.steps}

    def __iter__(self):
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._by_id

    def get(self, step_id: str) -> WorkflowStepEntity | None:
        return self._by_id.get(step_id)

    def step_ids(self) -> list[str]:
        return [s.id for s in self.steps]

    def first_step(self) -> WorkflowStepEntity | None:
        """Return the step with the smallest step_number (entry of the workflow)."""
        return self.steps[0] if self.steps else None

    def successors(self, step_id: str, decision: bool | None = None) -> list[str]:
        step = self._by_id[step_id]
        return resolve_successors(step, decision)

    def loop_back_targets(self, step: WorkflowStepEntity) -> list[WorkflowStepEntity]:
        """Return the earlier steps an explicit reopen from `step` may target."""
        if not step.can_loop_back:
            return []
        return [s for s in self.steps if s.step_number < step.step_number]

    def edges(self) -> list[WorkflowEdge]:
        """Return every edge of the graph, tagged by kind."""
        out: list[WorkflowEdge] = []
        for step in self.steps:
            if step.requires_decision:
                if step.decision_yes_next_step_id:
                    out.append(
                        WorkflowEdge(step.id, step.decision_yes_next_step_id, EdgeKind.DECISION_YES)
                    )
                if step.decision_no_next_step_id:
                    out.append(
                        WorkflowEdge(step.id, step.decision_no_next_step_id, EdgeKind.DECISION_NO)
                    )
            else:
                if step.next_step_id:
                    out.append(WorkflowEdge(step.id, step.next_step_id, EdgeKind.LINEAR))
                for target in step.parallel_steps:
                    out.append(WorkflowEdge(step.id, target, EdgeKind.PARALLEL))
            for target in self.loop_back_targets(step):
                out.append(WorkflowEdge(step.id, target.id, EdgeKind.LOOP_BACK))
        return out

    def validate(self) -> None:
        """Check template invariants.

        Raises:
            InvalidWorkflowTemplateError: listing every problem found.
        """
        problems: list[str] = []
        seen_numbers: dict[int, str] = {}
        for step in self.steps:
            if step.workflow_template_id != self.template_id:
                problems.append(f"step {step.id} belongs to template {step.workflow_template_id}")
            other = seen_numbers.get(step.step_number)
            if other is not None:
                problems.append(f"steps {other} and {step.id} share step_number {step.step_number}")
            seen_numbers[step.step_number] = step.id

            for label, target in _successor_refs(step):
                if target not in self._by_id:
                    problems.append(f"step {step.id} {label} references unknown step {target}")
            if not step.requires_decision and (
                step.decision_yes_next_step_id or step.decision_no_next_step_id
            ):
                problems.append(f"step {step.id} has decision targets but does not require a decision")

            names = [f.name for f in step.form_fields]
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                problems.append(f"step {step.id} repeats form field(s) {', '.join(duplicates)}")
            for form_field in step.form_fields:
                if form_field.pattern is None:
                    continue
                try:
                    re.compile(form_field.pattern)
                except re.error:
                    problems.append(
                        f"step {step.id} field {form_field.name} has an invalid pattern"
                    )
        if problems:
            raise InvalidWorkflowTemplateError(self.template_id, problems)


def _successor_refs(step: WorkflowStepEntity) -> Iterable[tuple[str, str]]:
    if step.next_step_id:
        yield "next_step_id", step.next_step_id
    if step.decision_yes_next_step_id:
        yield "decision_yes_next_step_id", step.decision_yes_next_step_id
    if step.decision_no_next_step_id:
        yield "decision_no_next_step_id", step.decision_no_next_step_id
    for target in step.parallel_steps:
        yield "parallel_steps", target
