"""
Required-field validation and step gating.

Satisfaction is a presence check only: a required field is satisfied when it
has a non-empty answer. Pattern and min/max are left to the input control
(see ``runtime.constraints``).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..schema.models import FieldBase, Form, FormField

REQUIRED_MESSAGE = "This field is required"


@dataclass(frozen=True)
class FieldIssue:
    """One input the renderer should highlight."""

    field_id: str
    label: str
    message: str


def is_field_satisfied(field: FieldBase, value: Any) -> bool:
    """
    Check a single answer against the field's ``required`` contract.

    ``0`` and ``False`` are answers; ``None`` and ``""`` are not. An
    array-valued field needs at least one selected option.
    """
    if not field.required:
        return True
    if field.is_array_valued:
        return isinstance(value, (list, tuple)) and len(value) > 0
    return value is not None and value != ""


def _step_bounds_check(form: Form, step_index: int) -> None:
    if not 0 <= step_index < form.step_count:
        raise IndexError(f"step {step_index} out of range (form has {form.step_count} step(s))")


def current_step_fields(form: Form, step_index: int) -> list[FormField]:
    """
    Fields shown at ``step_index``.

    Single-step forms show every field whatever the index. Multi-step forms
    show the step's fields in step order; ids that no longer resolve are
    skipped.

    Raises:
        IndexError: If the form is multi-step and the step does not exist
    """
    if not form.is_multi_step or not form.steps:
        return list(form.fields)

    _step_bounds_check(form, step_index)
    by_id = {f.id: f for f in form.fields}
    return [by_id[field_id] for field_id in form.steps[step_index].field_ids if field_id in by_id]


def is_step_satisfied(form: Form, step_index: int, responses: Mapping[str, Any]) -> bool:
    return all(is_field_satisfied(f, responses.get(f.id)) for f in current_step_fields(form, step_index))


def can_advance(form: Form, step_index: int, responses: Mapping[str, Any]) -> bool:
    """True when a next step exists and the current one is satisfied."""
    if not form.is_multi_step or not 0 <= step_index < form.step_count - 1:
        return False
    return is_step_satisfied(form, step_index, responses)


def can_submit(form: Form, responses: Mapping[str, Any], step_index: int | None = None) -> bool:
    """
    True when the form may be submitted.

    Single-step forms need every field satisfied. Multi-step forms need every
    step satisfied and, when ``step_index`` is given, the last step reached.
    Fields not placed in any step are never shown and so never required.
    """
    if not form.is_multi_step or not form.steps:
        return all(is_field_satisfied(f, responses.get(f.id)) for f in form.fields)

    if step_index is not None and step_index != form.step_count - 1:
        return False
    return all(is_step_satisfied(form, index, responses) for index in range(form.step_count))


def _placed_fields(form: Form) -> list[FormField]:
    if not form.is_multi_step or not form.steps:
        return list(form.fields)

    fields: list[FormField] = []
    seen: set[str] = set()
    for index in range(form.step_count):
        for f in current_step_fields(form, index):
            if f.id not in seen:
                fields.append(f)
                seen.add(f.id)
    return fields


def unsatisfied_fields(
    form: Form,
    responses: Mapping[str, Any],
    step_index: int | None = None,
) -> list[FieldIssue]:
    """
    Per-field report of unsatisfied required fields.

    With ``step_index`` only that step's fields are checked; otherwise every
    field the participant can see.
    """
    fields = _placed_fields(form) if step_index is None else current_step_fields(form, step_index)

    issues = []
    for f in fields:
        if not is_field_satisfied(f, responses.get(f.id)):
            message = f.validation.message if f.validation and f.validation.message else REQUIRED_MESSAGE
            issues.append(FieldIssue(field_id=f.id, label=f.label, message=message))
    return issues
