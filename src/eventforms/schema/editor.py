"""
Schema Editor
The only path by which a form's structure changes.

Every operation is a pure transform: it takes a form, returns a new form, and
either applies completely or raises ``SchemaIntegrityError`` leaving the input
untouched. Each candidate is re-checked against the integrity invariants
before it is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from ..core.config import get_settings
from ..core.id import new_field_id, new_form_id
from ..core.logging_config import get_logger
from ..core.validate import SchemaIntegrityError, TemplateApplicationError, ValidationResult
from .catalog import FieldCatalog, FieldKind
from .integrity import enforce_integrity
from .models import FieldBase, Form, FormField, FormType, Step, ValidationRule, parse_field

if TYPE_CHECKING:
    from ..templates.library import FormTemplate

logger = get_logger(__name__)

T = TypeVar("T")

STEP_UPDATE_KEYS = frozenset({"title", "description", "field_ids", "fields"})


# ============================================================================
# Factories
# ============================================================================


def new_form(
    title: str,
    event_id: str | None = None,
    form_type: FormType | str = FormType.REGISTRATION,
    description: str | None = None,
    form_id: str | None = None,
) -> Form:
    """Create an empty single-step form for an event."""
    return Form(
        id=form_id or new_form_id(),
        event_id=event_id,
        form_type=FormType(form_type),
        title=title,
        description=description,
        fields=[],
        is_multi_step=False,
    )


def new_field(
    kind: FieldKind | str,
    label: str | None = None,
    required: bool = False,
    field_id: str | None = None,
) -> FormField:
    """
    Create a blank field of ``kind`` the way the builder's palette does.

    Option-backed kinds start with one placeholder option so the field is
    valid from the moment it is added.
    """
    kind = FieldKind(kind)
    data: dict[str, Any] = {
        "id": field_id or new_field_id(),
        "type": kind.value,
        "label": label or f"New {kind.value} field",
        "required": required,
    }
    if FieldCatalog.requires_options(kind):
        data["options"] = ["Option 1"]
    return parse_field(data)


# ============================================================================
# Helpers
# ============================================================================


def _commit(form: Form, **changes: Any) -> Form:
    return enforce_integrity(form.model_copy(update=changes))


def _splice(items: list[T], from_index: int, to_index: int, what: str) -> list[T]:
    """Move one item: remove at ``from_index`` then insert at ``to_index``."""
    size = len(items)
    if not 0 <= from_index < size:
        raise SchemaIntegrityError(f"Cannot move {what} {from_index}: index out of range (0..{size - 1})")
    if not 0 <= to_index < size:
        raise SchemaIntegrityError(f"Cannot move {what} to {to_index}: index out of range (0..{size - 1})")

    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def _steps_of(form: Form) -> list[Step]:
    return list(form.steps or [])


def _require_step(form: Form, step_index: int) -> Step:
    steps = _steps_of(form)
    if not 0 <= step_index < len(steps):
        raise SchemaIntegrityError(
            f"Step {step_index} does not exist (form has {len(steps)} step(s))", step_index=step_index
        )
    return steps[step_index]


def _with_ids(step: Step, field_ids: list[str]) -> Step:
    return step.model_copy(update={"field_ids": field_ids})


def _check_step_refs(form: Form, field_ids: list[str], step_index: int | None = None) -> None:
    """
    Validate the ids a step is about to reference.

    Every id must exist, appear once, and not already be placed in another
    step (``step_index`` is the step being edited, if any).
    """
    seen: set[str] = set()
    for field_id in field_ids:
        if form.get_field(field_id) is None:
            raise SchemaIntegrityError(
                f"Step references unknown field '{field_id}'", field_id=field_id, step_index=step_index
            )
        if field_id in seen:
            raise SchemaIntegrityError(
                f"Step lists field '{field_id}' more than once", field_id=field_id, step_index=step_index
            )
        seen.add(field_id)

        for index, other in enumerate(_steps_of(form)):
            if index != step_index and field_id in other.field_ids:
                raise SchemaIntegrityError(
                    f"Field '{field_id}' is already placed in step {index}",
                    field_id=field_id,
                    step_index=index,
                )


def _parse_step(data: Mapping[str, Any], step_index: int | None = None) -> Step:
    try:
        return Step.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaIntegrityError(f"Invalid step: {e.errors()[0]['msg']}", step_index=step_index) from e


def _merge_field(current: FieldBase, updates: Mapping[str, Any]) -> dict[str, Any]:
    merged = {**current.model_dump(exclude_none=True), **updates}
    rule = merged.get("validation")
    if isinstance(rule, ValidationRule):
        merged["validation"] = rule.model_dump(exclude_none=True)
    return merged


# ============================================================================
# Field operations
# ============================================================================


def add_field(form: Form, field: FormField | dict[str, Any], step_index: int | None = None) -> Form:
    """
    Append a field to the form.

    When the form is multi-step and ``step_index`` names an existing step,
    the field id is also appended to that step; otherwise the field stays
    unattached until placed explicitly.
    """
    try:
        field = parse_field(field)
    except PydanticValidationError as e:
        raise SchemaIntegrityError(f"Invalid field: {e.errors()[0]['msg']}") from e

    if form.get_field(field.id) is not None:
        raise SchemaIntegrityError(f"Field id '{field.id}' already exists", field_id=field.id)

    steps = form.steps
    if form.is_multi_step and step_index is not None and 0 <= step_index < form.step_count:
        steps = [
            _with_ids(step, [*step.field_ids, field.id]) if index == step_index else step
            for index, step in enumerate(_steps_of(form))
        ]
    elif step_index is not None:
        logger.debug("field_unattached", form_id=form.id, field_id=field.id, step_index=step_index)

    updated = _commit(form, fields=[*form.fields, field], steps=steps)
    logger.debug("field_added", form_id=form.id, field_id=field.id, kind=field.type)
    return updated


def update_field(form: Form, field_id: str, updates: Mapping[str, Any]) -> Form:
    """
    Shallow-merge ``updates`` into an existing field.

    The field keeps its id and position. When ``type`` changes, attributes
    the new kind does not support (options, inapplicable validation keys) are
    dropped; a kind that needs options but has none left is rejected. Without
    a kind change, unsupported attributes are rejected.
    """
    index = form.field_index(field_id)
    if index is None:
        raise SchemaIntegrityError(f"Field '{field_id}' does not exist", field_id=field_id)
    if "id" in updates and updates["id"] != field_id:
        raise SchemaIntegrityError("Field ids cannot be changed", field_id=field_id)

    current = form.fields[index]
    merged = _merge_field(current, updates)

    try:
        merged["type"] = FieldKind(merged["type"]).value
    except ValueError as e:
        raise SchemaIntegrityError(f"Unknown field type '{merged['type']}'", field_id=field_id) from e

    if merged["type"] != current.type:
        merged = FieldCatalog.sanitize(merged["type"], merged)
        if FieldCatalog.requires_options(merged["type"]) and not merged.get("options"):
            raise SchemaIntegrityError(
                f"'{merged['type']}' fields need a non-empty options list", field_id=field_id
            )
        logger.info("field_kind_changed", form_id=form.id, field_id=field_id, old=current.type, new=merged["type"])

    try:
        updated_field = parse_field(merged)
    except PydanticValidationError as e:
        raise SchemaIntegrityError(
            f"Invalid update for field '{field_id}': {e.errors()[0]['msg']}", field_id=field_id
        ) from e

    fields = list(form.fields)
    fields[index] = updated_field
    return _commit(form, fields=fields)


def remove_field(form: Form, field_id: str) -> Form:
    """
    Remove a field and cascade its id out of every step.

    Steps emptied by the cascade are kept; removing them is the caller's call.
    """
    if form.get_field(field_id) is None:
        raise SchemaIntegrityError(f"Field '{field_id}' does not exist", field_id=field_id)

    fields = [f for f in form.fields if f.id != field_id]
    steps = form.steps
    if steps:
        steps = [_with_ids(step, [i for i in step.field_ids if i != field_id]) for step in steps]

    updated = _commit(form, fields=fields, steps=steps)
    logger.debug("field_removed", form_id=form.id, field_id=field_id)
    return updated


def reorder_fields(form: Form, from_index: int, to_index: int) -> Form:
    """Move one field in the global display order. Steps are untouched."""
    return _commit(form, fields=_splice(list(form.fields), from_index, to_index, "field"))


# ============================================================================
# Step operations
# ============================================================================


def add_step(form: Form, step: Step | dict[str, Any]) -> Form:
    """Append a step and switch the form to multi-step."""
    if not isinstance(step, Step):
        step = _parse_step(step)

    _check_step_refs(form, step.field_ids)
    updated = _commit(form, steps=[*_steps_of(form), step], is_multi_step=True)
    logger.debug("step_added", form_id=form.id, step_index=updated.step_count - 1, fields=len(step.field_ids))
    return updated


def update_step(form: Form, step_index: int, updates: Mapping[str, Any]) -> Form:
    """Shallow-merge title, description or field ids into a step."""
    current = _require_step(form, step_index)

    unknown = set(updates) - STEP_UPDATE_KEYS
    if unknown:
        raise SchemaIntegrityError(f"Unknown step attributes {sorted(unknown)}", step_index=step_index)

    merged = {**current.model_dump(), **updates}
    if "fields" in merged:
        merged["field_ids"] = merged.pop("fields")
    step = _parse_step(merged, step_index)

    _check_step_refs(form, step.field_ids, step_index)
    steps = _steps_of(form)
    steps[step_index] = step
    return _commit(form, steps=steps)


def remove_step(form: Form, step_index: int) -> Form:
    """
    Remove one step. The step's fields stay in the form, unplaced.

    Removing the last step turns the form back into a single-step form.
    """
    _require_step(form, step_index)
    steps = [step for index, step in enumerate(_steps_of(form)) if index != step_index]
    updated = _commit(form, steps=steps or None, is_multi_step=bool(steps))
    logger.debug("step_removed", form_id=form.id, step_index=step_index, remaining=len(steps))
    return updated


def reorder_steps(form: Form, from_index: int, to_index: int) -> Form:
    return _commit(form, steps=_splice(_steps_of(form), from_index, to_index, "step"))


def assign_field(form: Form, field_id: str, step_index: int) -> Form:
    """
    Place a field at the end of a step, taking it out of any other step.

    A field already in the target step stays where it is.
    """
    if form.get_field(field_id) is None:
        raise SchemaIntegrityError(f"Field '{field_id}' does not exist", field_id=field_id)
    target = _require_step(form, step_index)
    if field_id in target.field_ids:
        return form

    steps = []
    for index, step in enumerate(_steps_of(form)):
        ids = [i for i in step.field_ids if i != field_id]
        if index == step_index:
            ids.append(field_id)
        steps.append(_with_ids(step, ids))
    return _commit(form, steps=steps)


def toggle_multi_step(
    form: Form,
    enabled: bool | None = None,
    step_title: str | None = None,
    step_description: str | None = None,
) -> Form:
    """
    Switch between single-step and multi-step layouts.

    ``enabled=None`` flips the current state; an explicit value already in
    effect is a no-op. Turning on wraps every current field, in order, into a
    single synthesized step. Turning off removes every step, last first.
    The field list is never modified.
    """
    target = (not form.is_multi_step) if enabled is None else enabled
    if target == form.is_multi_step:
        return form

    if target:
        settings = get_settings()
        step = Step(
            title=step_title or settings.default_step_title,
            description=step_description or settings.default_step_description,
            field_ids=form.field_ids,
        )
        return add_step(form, step)

    updated = form
    for index in reversed(range(form.step_count)):
        updated = remove_step(updated, index)
    return updated


# ============================================================================
# Authoring session
# ============================================================================


class FormEditor:
    """
    Authoring session for one form.

    Holds the current form plus the builder's selection state (active field,
    current step). Mutators return ``Result``: on failure the held form is
    unchanged and the failure carries the rejected invariant.
    """

    def __init__(self, form: Form) -> None:
        self._form = form
        self.active_field_id: str | None = None
        self.current_step = 0

    @property
    def form(self) -> Form:
        return self._form

    def _apply(self, operation: str, fn: Callable[..., Form], *args: Any, **kwargs: Any) -> Result[Form, ValidationResult]:
        try:
            updated = fn(self._form, *args, **kwargs)
        except SchemaIntegrityError as e:
            logger.warning("edit_rejected", operation=operation, form_id=self._form.id, error=str(e))
            return Failure(ValidationResult.from_error(e))

        self._form = updated
        return Success(updated)

    # Fields

    def add_field(self, field: FormField | dict[str, Any], step_index: int | None = None) -> Result[Form, ValidationResult]:
        return self._apply("add_field", add_field, field, step_index)

    def add_field_here(self, kind: FieldKind | str, label: str | None = None) -> Result[Form, ValidationResult]:
        """Add a blank field to the step being edited and select it."""
        field = new_field(kind, label=label)
        step_index = self.current_step if self._form.is_multi_step else None
        result = self.add_field(field, step_index)
        if isinstance(result, Success):
            self.active_field_id = field.id
        return result

    def update_field(self, field_id: str, updates: Mapping[str, Any]) -> Result[Form, ValidationResult]:
        return self._apply("update_field", update_field, field_id, updates)

    def remove_field(self, field_id: str) -> Result[Form, ValidationResult]:
        result = self._apply("remove_field", remove_field, field_id)
        if isinstance(result, Success):
            self.active_field_id = None
        return result

    def reorder_fields(self, from_index: int, to_index: int) -> Result[Form, ValidationResult]:
        return self._apply("reorder_fields", reorder_fields, from_index, to_index)

    def select_field(self, field_id: str | None) -> None:
        if field_id is not None and self._form.get_field(field_id) is None:
            raise SchemaIntegrityError(f"Field '{field_id}' does not exist", field_id=field_id)
        self.active_field_id = field_id

    # Steps

    def add_step(self, step: Step | dict[str, Any]) -> Result[Form, ValidationResult]:
        return self._apply("add_step", add_step, step)

    def add_blank_step(self) -> Result[Form, ValidationResult]:
        """Append an empty ``Step N`` step."""
        step = Step(
            title=f"Step {self._form.step_count + 1}",
            description=get_settings().default_step_description,
        )
        return self.add_step(step)

    def update_step(self, step_index: int, updates: Mapping[str, Any]) -> Result[Form, ValidationResult]:
        return self._apply("update_step", update_step, step_index, updates)

    def remove_step(self, step_index: int) -> Result[Form, ValidationResult]:
        result = self._apply("remove_step", remove_step, step_index)
        if isinstance(result, Success):
            self.current_step = max(0, min(self.current_step, self._form.step_count - 1))
        return result

    def reorder_steps(self, from_index: int, to_index: int) -> Result[Form, ValidationResult]:
        return self._apply("reorder_steps", reorder_steps, from_index, to_index)

    def assign_field(self, field_id: str, step_index: int) -> Result[Form, ValidationResult]:
        return self._apply("assign_field", assign_field, field_id, step_index)

    def toggle_multi_step(self, enabled: bool | None = None) -> Result[Form, ValidationResult]:
        result = self._apply("toggle_multi_step", toggle_multi_step, enabled)
        if isinstance(result, Success):
            self.current_step = 0
        return result

    def select_step(self, step_index: int) -> None:
        if self._form.is_multi_step:
            _require_step(self._form, step_index)
        self.current_step = step_index

    def visible_fields(self) -> list[FormField]:
        """Fields shown in the builder canvas for the current step, in global order."""
        if not self._form.is_multi_step or not self._form.steps:
            return list(self._form.fields)
        if not 0 <= self.current_step < self._form.step_count:
            return []
        placed = set(self._form.steps[self.current_step].field_ids)
        return [f for f in self._form.fields if f.id in placed]

    # Templates

    def apply_template(self, template: FormTemplate, fresh_ids: bool | None = None) -> Result[Form, ValidationResult]:
        from ..templates.applier import apply_template

        if fresh_ids is None:
            fresh_ids = get_settings().regenerate_template_ids
        try:
            updated = apply_template(self._form, template, fresh_ids=fresh_ids)
        except TemplateApplicationError as e:
            logger.warning("template_rejected", form_id=self._form.id, template_id=e.template_id, error=str(e))
            return Failure(ValidationResult(str(e), value=e.template_id))

        self._form = updated
        self.current_step = 0
        self.active_field_id = None
        return Success(updated)
