"""Referential integrity checks for form schemas."""

from collections import Counter

from returns.result import Failure, Result, Success

from ..core.logging_config import get_logger
from ..core.validate import SchemaIntegrityError, ValidationResult
from .models import Form, Step

logger = get_logger(__name__)


def integrity_issues(form: Form) -> list[ValidationResult]:
    """
    Collect every invariant violation in ``form``.

    Checked invariants:
    - field ids are unique
    - every step reference resolves to an existing field
    - no step lists the same field twice
    - ``is_multi_step`` is true iff ``steps`` is a non-empty list

    A field referenced by two different steps is not an integrity issue: the
    data model allows it, only the editor refuses to create it.
    """
    issues: list[ValidationResult] = []

    counts = Counter(form.field_ids)
    for field_id, count in counts.items():
        if count > 1:
            issues.append(ValidationResult(f"Duplicate field id '{field_id}' ({count} occurrences)", field=field_id))

    known = set(counts)
    for index, step in enumerate(form.steps or []):
        seen: set[str] = set()
        for field_id in step.field_ids:
            if field_id not in known:
                issues.append(
                    ValidationResult(
                        f"Step {index} references unknown field '{field_id}'", field=field_id, value=index
                    )
                )
            elif field_id in seen:
                issues.append(
                    ValidationResult(
                        f"Step {index} lists field '{field_id}' more than once", field=field_id, value=index
                    )
                )
            seen.add(field_id)

    has_steps = bool(form.steps)
    if form.is_multi_step != has_steps:
        issues.append(
            ValidationResult(
                f"is_multi_step={form.is_multi_step} but the form has {form.step_count} step(s)"
            )
        )
    if form.steps is not None and not form.steps:
        issues.append(ValidationResult("Empty step list must be stored as no steps"))

    return issues


def check_integrity(form: Form) -> Result[Form, ValidationResult]:
    """
    Validate form invariants (Result pattern version).

    Returns:
        Success with the form, or Failure with the first issue found
    """
    issues = integrity_issues(form)
    if issues:
        return Failure(issues[0])
    return Success(form)


def enforce_integrity(form: Form) -> Form:
    """
    Return ``form`` if it satisfies every invariant.

    Raises:
        SchemaIntegrityError: With the first violation found
    """
    issues = integrity_issues(form)
    if issues:
        first = issues[0]
        step_index = first.value if isinstance(first.value, int) else None
        raise SchemaIntegrityError(first.message, field_id=first.field, step_index=step_index)
    return form


def repair(form: Form) -> Form:
    """
    Bring a stored document back in line with the invariants.

    Documents written by older clients may carry dangling step references or
    an inconsistent multi-step flag. Repair keeps the first field for any
    duplicated id, drops unresolvable and repeated step references, and
    derives ``is_multi_step`` from the remaining steps.
    """
    issues = integrity_issues(form)
    if not issues:
        return form

    logger.warning("repairing_form", form_id=form.id, issues=[issue.message for issue in issues])

    fields = []
    known: set[str] = set()
    for f in form.fields:
        if f.id not in known:
            fields.append(f)
            known.add(f.id)

    steps: list[Step] = []
    for step in form.steps or []:
        kept: list[str] = []
        for field_id in step.field_ids:
            if field_id in known and field_id not in kept:
                kept.append(field_id)
        steps.append(step.model_copy(update={"field_ids": kept}))

    return form.model_copy(
        update={
            "fields": fields,
            "steps": steps or None,
            "is_multi_step": bool(steps),
        }
    )
