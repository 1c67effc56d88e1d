"""
Constraint checks the host input control applies natively.

Length bounds and pattern for textual kinds, numeric range for ``number``.
These are advisory: ``is_field_satisfied`` never consults them.
"""

import math
import re
from typing import Any

from ..schema.catalog import BoundsKind, FieldCatalog
from ..schema.models import FieldBase


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def check_constraints(field: FieldBase, value: Any) -> list[str]:
    """
    Return the constraint messages ``value`` violates (empty when valid).

    Empty answers are skipped; whether they are allowed is the required
    check's business.
    """
    rule = field.validation
    if _is_empty(value):
        return []

    spec = FieldCatalog.get(field.type)
    problems: list[str] = []

    if spec.bounds is BoundsKind.RANGE:
        number = _to_number(value)
        if number is None:
            return [rule.message if rule and rule.message else "Please enter a number"]
        if rule is not None:
            if rule.min is not None and number < rule.min:
                problems.append(f"Value must be at least {rule.min}")
            if rule.max is not None and number > rule.max:
                problems.append(f"Value must be at most {rule.max}")

    elif spec.bounds is BoundsKind.LENGTH and rule is not None:
        text = str(value)
        if rule.min is not None and len(text) < rule.min:
            problems.append(f"Must be at least {int(rule.min)} characters")
        if rule.max is not None and len(text) > rule.max:
            problems.append(f"Must be at most {int(rule.max)} characters")

    if spec.pattern and rule is not None and rule.pattern is not None:
        if re.fullmatch(rule.pattern, str(value)) is None:
            problems.append("Please match the requested format")

    if problems and rule is not None and rule.message:
        return [rule.message]
    return problems


def is_constrained(field: FieldBase) -> bool:
    """True when the host control checks the field's answers (numbers always are)."""
    if FieldCatalog.get(field.type).bounds is BoundsKind.RANGE:
        return True
    if field.validation is None:
        return False
    return bool(field.validation.constrained_keys())
