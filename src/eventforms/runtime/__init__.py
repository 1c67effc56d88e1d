"""Runtime: response collection, validation and the filling session."""

from .responses import FileReference, ResponseCollector, ResponseValue, serialize_value
from .validator import (
    FieldIssue,
    can_advance,
    can_submit,
    current_step_fields,
    is_field_satisfied,
    is_step_satisfied,
    unsatisfied_fields,
)
from .constraints import check_constraints, is_constrained
from .session import FormSession, Progress

__all__ = [
    "FileReference",
    "ResponseCollector",
    "ResponseValue",
    "serialize_value",
    "FieldIssue",
    "can_advance",
    "can_submit",
    "current_step_fields",
    "is_field_satisfied",
    "is_step_satisfied",
    "unsatisfied_fields",
    "check_constraints",
    "is_constrained",
    "FormSession",
    "Progress",
]
