"""Error taxonomy and validation result types."""

from dataclasses import dataclass
from typing import Any


class FormEngineError(Exception):
    """Base class for engine errors."""

    pass


class SchemaIntegrityError(FormEngineError):
    """A schema mutation would violate a form invariant.

    Raised before anything is committed: the form passed to the failing
    operation is left unchanged.
    """

    def __init__(
        self,
        message: str,
        field_id: str | None = None,
        step_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.field_id = field_id
        self.step_index = step_index


class TemplateApplicationError(FormEngineError):
    """Template not found or malformed."""

    def __init__(self, message: str, template_id: str | None = None) -> None:
        super().__init__(message)
        self.template_id = template_id


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None

    @classmethod
    def from_error(cls, error: SchemaIntegrityError) -> "ValidationResult":
        """Build a result from a rejected schema mutation."""
        return cls(str(error), field=error.field_id, value=error.step_index)
