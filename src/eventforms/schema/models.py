"""
Form schema models.

Fields are a tagged union over the ``type`` key: each variant carries only
the attributes its kind supports, so an ``options`` list on a text field or a
``pattern`` on a number field is rejected at construction time. All models
are frozen; editor operations build new instances instead of mutating.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from ..core.json import (
    MAX_DOCUMENT_DEPTH,
    MAX_DOCUMENT_SIZE,
    decode_document,
    encode_document,
)
from .catalog import BoundsKind, FieldCatalog, FieldKind, ValueShape


class FormType(str, Enum):
    """Kinds of forms an event can own"""
    REGISTRATION = "registration"
    FEEDBACK = "feedback"


class ValidationRule(BaseModel):
    """Optional per-field constraints applied by the host input control."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min: int | float | None = None
    max: int | float | None = None
    pattern: str | None = None
    message: str | None = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        """Pattern must be a valid regular expression."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> ValidationRule:
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        return self

    def constrained_keys(self) -> set[str]:
        """Constraint attributes that are set (``message`` excluded)."""
        return {key for key in ("min", "max", "pattern") if getattr(self, key) is not None}


class FieldBase(BaseModel):
    """Attributes shared by every field kind."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Unique within the owning form")
    type: str
    label: str
    placeholder: str | None = None
    required: bool = False
    validation: ValidationRule | None = None

    @property
    def kind(self) -> FieldKind:
        return FieldKind(self.type)

    @property
    def value_shape(self) -> ValueShape:
        return FieldCatalog.value_shape(self.type, getattr(self, "options", None))

    @property
    def is_array_valued(self) -> bool:
        return self.value_shape is ValueShape.ARRAY

    @model_validator(mode="after")
    def validate_rule_for_kind(self) -> FieldBase:
        """Reject validation attributes that do not apply to this kind."""
        if self.validation is None:
            return self

        spec = FieldCatalog.get(self.type)
        unsupported = self.validation.constrained_keys() - spec.rule_keys
        if unsupported:
            raise ValueError(
                f"validation {sorted(unsupported)} not supported for '{self.type}' fields"
            )

        if spec.bounds is BoundsKind.LENGTH:
            for bound in (self.validation.min, self.validation.max):
                if bound is not None and bound < 0:
                    raise ValueError("length bounds must be non-negative")
        return self


class TextualField(FieldBase):
    """Free-text kinds (length bounds, pattern)."""

    type: Literal["text", "email", "phone", "textarea", "url"] = "text"


class NumberField(FieldBase):
    """Numeric input (range bounds)."""

    type: Literal["number"] = "number"


class DateField(FieldBase):
    type: Literal["date"] = "date"


class FileField(FieldBase):
    type: Literal["file"] = "file"


def _check_options(options: list[str]) -> list[str]:
    if len(set(options)) != len(options):
        raise ValueError("options must be unique")
    if any(not option.strip() for option in options):
        raise ValueError("options must not be blank")
    return options


class ChoiceField(FieldBase):
    """Single choice from a non-empty option list."""

    type: Literal["select", "radio"] = "select"
    options: list[str] = Field(..., min_length=1)

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: list[str]) -> list[str]:
        return _check_options(v)


class CheckboxField(FieldBase):
    """Option-backed multi-select, or a single boolean box without options."""

    type: Literal["checkbox"] = "checkbox"
    options: list[str] | None = None

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: list[str] | None) -> list[str] | None:
        if not v:
            return None
        return _check_options(v)


FormField = Annotated[
    Union[TextualField, NumberField, DateField, FileField, ChoiceField, CheckboxField],
    Field(discriminator="type"),
]

field_adapter: TypeAdapter[FormField] = TypeAdapter(FormField)


def parse_field(data: dict[str, Any] | FieldBase) -> FormField:
    """Validate a field document into its kind-specific variant."""
    if isinstance(data, FieldBase):
        return data
    return field_adapter.validate_python(data)


class Step(BaseModel):
    """Ordered subset of a form's fields shown together."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    title: str
    description: str | None = None
    field_ids: list[str] = Field(default_factory=list, alias="fields")


class Form(BaseModel):
    """
    A form document.

    Pure data: invariants are checked by ``schema.integrity`` and kept by the
    editor functions. Server-managed keys are carried through untouched.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    event_id: str | None = None
    form_type: FormType = FormType.REGISTRATION
    title: str = Field(..., min_length=1)
    description: str | None = None
    fields: list[FormField] = Field(default_factory=list)
    is_multi_step: bool = False
    steps: list[Step] | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    @property
    def step_count(self) -> int:
        return len(self.steps) if self.steps else 0

    def get_field(self, field_id: str) -> FormField | None:
        """Get field by ID"""
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def field_index(self, field_id: str) -> int | None:
        for index, f in enumerate(self.fields):
            if f.id == field_id:
                return index
        return None

    def step_of(self, field_id: str) -> int | None:
        """Index of the first step that references ``field_id``."""
        for index, step in enumerate(self.steps or []):
            if field_id in step.field_ids:
                return index
        return None

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def to_document(self) -> dict[str, Any]:
        """Plain JSON-compatible dict using the stored document keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Form:
        return cls.model_validate(document)

    def to_json(self, indent: bool = False) -> str:
        return encode_document(self.to_document(), indent=indent)

    @classmethod
    def from_json(
        cls,
        data: str | bytes,
        max_size: int = MAX_DOCUMENT_SIZE,
        max_depth: int = MAX_DOCUMENT_DEPTH,
    ) -> Form:
        return cls.from_document(decode_document(data, max_size=max_size, max_depth=max_depth))
