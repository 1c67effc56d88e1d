"""
Field Catalog
Static registry of supported field kinds and their attribute rules
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Bump when a kind is added or a classification changes.
CATALOG_VERSION = "1"


class FieldKind(str, Enum):
    """Supported field kinds"""
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE = "file"
    DATE = "date"
    URL = "url"
    NUMBER = "number"


class ValueShape(str, Enum):
    """Runtime shape of a field's answer"""
    SCALAR = "scalar"
    ARRAY = "array"


class BoundsKind(str, Enum):
    """What ``min``/``max`` constrain for a kind"""
    NONE = "none"
    LENGTH = "length"
    RANGE = "range"


class OptionsPolicy(str, Enum):
    """Whether a kind carries an option list"""
    FORBIDDEN = "forbidden"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class KindSpec:
    """Catalog entry for one field kind"""
    kind: FieldKind
    options: OptionsPolicy
    bounds: BoundsKind
    pattern: bool

    @property
    def rule_keys(self) -> frozenset[str]:
        """Validation-rule attributes meaningful for this kind."""
        keys = {"message"}
        if self.bounds is not BoundsKind.NONE:
            keys.update(("min", "max"))
        if self.pattern:
            keys.add("pattern")
        return frozenset(keys)


def _textual(kind: FieldKind) -> KindSpec:
    return KindSpec(kind, OptionsPolicy.FORBIDDEN, BoundsKind.LENGTH, pattern=True)


class FieldCatalog:
    """Registry of the eleven supported kinds"""

    KINDS: dict[FieldKind, KindSpec] = {
        FieldKind.TEXT: _textual(FieldKind.TEXT),
        FieldKind.EMAIL: _textual(FieldKind.EMAIL),
        FieldKind.PHONE: _textual(FieldKind.PHONE),
        FieldKind.TEXTAREA: _textual(FieldKind.TEXTAREA),
        FieldKind.URL: _textual(FieldKind.URL),
        FieldKind.NUMBER: KindSpec(FieldKind.NUMBER, OptionsPolicy.FORBIDDEN, BoundsKind.RANGE, pattern=False),
        FieldKind.DATE: KindSpec(FieldKind.DATE, OptionsPolicy.FORBIDDEN, BoundsKind.NONE, pattern=False),
        FieldKind.FILE: KindSpec(FieldKind.FILE, OptionsPolicy.FORBIDDEN, BoundsKind.NONE, pattern=False),
        FieldKind.SELECT: KindSpec(FieldKind.SELECT, OptionsPolicy.REQUIRED, BoundsKind.NONE, pattern=False),
        FieldKind.RADIO: KindSpec(FieldKind.RADIO, OptionsPolicy.REQUIRED, BoundsKind.NONE, pattern=False),
        FieldKind.CHECKBOX: KindSpec(FieldKind.CHECKBOX, OptionsPolicy.OPTIONAL, BoundsKind.NONE, pattern=False),
    }

    @classmethod
    def get(cls, kind: FieldKind | str) -> KindSpec:
        """Get catalog entry for a kind (raises ValueError for unknown kinds)"""
        return cls.KINDS[FieldKind(kind)]

    @classmethod
    def list_all(cls) -> list[KindSpec]:
        """List all catalog entries in declaration order"""
        return list(cls.KINDS.values())

    @classmethod
    def value_shape(cls, kind: FieldKind | str, options: list[str] | None = None) -> ValueShape:
        """
        Classify a field's answer as scalar or array-valued.

        Only an option-backed checkbox collects a list; a checkbox without
        options is a single boolean answer.
        """
        if FieldKind(kind) is FieldKind.CHECKBOX and options:
            return ValueShape.ARRAY
        return ValueShape.SCALAR

    @classmethod
    def requires_options(cls, kind: FieldKind | str) -> bool:
        return cls.get(kind).options is OptionsPolicy.REQUIRED

    @classmethod
    def accepts_options(cls, kind: FieldKind | str) -> bool:
        return cls.get(kind).options is not OptionsPolicy.FORBIDDEN

    @classmethod
    def sanitize(cls, kind: FieldKind | str, attributes: dict[str, Any]) -> dict[str, Any]:
        """
        Drop attributes a kind does not support.

        Used when a field's kind changes: ``options`` and validation keys that
        only made sense for the previous kind are removed. An emptied
        validation rule is removed entirely.
        """
        spec = cls.get(kind)
        cleaned = dict(attributes)

        if spec.options is OptionsPolicy.FORBIDDEN:
            cleaned.pop("options", None)

        rule = cleaned.get("validation")
        if isinstance(rule, dict):
            kept = {k: v for k, v in rule.items() if k in spec.rule_keys and v is not None}
            if kept:
                cleaned["validation"] = kept
            else:
                cleaned.pop("validation")

        return cleaned
