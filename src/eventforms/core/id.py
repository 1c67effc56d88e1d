"""ID Generation.

ULID-based ids for forms and fields.

- K-sortable: fields created later sort after earlier ones
- Prefixed: ``form_*`` / ``field_*`` keep documents and logs readable
- Type-safe: NewType wrappers per id category
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

FormID = NewType("FormID", str)
"""Form document identifier"""

FieldID = NewType("FieldID", str)
"""Field identifier (unique within one form)"""


class Prefix:
    """ID prefix constants."""

    FORM = "form"
    FIELD = "field"


# ============================================================================
# Generation
# ============================================================================


def generate_raw() -> str:
    """Generate ULID without prefix."""
    return str(ULID())


def generate_prefixed(prefix: str) -> str:
    """Generate a ULID with a type prefix (``<prefix>_<ulid>``)."""
    return f"{prefix}_{generate_raw()}"


def new_form_id() -> FormID:
    """Generate new form ID."""
    return FormID(generate_prefixed(Prefix.FORM))


def new_field_id() -> FieldID:
    """Generate new field ID."""
    return FieldID(generate_prefixed(Prefix.FIELD))


def generate_field_ids(count: int) -> list[FieldID]:
    """Generate ``count`` distinct field ids (template application)."""
    return [new_field_id() for _ in range(count)]

