"""Form schema: field catalog, models, integrity and editing."""

from .catalog import CATALOG_VERSION, FieldCatalog, FieldKind, KindSpec, ValueShape
from .models import (
    CheckboxField,
    ChoiceField,
    DateField,
    FieldBase,
    FileField,
    Form,
    FormField,
    FormType,
    NumberField,
    Step,
    TextualField,
    ValidationRule,
    parse_field,
)
from .integrity import check_integrity, enforce_integrity, integrity_issues, repair
from .editor import (
    FormEditor,
    add_field,
    add_step,
    assign_field,
    new_field,
    new_form,
    remove_field,
    remove_step,
    reorder_fields,
    reorder_steps,
    toggle_multi_step,
    update_field,
    update_step,
)

__all__ = [
    # Catalog
    "CATALOG_VERSION",
    "FieldCatalog",
    "FieldKind",
    "KindSpec",
    "ValueShape",
    # Models
    "FieldBase",
    "TextualField",
    "NumberField",
    "DateField",
    "FileField",
    "ChoiceField",
    "CheckboxField",
    "FormField",
    "FormType",
    "Form",
    "Step",
    "ValidationRule",
    "parse_field",
    # Integrity
    "check_integrity",
    "enforce_integrity",
    "integrity_issues",
    "repair",
    # Editing
    "FormEditor",
    "new_form",
    "new_field",
    "add_field",
    "update_field",
    "remove_field",
    "reorder_fields",
    "add_step",
    "update_step",
    "remove_step",
    "reorder_steps",
    "assign_field",
    "toggle_multi_step",
]
