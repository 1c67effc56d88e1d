"""Form templates and template application."""

from .library import BUILTIN_TEMPLATES, FormTemplate, TemplateLibrary, parse_template
from .applier import apply_template, apply_template_by_id, copy_fields

__all__ = [
    "BUILTIN_TEMPLATES",
    "FormTemplate",
    "TemplateLibrary",
    "parse_template",
    "apply_template",
    "apply_template_by_id",
    "copy_fields",
]
