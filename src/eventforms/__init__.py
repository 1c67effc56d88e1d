"""
eventforms
Form schema and multi-step form engine for event registration and feedback.
"""

from .core import FormEngineError, SchemaIntegrityError, TemplateApplicationError, ValidationResult
from .schema import FieldKind, Form, FormEditor, FormType, Step, new_field, new_form
from .templates import FormTemplate, TemplateLibrary, apply_template
from .runtime import FormSession, ResponseCollector

__version__ = "0.1.0"

__all__ = [
    "FormEngineError",
    "SchemaIntegrityError",
    "TemplateApplicationError",
    "ValidationResult",
    "FieldKind",
    "Form",
    "FormEditor",
    "FormType",
    "Step",
    "new_field",
    "new_form",
    "FormTemplate",
    "TemplateLibrary",
    "apply_template",
    "FormSession",
    "ResponseCollector",
]
