"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    FormEngineError,
    SchemaIntegrityError,
    TemplateApplicationError,
    ValidationResult,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    DocumentError,
    decode_document,
    encode_document,
    validate_document_size,
    validate_document_depth,
)
from .id import FieldID, FormID, new_field_id, new_form_id


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "FormEngineError",
    "SchemaIntegrityError",
    "TemplateApplicationError",
    "ValidationResult",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "DocumentError",
    "decode_document",
    "encode_document",
    "validate_document_size",
    "validate_document_depth",
    # IDs
    "FieldID",
    "FormID",
    "new_field_id",
    "new_form_id",
]
