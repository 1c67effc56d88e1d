"""Fast JSON document codec for stored form documents."""

from typing import Any

import msgspec
import orjson

from .validate import FormEngineError

MAX_DOCUMENT_SIZE = 512 * 1024  # 512KB
MAX_DOCUMENT_DEPTH = 20


class DocumentError(FormEngineError):
    """Form document could not be decoded or exceeds limits."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_decoder = msgspec.json.Decoder()


def validate_document_size(data: bytes, max_size: int = MAX_DOCUMENT_SIZE) -> None:
    """
    Reject oversized documents before decoding.

    Raises:
        DocumentError: If size exceeds limit
    """
    size = len(data)
    if size > max_size:
        raise DocumentError(f"Document size {size} bytes exceeds maximum {max_size} bytes")


def validate_document_depth(obj: Any, max_depth: int = MAX_DOCUMENT_DEPTH, current_depth: int = 0) -> None:
    """
    Validate nesting depth of a decoded document.

    Raises:
        DocumentError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise DocumentError(f"Document nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_document_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_document_depth(item, max_depth, current_depth + 1)


def decode_document(
    data: str | bytes,
    max_size: int = MAX_DOCUMENT_SIZE,
    max_depth: int = MAX_DOCUMENT_DEPTH,
) -> dict[str, Any]:
    """
    Decode a JSON object document.

    Args:
        data: JSON text or bytes
        max_size: Maximum accepted size in bytes
        max_depth: Maximum accepted nesting depth

    Returns:
        Decoded dictionary

    Raises:
        DocumentError: If the payload is too large, too deep, invalid, or not an object
    """
    try:
        raw = data.encode("utf-8") if isinstance(data, str) else data
        validate_document_size(raw, max_size)
        result = _decoder.decode(raw)
    except (msgspec.DecodeError, UnicodeError) as e:
        raise DocumentError(f"Invalid JSON: {e}", e) from e

    if not isinstance(result, dict):
        raise DocumentError(f"Expected JSON object, got {type(result).__name__}")

    validate_document_depth(result, max_depth)
    return result


def encode_document(obj: Any, indent: bool = False) -> str:
    """
    Encode a JSON-compatible document.

    Args:
        obj: Document (dicts, lists, scalars)
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    try:
        return orjson.dumps(obj, option=option).decode("utf-8")
    except TypeError as e:
        raise DocumentError(f"Document is not JSON serializable: {e}", e) from e
