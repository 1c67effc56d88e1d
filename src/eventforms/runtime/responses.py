"""
Response collection for one filling session.

Answers are keyed by field id. Array-valued fields (option-backed
checkboxes) hold a list of selected options in selection order; every other
field holds one scalar.
"""

import copy
from collections.abc import Iterator, Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.logging_config import get_logger
from ..schema.models import Form

logger = get_logger(__name__)


class FileReference(BaseModel):
    """Metadata of a file picked for a ``file`` field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    size: int = Field(default=0, ge=0)
    content_type: str | None = None
    url: str | None = None


ResponseValue = Union[str, int, float, bool, FileReference, list[str]]


def serialize_value(value: ResponseValue) -> Any:
    """JSON-compatible form of one answer."""
    if isinstance(value, FileReference):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return list(value)
    return value


class ResponseCollector(Mapping[str, ResponseValue]):
    """Mutable answer map; read access follows the ``Mapping`` protocol."""

    def __init__(self, initial: Mapping[str, ResponseValue] | None = None) -> None:
        self._values: dict[str, ResponseValue] = copy.deepcopy(dict(initial or {}))

    def __getitem__(self, field_id: str) -> ResponseValue:
        return self._values[field_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ResponseCollector({self._values!r})"

    def set(self, field_id: str, value: ResponseValue | tuple[str, ...]) -> None:
        """Record an answer, replacing any previous one."""
        if isinstance(value, (list, tuple)):
            value = [str(option) for option in value]
        self._values[field_id] = value
        logger.debug("response_set", field_id=field_id)

    def toggle_option(self, field_id: str, option: str, checked: bool) -> list[str]:
        """
        Check or uncheck one option of an array-valued answer.

        Selection order is preserved and an option is never listed twice.
        Returns the new selection.
        """
        current = self._values.get(field_id)
        selected = list(current) if isinstance(current, list) else []

        if checked and option not in selected:
            selected.append(option)
        elif not checked and option in selected:
            selected.remove(option)

        self._values[field_id] = selected
        return list(selected)

    def clear(self, field_id: str) -> None:
        self._values.pop(field_id, None)

    def reset(self) -> None:
        """Drop every answer."""
        self._values.clear()

    def snapshot(self) -> dict[str, ResponseValue]:
        """Deep copy of the current answers."""
        return copy.deepcopy(self._values)

    def payload(self, form: Form) -> dict[str, Any]:
        """
        Submission body for ``form``.

        Only answers for fields the form defines are included, in field
        order; answers left over from removed fields are dropped.
        """
        known = form.field_ids
        dropped = [field_id for field_id in self._values if field_id not in known]
        if dropped:
            logger.debug("responses_dropped", form_id=form.id, field_ids=dropped)

        return {
            field_id: serialize_value(self._values[field_id])
            for field_id in known
            if field_id in self._values
        }
