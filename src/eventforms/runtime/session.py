"""
Filling Session
Renderer-side navigation over a read-only form snapshot.

States are step indices ``0..n-1`` (a single-step form has one state).
``advance`` is gated by the current step being satisfied, ``retreat`` is
always allowed past the first step, and ``submit`` needs the last step and a
fully satisfied form.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from returns.result import Failure, Result, Success

from ..core.logging_config import LogContext, get_logger
from ..schema.models import Form, FormField
from .constraints import check_constraints, is_constrained
from .responses import ResponseCollector, ResponseValue
from .validator import (
    FieldIssue,
    can_advance,
    can_submit,
    current_step_fields,
    unsatisfied_fields,
)

if TYPE_CHECKING:
    from ..clients.forms import Registration, SubmissionGateway

logger = get_logger(__name__)


@dataclass(frozen=True)
class Progress:
    """Position shown in the progress bar (``step`` is 1-based)."""

    step: int
    total: int
    percent: int


class FormSession:
    """One participant filling one form."""

    def __init__(self, form: Form, initial: Mapping[str, ResponseValue] | None = None) -> None:
        self._form = form.model_copy(deep=True)
        self.responses = ResponseCollector(initial)
        self.step_index = 0

    @property
    def form(self) -> Form:
        return self._form

    @property
    def total_steps(self) -> int:
        return self._form.step_count if self._form.is_multi_step and self._form.steps else 1

    @property
    def is_last_step(self) -> bool:
        return self.step_index == self.total_steps - 1

    def fields(self) -> list[FormField]:
        """Fields to render for the current step."""
        return current_step_fields(self._form, self.step_index)

    def answer(self, field_id: str, value: ResponseValue) -> None:
        if self._form.get_field(field_id) is None:
            raise KeyError(f"Form '{self._form.id}' has no field '{field_id}'")
        self.responses.set(field_id, value)

    def toggle_option(self, field_id: str, option: str, checked: bool) -> list[str]:
        if self._form.get_field(field_id) is None:
            raise KeyError(f"Form '{self._form.id}' has no field '{field_id}'")
        return self.responses.toggle_option(field_id, option, checked)

    def progress(self) -> Progress:
        total = self.total_steps
        step = self.step_index + 1
        # Round half up, as the progress bar does.
        percent = int(step * 100 / total + 0.5)
        return Progress(step=step, total=total, percent=percent)

    def issues(self, include_constraints: bool = False) -> list[FieldIssue]:
        """
        Problems with the current step's answers.

        Unsatisfied required fields always; with ``include_constraints`` also
        the length/range/pattern violations the input control would report.
        """
        issues = unsatisfied_fields(self._form, self.responses, self.step_index)
        if not include_constraints:
            return issues

        flagged = {issue.field_id for issue in issues}
        for f in self.fields():
            if f.id in flagged or not is_constrained(f):
                continue
            for message in check_constraints(f, self.responses.get(f.id)):
                issues.append(FieldIssue(field_id=f.id, label=f.label, message=message))
        return issues

    def advance(self) -> Result[int, list[FieldIssue]]:
        """
        Move to the next step.

        Returns:
            Success with the new step index, or Failure with the current
            step's unsatisfied fields (empty when there is no next step)
        """
        if can_advance(self._form, self.step_index, self.responses):
            self.step_index += 1
            logger.debug("step_advanced", form_id=self._form.id, step=self.step_index)
            return Success(self.step_index)

        if self.is_last_step:
            return Failure([])
        return Failure(unsatisfied_fields(self._form, self.responses, self.step_index))

    def retreat(self) -> bool:
        """Move back one step; False on the first step."""
        if self.step_index == 0:
            return False
        self.step_index -= 1
        logger.debug("step_retreated", form_id=self._form.id, step=self.step_index)
        return True

    def payload(self) -> dict[str, Any]:
        return self.responses.payload(self._form)

    def submit(self, gateway: SubmissionGateway, event_id: str) -> Result[Registration, list[FieldIssue]]:
        """
        Submit the answers through ``gateway``.

        Incomplete answers are reported as a Failure with per-field issues
        (an empty list means the last step has not been reached yet). Errors
        raised by the gateway propagate unchanged. A successful submission
        resets the answers and returns to the first step.
        """
        with LogContext(form_id=self._form.id, event_id=event_id):
            multi_step_index = self.step_index if self._form.is_multi_step else None
            if not can_submit(self._form, self.responses, multi_step_index):
                issues = unsatisfied_fields(self._form, self.responses) if self.is_last_step else []
                logger.info("submit_blocked", issues=len(issues), step=self.step_index)
                return Failure(issues)

            registration = gateway.submit(event_id, self.payload())

            logger.info("form_submitted", registration_id=registration.id)
            self.responses.reset()
            self.step_index = 0
            return Success(registration)
