"""Forms API Client"""

from typing import Any, Protocol

import httpx
import pybreaker
from pydantic import BaseModel, ConfigDict, ValidationError

from ..core.config import Settings
from ..core.json import DocumentError
from ..core.logging_config import LogContext, get_logger
from ..core.validate import FormEngineError
from ..schema.integrity import repair
from ..schema.models import Form, FormType
from ..templates.library import FormTemplate, parse_template

logger = get_logger(__name__)

# Keys the API accepts when creating or updating a form.
FORM_BODY_KEYS = ("title", "description", "form_type", "fields", "is_multi_step", "steps")

REJECTION_STATUSES = frozenset({400, 409, 422})


class ExternalServiceError(FormEngineError):
    """Events API unreachable or returned an error."""

    def __init__(self, message: str, status_code: int | None = None, details: list[Any] | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details or []


class SubmissionRejectedError(ExternalServiceError):
    """The registration service refused a submission (validation, event full, duplicate)."""

    pass


class Registration(BaseModel):
    """Registration created by a successful submission."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    status: str = "pending"
    payment_status: str | None = None
    email: str | None = None
    name: str | None = None
    responses: dict[str, Any] | None = None
    qr_code: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    requires_payment: bool = False
    amount: float | None = None


class FormStore(Protocol):
    """Persistence boundary for form documents."""

    def load_form(self, event_id: str, form_type: FormType | str = FormType.REGISTRATION) -> Form | None: ...

    def create_form(self, event_id: str, form: Form) -> Form: ...

    def save_form(self, event_id: str, form_id: str, form: Form) -> Form: ...

    def delete_form(self, event_id: str, form_id: str) -> None: ...


class SubmissionGateway(Protocol):
    """Submission boundary for participant responses."""

    def submit(self, event_id: str, responses: dict[str, Any]) -> Registration: ...


def form_body(form: Form) -> dict[str, Any]:
    """Request body for create/update: the authored parts of the form."""
    document = form.to_document()
    return {key: document[key] for key in FORM_BODY_KEYS if key in document}


class FormsClient:
    """
    Client for the events API forms, templates and registration endpoints.
    Every call except the health check goes through a circuit breaker; the
    client never retries.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001/api",
        timeout: float = 5.0,
        token: str | None = None,
        fail_max: int = 5,
        reset_timeout: int = 30,
    ) -> None:
        """
        Initialize forms client with circuit breaker.

        Args:
            base_url: Base URL of the events API
            timeout: Request timeout in seconds
            token: Optional bearer token
            fail_max: Consecutive failures before the breaker opens
            reset_timeout: Seconds before the breaker allows a trial call
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.Client(timeout=timeout, headers=headers)

        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="forms-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.base_url)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FormsClient":
        return cls(
            base_url=settings.api_url,
            timeout=settings.api_timeout,
            token=settings.api_token or None,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    # ========================================================================
    # Transport
    # ========================================================================

    def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request through the circuit breaker.

        Transport errors and 5xx responses count as breaker failures; 4xx
        responses are returned to the caller.
        """
        url = f"{self.base_url}{path}"

        def _make_request():
            response = self._client.request(method, url, **kwargs)
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            return self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError as e:
            logger.error(f"{operation}_failed", error="Circuit breaker open - forms API unavailable")
            raise ExternalServiceError("Forms API unavailable (circuit open)") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"{operation}_http_error", status=e.response.status_code)
            raise ExternalServiceError(
                f"Forms API error {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"{operation}_http_error", error=str(e))
            raise ExternalServiceError(f"Forms API request failed: {e}") from e

    def _data(self, operation: str, response: httpx.Response) -> dict[str, Any]:
        """Unwrap the ``{"success", "data", "error", "details"}`` envelope."""
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"{operation}_invalid_response", status=response.status_code)
            raise ExternalServiceError("Invalid JSON from forms API", status_code=response.status_code) from e

        if not isinstance(body, dict):
            logger.error(f"{operation}_invalid_response", type=type(body).__name__)
            raise ExternalServiceError("Unexpected response shape", status_code=response.status_code)

        if response.is_error or body.get("success") is False:
            message = body.get("error") or body.get("message") or f"HTTP {response.status_code}"
            logger.warning(f"{operation}_rejected", status=response.status_code, error=message)
            raise ExternalServiceError(message, status_code=response.status_code, details=body.get("details"))

        data = body.get("data")
        return data if isinstance(data, dict) else {}

    def _parse_form(self, operation: str, data: dict[str, Any]) -> Form:
        try:
            return repair(Form.from_document(data["form"]))
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"{operation}_invalid_form", error=str(e))
            raise DocumentError("Malformed form document from forms API", e) from e

    # ========================================================================
    # Forms
    # ========================================================================

    def load_form(self, event_id: str, form_type: FormType | str = FormType.REGISTRATION) -> Form | None:
        """
        Load the event's form of the given type.

        Returns:
            The (repaired) form, or None if the event has no such form
        """
        response = self._request(
            "load_form", "GET", f"/forms/events/{event_id}/form", params={"type": FormType(form_type).value}
        )
        if response.status_code == 404:
            logger.info("form_not_found", event_id=event_id, form_type=str(form_type))
            return None

        form = self._parse_form("load_form", self._data("load_form", response))
        logger.info("form_loaded", event_id=event_id, form_id=form.id, fields=len(form.fields))
        return form

    def create_form(self, event_id: str, form: Form) -> Form:
        response = self._request("create_form", "POST", f"/forms/events/{event_id}/form", json=form_body(form))
        created = self._parse_form("create_form", self._data("create_form", response))
        logger.info("form_created", event_id=event_id, form_id=created.id)
        return created

    def save_form(self, event_id: str, form_id: str, form: Form) -> Form:
        response = self._request(
            "save_form", "PUT", f"/forms/events/{event_id}/form/{form_id}", json=form_body(form)
        )
        saved = self._parse_form("save_form", self._data("save_form", response))
        logger.info("form_saved", event_id=event_id, form_id=form_id)
        return saved

    def delete_form(self, event_id: str, form_id: str) -> None:
        response = self._request("delete_form", "DELETE", f"/forms/events/{event_id}/form/{form_id}")
        self._data("delete_form", response)
        logger.info("form_deleted", event_id=event_id, form_id=form_id)

    # ========================================================================
    # Templates
    # ========================================================================

    def list_templates(self, form_type: FormType | str | None = None) -> list[FormTemplate]:
        """
        Fetch served templates.

        Raises:
            TemplateApplicationError: If a served template is malformed
        """
        params = {"type": FormType(form_type).value} if form_type else {}
        response = self._request("list_templates", "GET", "/forms/templates", params=params)
        documents = self._data("list_templates", response).get("templates", [])

        templates = []
        for document in documents:
            template = parse_template(document)
            # Served templates carry no type of their own; they belong to the one requested.
            if form_type and "form_type" not in document:
                template = template.model_copy(update={"form_type": FormType(form_type)})
            templates.append(template)

        logger.info("templates_listed", count=len(templates), form_type=str(form_type) if form_type else None)
        return templates

    # ========================================================================
    # Registrations
    # ========================================================================

    def submit(self, event_id: str, responses: dict[str, Any]) -> Registration:
        """
        Submit a participant's answers.

        Raises:
            SubmissionRejectedError: The service refused the submission
            ExternalServiceError: Any other failure
        """
        with LogContext(event_id=event_id):
            response = self._request(
                "submit", "POST", f"/registrations/events/{event_id}/register", json={"formData": responses}
            )
            if response.status_code in REJECTION_STATUSES:
                try:
                    body = response.json()
                except ValueError:
                    body = {}
                body = body if isinstance(body, dict) else {}
                message = body.get("error") or body.get("message") or "Submission rejected"
                logger.warning("submit_rejected", status=response.status_code, error=message)
                raise SubmissionRejectedError(message, status_code=response.status_code, details=body.get("details"))

            data = self._data("submit", response)
            try:
                registration = Registration.model_validate(
                    {
                        **data.get("registration", {}),
                        "requires_payment": data.get("requiresPayment", False),
                        "amount": data.get("amount"),
                    }
                )
            except ValidationError as e:
                logger.error("submit_invalid_response", error=str(e))
                raise ExternalServiceError(
                    "Malformed registration from forms API", status_code=response.status_code
                ) from e

            logger.info("submitted", registration_id=registration.id)
            return registration

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def health_check(self) -> bool:
        """
        Check if the API is reachable (bypasses circuit breaker).

        Returns:
            True if the API is healthy
        """
        try:
            response = self._client.get(f"{self.base_url}/health", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def close(self) -> None:
        """Close HTTP client"""
        self._client.close()

    def __enter__(self) -> "FormsClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
