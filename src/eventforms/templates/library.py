"""
Form Templates
Pre-built field sets for common registration and feedback forms
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..core.logging_config import get_logger
from ..core.validate import TemplateApplicationError
from ..schema.models import FormField, FormType

logger = get_logger(__name__)

RATING_SCALE = ["5", "4", "3", "2", "1"]


class FormTemplate(BaseModel):
    """Read-only named field set"""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    form_type: FormType = FormType.REGISTRATION
    fields: list[FormField]

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "FormTemplate":
        ids = [f.id for f in self.fields]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate field ids {duplicates}")
        return self


def _rating(field_id: str, label: str) -> dict[str, Any]:
    return {"id": field_id, "type": "select", "label": label, "required": True, "options": RATING_SCALE}


def _text(field_id: str, kind: str, label: str, placeholder: str | None, required: bool) -> dict[str, Any]:
    data: dict[str, Any] = {"id": field_id, "type": kind, "label": label, "required": required}
    if placeholder is not None:
        data["placeholder"] = placeholder
    return data


_CONTACT_FIELDS = [
    _text("full-name", "text", "Full Name", "Enter your full name", True),
    _text("email", "email", "Email Address", "your@email.com", True),
    _text("phone", "phone", "Phone Number", "+1 (555) 000-0000", True),
]

BUILTIN_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "basic-registration",
        "name": "Basic Registration",
        "description": "Simple registration with essential contact information",
        "form_type": "registration",
        "fields": _CONTACT_FIELDS,
    },
    {
        "id": "professional-registration",
        "name": "Professional Event",
        "description": "Registration for professional events and conferences",
        "form_type": "registration",
        "fields": [
            *_CONTACT_FIELDS,
            _text("organization", "text", "Organization/Company", "Your company name", True),
            _text("job-title", "text", "Job Title", "Your position", False),
            {
                "id": "dietary-restrictions",
                "type": "select",
                "label": "Dietary Restrictions",
                "placeholder": "Select if applicable",
                "required": False,
                "options": ["none", "vegetarian", "vegan", "halal", "kosher", "gluten-free", "other"],
            },
        ],
    },
    {
        "id": "feedback-basic",
        "name": "Basic Event Feedback",
        "description": "Simple feedback form with overall rating and comments",
        "form_type": "feedback",
        "fields": [
            {**_rating("overall-rating", "Overall Event Rating (1-5)"), "placeholder": "Select rating"},
            _text("what-liked", "textarea", "What did you like most?", "Share what you enjoyed...", True),
            _text("what-improve", "textarea", "What could we improve?", "Share your suggestions...", False),
            {
                "id": "would-recommend",
                "type": "select",
                "label": "Would you recommend this event?",
                "required": True,
                "options": ["yes", "maybe", "no"],
            },
            _text("additional-comments", "textarea", "Additional Comments", "Any other feedback...", False),
        ],
    },
    {
        "id": "feedback-detailed",
        "name": "Detailed Event Feedback",
        "description": "Comprehensive feedback across aspects",
        "form_type": "feedback",
        "fields": [
            _rating("content-quality", "Content Quality (1-5)"),
            _rating("speaker-rating", "Speaker Rating (1-5)"),
            _rating("venue-rating", "Venue & Facilities (1-5)"),
            _rating("organization-rating", "Organization (1-5)"),
            _rating("value-for-money", "Value for Money (1-5)"),
            _text("highlights", "textarea", "Event Highlights", "Best parts of the event", True),
            _text("improvements", "textarea", "Suggestions", "How can we improve?", False),
            _text("future-topics", "textarea", "Future Topics", "Topics for future events", False),
        ],
    },
    {
        "id": "feedback-nps",
        "name": "NPS + Feedback",
        "description": "Net Promoter Score with feedback",
        "form_type": "feedback",
        "fields": [
            {
                "id": "nps-score",
                "type": "select",
                "label": "NPS Score (0-10)",
                "placeholder": "Select score",
                "required": True,
                "options": [str(score) for score in range(10, -1, -1)],
            },
            _text("nps-reason", "textarea", "Reason for Score", "Please explain your rating...", True),
            _rating("overall-experience", "Overall Experience (1-5)"),
            {
                "id": "met-expectations",
                "type": "select",
                "label": "Met Expectations?",
                "required": True,
                "options": ["exceeded", "met", "below"],
            },
            _text(
                "additional-feedback",
                "textarea",
                "Any additional feedback?",
                "Share any other thoughts or suggestions...",
                False,
            ),
        ],
    },
    {
        "id": "feedback-session",
        "name": "Session Feedback",
        "description": "Feedback form for individual sessions or workshops",
        "form_type": "feedback",
        "fields": [
            _text(
                "session-name",
                "text",
                "Session/Workshop Name",
                "Which session are you providing feedback for?",
                True,
            ),
            _rating("session-rating", "Overall Session Rating (1-5)"),
            {
                "id": "content-relevance",
                "type": "select",
                "label": "Content Relevance",
                "required": True,
                "options": ["very-relevant", "relevant", "somewhat-relevant", "not-relevant"],
            },
            _rating("presenter-effectiveness", "Presenter Effectiveness (1-5)"),
            _text("key-takeaways", "textarea", "Key Takeaways", "What were your main learnings?", True),
            _text(
                "session-improvements",
                "textarea",
                "How could this session be improved?",
                "Share your suggestions...",
                False,
            ),
        ],
    },
]


def parse_template(document: dict[str, Any]) -> FormTemplate:
    """
    Validate one template document.

    Raises:
        TemplateApplicationError: If the document is not a valid template
    """
    try:
        return FormTemplate.model_validate(document)
    except ValidationError as e:
        template_id = document.get("id") if isinstance(document, dict) else None
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise TemplateApplicationError(
            f"Malformed template at {location or 'root'}: {first['msg']}", template_id=template_id
        ) from e


class TemplateLibrary:
    """Library of form templates, keyed by template id"""

    def __init__(self, templates: Iterable[FormTemplate] | None = None) -> None:
        if templates is None:
            templates = [FormTemplate.model_validate(doc) for doc in BUILTIN_TEMPLATES]
        self._templates: dict[str, FormTemplate] = {}
        for template in templates:
            if template.id in self._templates:
                raise TemplateApplicationError(f"Duplicate template id '{template.id}'", template_id=template.id)
            self._templates[template.id] = template

    @classmethod
    def from_documents(cls, documents: Iterable[dict[str, Any]]) -> "TemplateLibrary":
        """Build a library from served template documents."""
        library = cls([parse_template(doc) for doc in documents])
        logger.debug("templates_loaded", count=len(library))
        return library

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def get(self, template_id: str) -> FormTemplate | None:
        """Get template by ID"""
        return self._templates.get(template_id)

    def list_all(self) -> list[FormTemplate]:
        """List all templates"""
        return list(self._templates.values())

    def list_by_type(self, form_type: FormType | str) -> list[FormTemplate]:
        """List templates for registration or feedback forms"""
        form_type = FormType(form_type)
        return [t for t in self._templates.values() if t.form_type is form_type]

    def search(self, query: str) -> list[FormTemplate]:
        """Search templates by name, description or field label"""
        query_lower = query.lower()
        results = []

        for template in self._templates.values():
            if (query_lower in template.name.lower() or
                    query_lower in template.description.lower() or
                    any(query_lower in f.label.lower() for f in template.fields)):
                results.append(template)

        return results
