"""Pytest configuration and fixtures."""

import os

import pytest
import respx

from eventforms.container import create_container
from eventforms.core import get_settings
from eventforms.schema import Form, FormType, Step, parse_field
from eventforms.templates import TemplateLibrary


API_URL = "http://forms.test/api"


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["EVENTFORMS_API_URL"] = API_URL
    os.environ["EVENTFORMS_LOG_LEVEL"] = "DEBUG"
    os.environ["EVENTFORMS_API_TOKEN"] = "test-token"
    get_settings.cache_clear()


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container(settings):
    """Dependency injection container for testing."""
    return create_container(settings)


@pytest.fixture
def template_library():
    """Built-in template library."""
    return TemplateLibrary()


# ============================================================================
# Schema Fixtures
# ============================================================================

@pytest.fixture
def name_field():
    return parse_field({"id": "name", "type": "text", "label": "Full Name", "required": True})


@pytest.fixture
def email_field():
    return parse_field({"id": "email", "type": "email", "label": "Email", "required": True})


@pytest.fixture
def interests_field():
    return parse_field(
        {
            "id": "interests",
            "type": "checkbox",
            "label": "Interests",
            "required": True,
            "options": ["talks", "workshops", "networking"],
        }
    )


@pytest.fixture
def single_step_form(name_field, email_field, interests_field):
    """Single-step registration form with three required fields."""
    return Form(
        id="form_single",
        event_id="evt_1",
        form_type=FormType.REGISTRATION,
        title="Registration",
        fields=[name_field, email_field, interests_field],
    )


@pytest.fixture
def multi_step_form(name_field, email_field, interests_field):
    """
    Two steps: email first, then name and interests.
    A fourth optional field is left unplaced.
    """
    notes = parse_field({"id": "notes", "type": "textarea", "label": "Notes"})
    return Form(
        id="form_multi",
        event_id="evt_1",
        title="Conference Registration",
        fields=[name_field, email_field, interests_field, notes],
        is_multi_step=True,
        steps=[
            Step(title="Contact", field_ids=["email"]),
            Step(title="About you", field_ids=["name", "interests"]),
        ],
    )


# ============================================================================
# HTTP/Network Fixtures
# ============================================================================

@pytest.fixture
def api_url():
    return API_URL


@pytest.fixture
def mock_api():
    """Mocked events API transport."""
    with respx.mock(base_url=API_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
def form_document():
    """Stored form document as served by the events API."""
    return {
        "id": "form_stored",
        "event_id": "evt_1",
        "title": "Stored Form",
        "form_type": "registration",
        "fields": [
            {"id": "name", "type": "text", "label": "Name", "required": True},
            {"id": "track", "type": "radio", "label": "Track", "options": ["web", "data"]},
        ],
        "is_multi_step": True,
        "steps": [{"title": "Step 1", "fields": ["name", "track"]}],
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-02T10:00:00Z",
        "event": {"id": "evt_1", "title": "DevConf", "organizer_id": "org_1"},
    }


@pytest.fixture
def registration_document():
    """Successful registration response body."""
    return {
        "success": True,
        "data": {
            "registration": {
                "id": "reg_1",
                "status": "confirmed",
                "email": "ana@example.com",
                "name": "Ana",
                "responses": {"name": "Ana"},
                "created_at": "2024-05-03T10:00:00Z",
                "updated_at": "2024-05-03T10:00:00Z",
            },
            "requiresPayment": False,
        },
    }
