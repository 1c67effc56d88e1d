"""Configuration tests."""

import pytest

from eventforms.core import get_settings
from eventforms.core.config import Settings


def test_settings_from_environment():
    """Test settings pick up EVENTFORMS_ variables."""
    settings = get_settings()

    assert settings.api_url == "http://forms.test/api"
    assert settings.log_level == "DEBUG"
    assert settings.api_token == "test-token"


def test_settings_defaults():
    """Test default settings load correctly."""
    settings = Settings()

    assert settings.breaker_fail_max == 5
    assert settings.breaker_reset_timeout == 30
    assert settings.regenerate_template_ids is True
    assert settings.default_step_title == "Step 1"
    assert settings.max_document_size == 512 * 1024


def test_settings_validation():
    """Test settings validation."""
    settings = Settings(api_timeout=2.5)
    assert settings.api_timeout == 2.5

    with pytest.raises(Exception):
        Settings(api_timeout=0)

    with pytest.raises(Exception):
        Settings(breaker_fail_max=-1)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
