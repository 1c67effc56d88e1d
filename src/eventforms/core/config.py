"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Engine settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="EVENTFORMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # External API (forms store, template catalog, registrations)
    api_url: str = Field(default="http://localhost:3001/api", description="Events API base URL")
    api_timeout: float = Field(default=5.0, gt=0, description="API request timeout (seconds)")
    api_token: str = Field(default="", description="Bearer token for authenticated calls")

    # Circuit breaker
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Seconds before a half-open retry")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Documents
    max_document_size: int = Field(default=512 * 1024, gt=0, description="Max form document size (bytes)")
    max_document_depth: int = Field(default=20, gt=0, description="Max form document nesting depth")

    # Authoring
    regenerate_template_ids: bool = Field(
        default=True, description="Give template fields fresh ids on application"
    )
    default_step_title: str = Field(default="Step 1", description="Title of the synthesized first step")
    default_step_description: str = Field(
        default="Please fill out the following information",
        description="Description of synthesized steps",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
