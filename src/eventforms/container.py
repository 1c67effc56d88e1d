"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .clients.forms import FormsClient, FormStore, SubmissionGateway
from .core.config import Settings, get_settings
from .core.logging_config import configure_logging
from .templates.library import TemplateLibrary


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_forms_client(self, settings: Settings) -> FormsClient:
        """Provide the events API client (one HTTP pool, one breaker)."""
        return FormsClient.from_settings(settings)

    @provider
    def provide_form_store(self, client: FormsClient) -> FormStore:
        return client

    @provider
    def provide_submission_gateway(self, client: FormsClient) -> SubmissionGateway:
        return client

    @singleton
    @provider
    def provide_template_library(self) -> TemplateLibrary:
        """Provide the built-in template library."""
        return TemplateLibrary()


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector and set up logging."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    return Injector([CoreModule(settings)])
