"""Dependency injection container tests."""

import pytest

from eventforms.clients.forms import FormsClient, FormStore, SubmissionGateway
from eventforms.core.config import Settings
from eventforms.templates import TemplateLibrary


@pytest.mark.unit
def test_container_provides_singletons(di_container, settings):
    client = di_container.get(FormsClient)

    assert di_container.get(FormsClient) is client
    assert di_container.get(Settings) is settings
    assert client.base_url == settings.api_url


@pytest.mark.unit
def test_boundaries_bound_to_client(di_container):
    client = di_container.get(FormsClient)

    assert di_container.get(FormStore) is client
    assert di_container.get(SubmissionGateway) is client


@pytest.mark.unit
def test_template_library(di_container):
    library = di_container.get(TemplateLibrary)

    assert len(library) == 6
    assert di_container.get(TemplateLibrary) is library
