"""API test fixtures: an app with every resource dependency overridden."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from content_gateway.api import dependencies
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.clients.generative_client import GenerativeTextClient
from content_gateway.documents.converter import FormatConverter
from content_gateway.documents.renderer import DocumentRenderer
from content_gateway.main import create_app
from content_gateway.services.record_service import RecordService


@pytest.fixture
def record_service():
    return AsyncMock(spec=RecordService)


@pytest.fixture
def generative_client():
    return AsyncMock(spec=GenerativeTextClient)


@pytest.fixture
def content_client():
    client = AsyncMock(spec=ContentApiClient)
    client.health_check.return_value = True
    return client


@pytest.fixture
def pdf_converter():
    converter = MagicMock()
    converter.convert.return_value = b"%PDF-1.7 fake"
    return converter


@pytest.fixture
def app(
    test_settings,
    local_selector,
    record_service,
    generative_client,
    content_client,
    pdf_converter,
):
    application = create_app(test_settings)
    overrides = {
        dependencies.get_settings: lambda: test_settings,
        dependencies.get_tier_selector: lambda: local_selector,
        dependencies.get_record_service: lambda: record_service,
        dependencies.get_generative_client: lambda: generative_client,
        dependencies.get_content_client: lambda: content_client,
        dependencies.get_document_renderer: lambda: DocumentRenderer(title="Posts"),
        dependencies.get_format_converter: lambda: FormatConverter(pdf=pdf_converter),
    }
    application.dependency_overrides.update(overrides)
    return application


@pytest.fixture
def client(app):
    """TestClient without lifespan: resources come from the overrides above."""
    return TestClient(app, raise_server_exceptions=False)
