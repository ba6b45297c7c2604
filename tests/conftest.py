"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across the unit test packages.
"""

from typing import Any, Dict, List

import pytest

from content_gateway.config import Settings
from content_gateway.models.records import Record


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.CACHE_TYPE = "redis"
    """
    return Settings(
        # === Application ===
        APP_NAME="Content Gateway (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Upstreams ===
        CONTENT_API_BASE_URL="http://content.test",
        CONTENT_API_TIMEOUT=5.0,
        GENERATIVE_API_BASE_URL="http://generative.test",
        GENERATIVE_API_KEY="test-key",

        # === Retry ===
        RETRY_MAX_RETRIES=3,
        RETRY_BACKOFF_BASE_SECONDS=1.0,
        RETRY_JITTER=0.0,

        # === Cache ===
        CACHE_TYPE="local",  # No Redis in unit tests
        REDIS_URL="redis://localhost:6379/0",
        REDIS_MAX_CONNECTIONS=10,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Disable metrics endpoint in tests
    )


@pytest.fixture
def sample_records_data() -> List[Dict[str, Any]]:
    """Records as returned by the content API (camelCase wire format)."""
    return [
        {"id": 1, "userId": 1, "title": "First post", "body": "Hello world"},
        {"id": 2, "userId": 1, "title": "Second post", "body": "Line one\nLine two"},
        {"id": 3, "userId": 2, "title": "Braces {and} \\slashes", "body": "Third body"},
    ]


@pytest.fixture
def sample_records(sample_records_data) -> List[Record]:
    return [Record.model_validate(item) for item in sample_records_data]
