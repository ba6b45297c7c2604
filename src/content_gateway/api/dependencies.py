"""
FastAPI dependency injection for the Content Gateway.

Expensive resources (HTTP clients, tier selector, converters) are built once
in the application lifespan and stored on ``app.state``; these getters hand
them to route handlers. Tests swap them via ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Request

from content_gateway.cache.tier_selector import CacheTierSelector
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.clients.generative_client import GenerativeTextClient
from content_gateway.config import Settings, settings
from content_gateway.documents.converter import FormatConverter
from content_gateway.documents.renderer import DocumentRenderer
from content_gateway.services.record_service import RecordService


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


def get_tier_selector(request: Request) -> CacheTierSelector:
    """Process-wide cache tier selector (shared by every fetcher)."""
    return request.app.state.tier_selector


def get_content_client(request: Request) -> ContentApiClient:
    return request.app.state.content_client


def get_record_service(request: Request) -> RecordService:
    """
    Get the cached record service.

    Args:
        request: Current request (gives access to app.state)

    Returns:
        RecordService bound to the shared tier selector
    """
    return request.app.state.record_service


def get_generative_client(request: Request) -> GenerativeTextClient:
    return request.app.state.generative_client


def get_document_renderer(request: Request) -> DocumentRenderer:
    return request.app.state.document_renderer


def get_format_converter(request: Request) -> FormatConverter:
    return request.app.state.format_converter
