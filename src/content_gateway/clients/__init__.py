"""
Upstream API clients.

Components:
- BaseUpstreamClient: connection pooling + resilient call path
- ContentApiClient: content API (records and generic resources)
- GenerativeTextClient: generative-text Messages API
- prompts: system prompts for analysis and content generation
"""

from content_gateway.clients.base_client import BaseUpstreamClient
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.clients.generative_client import GenerativeTextClient

__all__ = [
    "BaseUpstreamClient",
    "ContentApiClient",
    "GenerativeTextClient",
]
