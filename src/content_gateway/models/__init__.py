"""
Data models for the Content Gateway.

- records.py: Record (content API item)
- generative.py: Messages API request/response models
- envelope.py: ApiResponse success/error envelope
"""

from content_gateway.models.envelope import ApiResponse
from content_gateway.models.generative import (
    ContentBlock,
    Message,
    MessagesRequest,
    MessagesResponse,
    Tool,
    Usage,
)
from content_gateway.models.records import Record

__all__ = [
    "ApiResponse",
    "ContentBlock",
    "Message",
    "MessagesRequest",
    "MessagesResponse",
    "Record",
    "Tool",
    "Usage",
]
