"""
API-specific request and response models for FastAPI endpoints.

Request fields are optional at the schema level; blank or missing required
values are rejected in the route with a 400 error envelope.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class CompleteRequest(BaseModel):
    """Body of POST /api/claude/complete."""

    prompt: Optional[str] = Field(default=None, description="User prompt")
    system: Optional[str] = Field(default=None, description="Optional system prompt")


class AnalyzeRequest(BaseModel):
    """Body of POST /api/claude/analyze."""

    text: Optional[str] = Field(default=None, description="Text to analyze")
    type: str = Field(
        default="general",
        description="Analysis type",
        examples=["sentiment", "summary", "keywords", "language", "general"],
    )


class GenerateRequest(BaseModel):
    """Body of POST /api/claude/generate."""

    prompt: Optional[str] = Field(default=None, description="Generation prompt")
    type: str = Field(
        default="general",
        description="Content type",
        examples=["story", "poem", "essay", "code", "general"],
    )
    creativity: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Sampling temperature (default 0.9)"
    )


class ConversationTurn(BaseModel):
    role: str
    content: str


class ConversationRequest(BaseModel):
    """Body of POST /api/claude/conversation."""

    messages: Optional[List[ConversationTurn]] = Field(default=None, description="Message history")
    system: Optional[str] = Field(default=None, description="Optional system prompt")


class TierResponse(BaseModel):
    """Cache tier state."""

    state: str = Field(examples=["distributed_active", "local_fallback"])
    tier: Optional[str] = Field(default=None, examples=["distributed", "local"])
    probe_latency_ms: Optional[int] = None
    probe_error: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded"],
    )
    version: str = Field(description="Gateway version", examples=["0.1.0"])
    cache: TierResponse
    services: dict[str, str] = Field(
        description="Upstream reachability",
        examples=[{"content_api": "ok", "generative_api": "not_checked"}],
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Health check timestamp (UTC)",
    )
