"""
Data models for the generative-text (Messages) API.

Field names follow the upstream wire format so models can be sent and parsed
without translation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    """One conversation turn."""

    role: str = Field(..., description="Speaker role: 'user' or 'assistant'")
    content: str = Field(..., description="Message text")

    @field_validator("role", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


class Tool(BaseModel):
    """Tool definition offered to the model."""

    name: str
    description: Optional[str] = None
    input_schema: Dict[str, Any] = Field(default_factory=dict)


class MessagesRequest(BaseModel):
    """Request body for POST /v1/messages."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., min_length=1, description="Model identifier")
    max_tokens: int = Field(..., ge=1, description="Maximum tokens to generate")
    messages: List[Message] = Field(..., min_length=1, description="Conversation so far")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Sampling temperature")
    system: Optional[str] = Field(default=None, description="System prompt")
    tools: Optional[List[Tool]] = Field(default=None, description="Tools the model may call")
    tool_choice: Optional[Dict[str, Any]] = Field(default=None, description="Tool selection directive")

    def to_payload(self) -> Dict[str, Any]:
        """JSON payload with unset optional fields dropped."""
        return self.model_dump(exclude_none=True)


class ContentBlock(BaseModel):
    """One segment of generated content."""

    type: str
    text: Optional[str] = None
    name: Optional[str] = None
    input: Optional[Dict[str, Any]] = None


class Usage(BaseModel):
    """Token usage counters."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None


class MessagesResponse(BaseModel):
    """Response body of POST /v1/messages."""

    id: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    content: List[ContentBlock] = Field(default_factory=list)
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Optional[Usage] = None

    def first_text(self) -> Optional[str]:
        """Text of the first text segment, or None."""
        for block in self.content:
            if block.type == "text":
                return block.text
        return None

    def all_text(self) -> str:
        """Concatenated text of every text segment."""
        return "".join(block.text or "" for block in self.content if block.type == "text")

    def has_tool_use(self) -> bool:
        return any(block.type == "tool_use" for block in self.content)
