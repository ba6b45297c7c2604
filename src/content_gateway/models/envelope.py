"""
Tagged success/error envelope returned by every JSON endpoint.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Generic wrapper for API responses."""

    status: str = Field(description="Request status", examples=["success", "error"])
    data: Optional[T] = Field(default=None, description="Payload on success")
    message: Optional[str] = Field(default=None, description="Error description on failure")

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        return cls(status="success", data=data)

    @classmethod
    def error(cls, message: str) -> "ApiResponse[T]":
        return cls(status="error", message=message)
