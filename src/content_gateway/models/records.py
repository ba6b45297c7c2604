"""
Content records fetched from the content API.

A Record is immutable once fetched. The wire format uses the content API's
camelCase ``userId``; Python code uses ``owner_id``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """A domain content item (a post on the content API)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., description="Unique record identifier")
    owner_id: int = Field(..., alias="userId", description="Identifier of the owning user")
    title: Optional[str] = Field(default=None, description="Record title")
    body: Optional[str] = Field(default=None, description="Record body text")
