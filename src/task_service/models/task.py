"""Task record and request/response payloads."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Task(BaseModel):
    """A stored task.

    Tasks are created by the store and never modified afterwards:
    - id is assigned by the store and never reused
    - tags keep the order and duplicates given at creation
    - due may be None when the client did not set one
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="Store-assigned identifier")
    text: str = Field(..., description="Free-text content")
    tags: list[str] = Field(default_factory=list, description="Tags in the order given")
    due: datetime | None = Field(default=None, description="Due timestamp (ISO8601)")


class TaskCreate(BaseModel):
    """Request body for creating a task."""

    model_config = ConfigDict(extra="forbid")

    text: str
    tags: list[str] = Field(default_factory=list)
    due: datetime | None = Field(default=None, strict=True)

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null tag list as no tags."""
        return [] if v is None else v


class TaskCreated(BaseModel):
    """Response body for a created task."""

    id: int
