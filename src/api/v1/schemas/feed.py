"""Pydantic schemas for feed listings."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthorSummary(BaseModel):
    """Author display fields embedded in every feed entry."""

    user_id: UUID
    full_name: str
    email: str


class FeedEntryResponse(BaseModel):
    """A post joined with its author."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e4567-e89b-12d3-a456-426614174000",
                "content": "Hello world",
                "created_at": "2026-01-28T10:00:00",
                "author": {
                    "user_id": "456e4567-e89b-12d3-a456-426614174000",
                    "full_name": "Ada Lovelace",
                    "email": "ada@example.com",
                },
            }
        },
    )

    id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    author: AuthorSummary


class FeedListResponse(BaseModel):
    """Schema for a feed listing response."""

    data: list[FeedEntryResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
