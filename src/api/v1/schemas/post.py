"""Pydantic schemas for Post API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for publishing a Post.

    Length is enforced after trimming by the service, so a padded body
    that trims to 500 characters is accepted.
    """

    content: str = Field(..., description="Post text, 1-500 characters after trimming")


class PostResponse(BaseModel):
    """Schema for Post response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e4567-e89b-12d3-a456-426614174000",
                "content": "Hello world",
                "created_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    user_id: UUID
    content: str
    created_at: datetime


class PostDetailResponse(BaseModel):
    """Schema for single Post response."""

    data: PostResponse
