"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Schema for editing the caller's own profile.

    There is no target id: the profile edited is always the
    caller's, and unknown fields are ignored.
    """

    full_name: str = Field(..., description="Display name; must not be blank")
    bio: str | None = Field(None, description="Free-form bio; blank clears it")


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    full_name: str
    email: str
    bio: str | None
    created_at: datetime


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response."""

    data: ProfileResponse
