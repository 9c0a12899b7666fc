"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from api.v1.dependencies import (
    CurrentUser,
    get_feed_service,
    get_profile_service,
)
from api.v1.routes.feed import build_feed_response
from api.v1.schemas.feed import FeedListResponse
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse, ProfileUpdate
from domain.services.feed_service import FeedService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get your profile",
)
async def get_own_profile(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile."""
    profile = await service.get_by_user_id(user.id)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.patch(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Edit your profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Full name is blank"},
        404: {"description": "Profile not found"},
    },
)
async def update_own_profile(
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Replace the authenticated user's full name and bio.

    The edited profile is always the caller's own. The response is the
    authoritative profile and can replace local state without a refetch.
    """
    profile = await service.update(user.id, full_name=body.full_name, bio=body.bio)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={
        200: {"description": "Profile"},
        404: {"description": "Profile not found"},
    },
)
async def get_profile(
    user_id: UUID,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get any user's profile by their user id."""
    profile = await service.get_by_user_id(user_id)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/{user_id}/posts",
    response_model=FeedListResponse,
    summary="List a user's posts",
    responses={
        200: {"description": "The user's posts with author, newest first"},
        503: {"description": "The feed could not be loaded"},
    },
)
async def get_user_feed(
    user_id: UUID,
    user: CurrentUser,
    service: FeedService = Depends(get_feed_service),
) -> FeedListResponse:
    """Get one user's posts joined with their profile, newest first."""
    entries = await service.get_user_feed(user_id)
    return build_feed_response(entries)
