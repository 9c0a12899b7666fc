"""Feed API routes."""

from fastapi import APIRouter, Depends

from api.v1.dependencies import CurrentUser, get_feed_service
from api.v1.schemas.feed import AuthorSummary, FeedEntryResponse, FeedListResponse
from domain.entities.post import FeedEntry
from domain.services.feed_service import FeedService

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "",
    response_model=FeedListResponse,
    summary="Global feed",
    responses={
        200: {"description": "Every post with its author, newest first"},
        503: {"description": "The feed could not be loaded"},
    },
)
async def get_global_feed(
    user: CurrentUser,
    service: FeedService = Depends(get_feed_service),
) -> FeedListResponse:
    """
    Get every post joined with its author, newest first.

    Posts with equal timestamps are ordered by post id. There is no
    pagination; the whole feed is returned as one snapshot.
    """
    entries = await service.get_global_feed()
    return build_feed_response(entries)


def build_feed_response(entries: list[FeedEntry]) -> FeedListResponse:
    """Convert feed entries to the list response envelope."""
    return FeedListResponse(
        data=[_build_entry_response(entry) for entry in entries],
        meta={"total": len(entries)},
    )


def _build_entry_response(entry: FeedEntry) -> FeedEntryResponse:
    """Convert a domain feed entry to its response schema."""
    return FeedEntryResponse(
        id=entry.post.id,
        user_id=entry.post.user_id,
        content=entry.post.content,
        created_at=entry.post.created_at,
        author=AuthorSummary(
            user_id=entry.post.user_id,
            full_name=entry.author_full_name,
            email=entry.author_email,
        ),
    )
