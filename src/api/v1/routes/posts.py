"""Post API routes."""

from fastapi import APIRouter, Depends, status

from api.v1.dependencies import CurrentUser, get_post_service
from api.v1.schemas.post import PostCreate, PostDetailResponse, PostResponse
from domain.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post(
    "",
    response_model=PostDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a post",
    responses={
        201: {"description": "Post created"},
        400: {"description": "Content empty or longer than 500 characters"},
        401: {"description": "Not authenticated"},
        409: {"description": "Author profile missing"},
    },
)
async def create_post(
    body: PostCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """
    Publish a post as the authenticated user.

    The content is trimmed before the length check. Clients should refetch
    the feed afterwards to see the server-assigned id and timestamp.
    """
    post = await service.create(user.id, body.content)
    return PostDetailResponse(data=PostResponse.model_validate(post))
