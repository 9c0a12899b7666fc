"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends

from api.dependencies.auth import AuthenticatedUser
from domain.services.feed_service import FeedService
from domain.services.post_service import PostService
from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import TokenUser
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_feed_service() -> FeedService:
    """Get Feed service instance."""
    return FeedService(get_uow_factory())


@lru_cache
def get_post_service() -> PostService:
    """Get Post service instance."""
    return PostService(get_uow_factory())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


async def get_provisioned_user(
    user: AuthenticatedUser,
    profile_service: ProfileService = Depends(get_profile_service),
) -> TokenUser:
    """Authenticated user whose profile row is guaranteed to exist."""
    await profile_service.ensure_profile(user.id, user.email, user.full_name)
    return user


# Type alias for convenience in route handlers
CurrentUser = Annotated[TokenUser, Depends(get_provisioned_user)]
