"""Feed query service: author-enriched, newest-first post listings."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import QueryFailedError
from domain.entities.post import FeedEntry, Post
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class FeedService:
    """Read-only service joining posts with their author profiles.

    Every call is a fresh snapshot; callers re-invoke it to observe new
    writes. A post whose author profile is missing is dropped, never
    returned with a placeholder author.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_global_feed(self) -> list[FeedEntry]:
        """Every post with its author, newest first."""
        async with self._uow_factory() as uow:
            try:
                posts = await uow.posts.get_all()
                return await self._join_authors(uow, posts)
            except SQLAlchemyError as exc:
                logger.error("feed_query_failed", query="global_feed", error=str(exc))
                raise QueryFailedError("global_feed") from exc

    async def get_user_feed(self, user_id: UUID) -> list[FeedEntry]:
        """Posts written by one user, with the author joined, newest first."""
        async with self._uow_factory() as uow:
            try:
                posts = await uow.posts.get_all_for_user(user_id)
                return await self._join_authors(uow, posts)
            except SQLAlchemyError as exc:
                logger.error(
                    "feed_query_failed",
                    query="user_feed",
                    user_id=str(user_id),
                    error=str(exc),
                )
                raise QueryFailedError("user_feed") from exc

    async def _join_authors(self, uow: IUnitOfWork, posts: list[Post]) -> list[FeedEntry]:
        """Inner-join posts to profiles with one batched profile lookup."""
        if not posts:
            return []

        author_ids = list(dict.fromkeys(post.user_id for post in posts))
        authors = await uow.profiles.get_by_user_ids(author_ids)

        entries = []
        for post in posts:
            author = authors.get(post.user_id)
            if author is None:
                continue
            entries.append(
                FeedEntry(
                    post=post,
                    author_full_name=author.full_name,
                    author_email=author.email,
                )
            )

        dropped = len(posts) - len(entries)
        if dropped:
            logger.warning("feed_orphan_posts_skipped", count=dropped)

        entries.sort(key=lambda entry: entry.sort_key, reverse=True)
        return entries
