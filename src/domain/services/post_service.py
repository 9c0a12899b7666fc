"""Post service layer: validated post creation."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import AuthenticationError, ConstraintViolationError
from domain.entities.post import Post
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import clean_post_content

logger = structlog.get_logger()


class PostService:
    """Service layer for Post business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create(self, requester_id: UUID | None, content: str) -> Post:
        """Publish a post as the requester.

        The author is always the requester; there is no way to post on
        behalf of another identity. Content is trimmed and must be 1..500
        characters, checked before the store is touched.
        """
        if requester_id is None:
            raise AuthenticationError()

        trimmed = clean_post_content(content)

        async with self._uow_factory() as uow:
            post = Post(user_id=requester_id, content=trimmed)
            try:
                created = await uow.posts.create(post)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                logger.warning(
                    "post_rejected_by_constraint",
                    user_id=str(requester_id),
                    error=str(exc.orig) if exc.orig else str(exc),
                )
                raise ConstraintViolationError("Author profile does not exist") from exc

        logger.info("post_created", post_id=str(created.id), user_id=str(requester_id))
        return created
