"""Post repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.post import Post


class IPostRepository(Protocol):
    """Repository interface for Post entities."""

    async def create(self, post: Post) -> Post:
        """Insert a post. Fails if post.user_id has no profile."""
        ...

    async def get_all(self) -> list[Post]:
        """Get every post, newest first."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Post]:
        """Get every post written by one user, newest first."""
        ...
