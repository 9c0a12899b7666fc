"""Post domain entity and its feed projection."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

POST_CONTENT_MAX_LENGTH = 500


@dataclass
class Post:
    """Domain entity for an immutable text post."""

    user_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """Read-only value object: a Post joined with its author's display fields."""

    post: Post
    author_full_name: str
    author_email: str

    @property
    def sort_key(self) -> tuple[datetime, UUID]:
        """Newest-first key; the post id breaks timestamp ties."""
        return (self.post.created_at, self.post.id)
