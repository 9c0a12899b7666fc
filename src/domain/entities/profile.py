"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

FULL_NAME_MAX_LENGTH = 255


@dataclass
class Profile:
    """Domain entity for a user's public profile (one per auth identity)."""

    user_id: UUID
    full_name: str
    email: str = ""
    bio: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def apply_edit(self, full_name: str, bio: str | None) -> None:
        """Replace the editable fields; user_id, email and created_at never change."""
        self.full_name = full_name
        self.bio = bio
        self.updated_at = datetime.utcnow()
