"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get_by_user_id(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by an auth identity."""
        ...

    async def get_by_user_ids(self, user_ids: list[UUID]) -> dict[UUID, Profile]:
        """Get profiles for several identities in one query, keyed by user_id."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile | None:
        """Update the editable fields of the row matching profile.user_id.

        Never inserts. Returns None when no row matches.
        """
        ...
