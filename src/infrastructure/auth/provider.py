"""Identity seen by the API, and the provider protocol that produces it."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenUser:
    """The authenticated identity behind a request.

    ``id`` is the token subject and doubles as the profile's ``user_id``.
    ``full_name`` comes from token metadata and only seeds a new profile;
    afterwards the profile row is authoritative.
    """

    id: UUID
    email: str
    full_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Turns bearer tokens into identities."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the identity, or None for a bad, expired or incomplete token."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a user (local/test use)."""
        ...
