"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.post_repository import IPostRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """A transaction spanning the profile and post stores."""

    @property
    def profiles(self) -> IProfileRepository: ...

    @property
    def posts(self) -> IPostRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None:
        """Discard pending writes; safe to call after a failed flush."""
        ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Roll back on error and release the session."""
        ...
