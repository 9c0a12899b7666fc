"""SQLAlchemy Unit of Work over the profiles and posts repositories."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_post_repo import SQLAlchemyPostRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)


class SQLAlchemyUnitOfWork:
    """One session, one transaction; both repositories share it.

    A post insert and the author-profile lookup it depends on therefore see
    the same snapshot. Leaving the block on an exception rolls back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._profiles: Optional[SQLAlchemyProfileRepository] = None
        self._posts: Optional[SQLAlchemyPostRepository] = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        if self._profiles is None:
            self._profiles = SQLAlchemyProfileRepository(self._require_session())
        return self._profiles

    @property
    def posts(self) -> SQLAlchemyPostRepository:
        if self._posts is None:
            self._posts = SQLAlchemyPostRepository(self._require_session())
        return self._posts

    async def commit(self) -> None:
        await self._require_session().commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is not None:
                await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None
            self._profiles = None
            self._posts = None
