"""Repository tests against SQLite with foreign keys enforced."""

from collections.abc import AsyncGenerator
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.exceptions import ConstraintViolationError
from domain.entities.post import Post
from domain.entities.profile import Profile
from domain.services.post_service import PostService
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


@pytest.fixture
async def fk_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database that enforces foreign keys like Postgres does."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def fk_session_factory(fk_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=fk_engine, class_=AsyncSession, expire_on_commit=False)


def _uow_factory(session_factory: async_sessionmaker[AsyncSession]):
    return lambda: SQLAlchemyUnitOfWork(session_factory)


class TestPostRepository:
    async def test_get_all_orders_by_time_then_id(
        self, fk_session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        author = uuid4()
        same_time = datetime(2024, 5, 1, 12, 0, 0)
        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            await uow.profiles.create(Profile(user_id=author, full_name="Ada"))
            for content in ("x", "y", "z"):
                await uow.posts.create(Post(user_id=author, content=content, created_at=same_time))
            await uow.posts.create(
                Post(user_id=author, content="latest", created_at=datetime(2024, 5, 2))
            )
            await uow.commit()

        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            posts = await uow.posts.get_all()

        assert posts[0].content == "latest"
        tied_ids = [post.id for post in posts[1:]]
        assert tied_ids == sorted(tied_ids, reverse=True)

    async def test_get_by_user_ids_returns_only_existing(
        self, fk_session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        present = uuid4()
        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            await uow.profiles.create(Profile(user_id=present, full_name="Ada"))
            await uow.commit()

        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            found = await uow.profiles.get_by_user_ids([present, uuid4()])

        assert list(found) == [present]

    async def test_update_missing_profile_does_not_insert(
        self, fk_session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        ghost = Profile(user_id=uuid4(), full_name="Nobody")

        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            assert await uow.profiles.update(ghost) is None
            await uow.commit()

        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            assert await uow.profiles.get_by_user_id(ghost.user_id) is None


class TestPostServiceConstraints:
    async def test_post_without_author_profile_is_rejected(
        self, fk_session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        service = PostService(_uow_factory(fk_session_factory))

        with pytest.raises(ConstraintViolationError):
            await service.create(uuid4(), "nobody home")

        async with SQLAlchemyUnitOfWork(fk_session_factory) as uow:
            assert await uow.posts.get_all() == []
