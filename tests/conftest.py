"""Pytest configuration and fixtures."""

import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, ProfileModel

# Test database URL (SQLite in memory, one database per test)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user IDs for consistency
TEST_USER_ID = uuid4()
OTHER_USER_ID = uuid4()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to the test engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for direct row setup in a test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user() -> TokenUser:
    """The primary test identity."""
    return TokenUser(
        id=TEST_USER_ID,
        email="ada@example.com",
        full_name="Ada Lovelace",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second identity, distinct from test_user."""
    return TokenUser(
        id=OTHER_USER_ID,
        email="grace@example.com",
        full_name="Grace Hopper",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


async def seed_profile(
    session_factory: async_sessionmaker[AsyncSession],
    user: TokenUser,
    full_name: str | None = None,
    bio: str | None = None,
) -> None:
    """Insert a profile row for a test identity."""
    async with session_factory() as session:
        session.add(
            ProfileModel(
                user_id=user.id,
                email=user.email,
                full_name=full_name or user.full_name or user.email,
                bio=bio,
            )
        )
        await session.commit()


@pytest.fixture
def build_app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> Callable[[TokenUser | None], FastAPI]:
    """
    Return a factory for apps wired to the test database.

    With a user, authentication is overridden to return that user.
    Without one, real token validation runs against auth_provider.
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import (
        get_feed_service,
        get_post_service,
        get_profile_service,
    )
    from domain.services.feed_service import FeedService
    from domain.services.post_service import PostService
    from domain.services.profile_service import ProfileService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def factory(user: TokenUser | None) -> FastAPI:
        app = create_app()

        app.dependency_overrides[get_auth_provider] = lambda: auth_provider
        app.dependency_overrides[get_feed_service] = lambda: FeedService(test_uow_factory)
        app.dependency_overrides[get_post_service] = lambda: PostService(test_uow_factory)
        app.dependency_overrides[get_profile_service] = lambda: ProfileService(test_uow_factory)

        if user is not None:

            async def override_get_user() -> TokenUser:
                return user

            app.dependency_overrides[get_current_user] = override_get_user

        return app

    return factory


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def make_client(
    build_app: Callable[[TokenUser | None], FastAPI],
) -> AsyncGenerator[Callable[[TokenUser | None], Awaitable[AsyncClient]], None]:
    """Factory fixture: an AsyncClient acting as the given user."""
    clients: list[AsyncClient] = []

    async def make(user: TokenUser | None) -> AsyncClient:
        transport = ASGITransport(app=build_app(user))
        c = AsyncClient(transport=transport, base_url="http://test")
        clients.append(c)
        return c

    yield make

    for c in clients:
        await c.aclose()


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    test_user: TokenUser,
    make_client: Callable[[TokenUser | None], Awaitable[AsyncClient]],
) -> AsyncClient:
    """
    Create authenticated test client.

    This client:
    - Uses a fresh in-memory SQLite database
    - Has a seeded profile for the test user ("Ada Lovelace")
    - Overrides auth dependency to return the test user
    - Overrides the services to use the test database
    """
    await seed_profile(session_factory, test_user)
    return await make_client(test_user)
