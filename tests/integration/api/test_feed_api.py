"""Integration tests for the global and per-user feed endpoints."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from uuid import uuid4

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, PostModel
from tests.conftest import seed_profile


async def _insert_post(
    session_factory: async_sessionmaker[AsyncSession],
    user: TokenUser,
    content: str,
    created_at: datetime,
) -> None:
    async with session_factory() as session:
        session.add(PostModel(user_id=user.id, content=content, created_at=created_at))
        await session.commit()


class TestGlobalFeed:
    async def test_empty_feed(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get("/api/v1/feed")

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["total"] == 0

    async def test_new_post_appears_first_with_author(
        self, authenticated_client: AsyncClient, test_user: TokenUser
    ) -> None:
        await authenticated_client.post("/api/v1/posts", json={"content": "older"})
        created = await authenticated_client.post("/api/v1/posts", json={"content": "Hello world"})

        response = await authenticated_client.get("/api/v1/feed")

        entries = response.json()["data"]
        assert entries[0]["id"] == created.json()["data"]["id"]
        assert entries[0]["content"] == "Hello world"
        assert entries[0]["author"] == {
            "user_id": str(test_user.id),
            "full_name": "Ada Lovelace",
            "email": "ada@example.com",
        }

    async def test_orders_newest_first_across_authors(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        test_user: TokenUser,
        other_user: TokenUser,
    ) -> None:
        await seed_profile(session_factory, other_user)
        base = datetime(2024, 5, 1, 12, 0, 0)
        await _insert_post(session_factory, test_user, "first", base)
        await _insert_post(session_factory, other_user, "second", base + timedelta(minutes=1))
        await _insert_post(session_factory, test_user, "third", base + timedelta(minutes=2))

        response = await authenticated_client.get("/api/v1/feed")

        data = response.json()["data"]
        assert [entry["content"] for entry in data] == ["third", "second", "first"]
        assert data[1]["author"]["full_name"] == "Grace Hopper"

    async def test_repeated_reads_are_identical(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        test_user: TokenUser,
    ) -> None:
        same_time = datetime(2024, 5, 1, 12, 0, 0)
        for content in ("a", "b", "c"):
            await _insert_post(session_factory, test_user, content, same_time)

        first = await authenticated_client.get("/api/v1/feed")
        second = await authenticated_client.get("/api/v1/feed")

        assert first.json()["data"] == second.json()["data"]
        ids = [entry["id"] for entry in first.json()["data"]]
        assert ids == sorted(ids, reverse=True)

    async def test_post_without_profile_is_excluded(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        test_user: TokenUser,
    ) -> None:
        ghost = TokenUser(id=uuid4(), email="ghost@example.com")
        await _insert_post(session_factory, test_user, "visible", datetime(2024, 5, 1))
        await _insert_post(session_factory, ghost, "orphan", datetime(2024, 5, 2))

        response = await authenticated_client.get("/api/v1/feed")

        assert [entry["content"] for entry in response.json()["data"]] == ["visible"]
        assert response.json()["meta"]["total"] == 1

    async def test_requires_authentication(
        self, make_client: Callable[[TokenUser | None], Awaitable[AsyncClient]]
    ) -> None:
        anonymous = await make_client(None)

        response = await anonymous.get("/api/v1/feed")

        assert response.status_code == 401


class TestUserFeed:
    async def test_lists_only_that_users_posts(
        self,
        authenticated_client: AsyncClient,
        make_client: Callable[[TokenUser | None], Awaitable[AsyncClient]],
        test_user: TokenUser,
        other_user: TokenUser,
    ) -> None:
        grace = await make_client(other_user)
        await grace.post("/api/v1/posts", json={"content": "from grace"})
        await authenticated_client.post("/api/v1/posts", json={"content": "from ada"})

        response = await authenticated_client.get(f"/api/v1/profiles/{test_user.id}/posts")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [entry["content"] for entry in data] == ["from ada"]
        assert all(entry["user_id"] == str(test_user.id) for entry in data)

    async def test_user_with_no_posts_is_empty(
        self, authenticated_client: AsyncClient, test_user: TokenUser
    ) -> None:
        response = await authenticated_client.get(f"/api/v1/profiles/{test_user.id}/posts")

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_unknown_user_is_empty_not_error(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.get(f"/api/v1/profiles/{uuid4()}/posts")

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_invalid_user_id_is_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get("/api/v1/profiles/not-a-uuid/posts")

        assert response.status_code == 422


class TestFeedStoreOutage:
    async def test_unreadable_store_is_query_failed_for_new_identity(
        self,
        engine: AsyncEngine,
        test_user: TokenUser,
        make_client: Callable[[TokenUser | None], Awaitable[AsyncClient]],
    ) -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        client = await make_client(test_user)

        response = await client.get("/api/v1/feed")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "QUERY_FAILED"
        assert body["details"] == {"query": "profile"}
        assert "SELECT" not in body["message"]
