"""Async engine and session factory for the profiles/posts database."""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine for ``url``.

    Supavisor (Supabase's pooler) runs in transaction mode, where asyncpg's
    prepared statement cache breaks; it is switched off for pooled URLs.
    """
    connect_args: dict = {}
    if "pooler.supabase.com" in url or "supabase.co" in url:
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        connect_args=connect_args,
    )


engine = build_engine(settings.async_database_url)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for request-scoped raw queries (health checks)."""
    async with async_session_factory() as session:
        yield session
