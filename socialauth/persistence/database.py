"""Async engine and session factory for the user store."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from socialauth.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the asyncpg engine.

    Connections are tagged with an application name so login traffic can be
    told apart in ``pg_stat_activity``.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        connect_args={"server_settings": {"application_name": "socialauth-api"}},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for request-scoped sessions.

    Entities are frozen pydantic models built by mappers, so loaded rows are
    never refreshed after commit.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
