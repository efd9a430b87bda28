"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from socialauth.config import Settings
from socialauth.domain.repository import (
    InviteCodeRepository,
    OAuthStateRepository,
    SocialAccountRepository,
    UnitOfWork,
    UserRepository,
)
from socialauth.persistence.database import create_engine, create_session_factory
from socialauth.persistence.repository import (
    PostgresInviteCodeRepository,
    PostgresSocialAccountRepository,
    PostgresUnitOfWork,
    PostgresUserRepository,
)
from socialauth.persistence.repository.inmemory import InMemoryOAuthStateRepository
from socialauth.util.di.base import ProviderBase
from socialauth.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide the engine, disposing its pool when the container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_oauth_state_repository(self) -> OAuthStateRepository:
        """Provide the in-process state token store."""
        return InMemoryOAuthStateRepository()

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_social_account_repository(
        self, session: AsyncSession
    ) -> SocialAccountRepository:
        """Provide SocialAccount repository."""
        return PostgresSocialAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invite_code_repository(self, session: AsyncSession) -> InviteCodeRepository:
        """Provide InviteCode repository."""
        return PostgresInviteCodeRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        """Provide unit of work over the request session."""
        return PostgresUnitOfWork(session)
