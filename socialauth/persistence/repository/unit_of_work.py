"""PostgreSQL unit of work."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.repository import UnitOfWork


class PostgresUnitOfWork(UnitOfWork):
    """Transaction scope over the request session.

    Uses a savepoint so a failed block rolls back its own writes without
    discarding the rest of the request; the request-scoped session still
    commits at the end of the request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self.session.begin_nested():
            yield
