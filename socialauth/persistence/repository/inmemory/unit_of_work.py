"""In-memory unit of work for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

from socialauth.domain.repository import UnitOfWork


class Snapshotable(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


class InMemoryUnitOfWork(UnitOfWork):
    """Restores every participating repository if the block raises."""

    def __init__(self, *repositories: Snapshotable) -> None:
        self.repositories = repositories

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshots = [(repo, repo.snapshot()) for repo in self.repositories]
        try:
            yield
        except BaseException:
            for repo, snapshot in snapshots:
                repo.restore(snapshot)
            raise
