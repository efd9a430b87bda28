"""Unit of work interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    """Groups repository writes into one atomic transaction.

    Writes made through the request's repositories inside ``transaction()``
    are all kept or all discarded. An exception raised inside the block
    rolls back and propagates.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a transaction scope."""
        pass
