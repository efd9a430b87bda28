"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from socialauth.domain.error import SocialAuthError
from socialauth.domain.value import Failure

T = TypeVar("T")


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass

    @staticmethod
    def unwrap(result: T | Failure) -> T:
        """Return a domain result, raising SocialAuthError for a failure."""
        if isinstance(result, Failure):
            raise SocialAuthError(result)
        return result
