"""OAuth state store interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from socialauth.domain.model.oauth_state import OAuthState


class OAuthStateRepository(ABC):
    """Storage for pending CSRF state tokens.

    Implementations shared across server instances must keep ``pop`` atomic
    (delete-and-fetch) so that a token can be observed at most once.
    """

    @abstractmethod
    def add(self, state: OAuthState) -> None:
        """Store a newly issued state entry."""
        pass

    @abstractmethod
    def pop(self, token: str) -> OAuthState | None:
        """Atomically remove and return the entry for a token.

        Args:
            token: State token

        Returns:
            The entry if it was present, None otherwise
        """
        pass

    @abstractmethod
    def delete_expired(self, now: datetime) -> int:
        """Remove entries whose expiry is before ``now``.

        Returns:
            Number of entries removed
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass
