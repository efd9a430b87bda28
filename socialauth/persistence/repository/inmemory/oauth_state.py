"""In-process OAuth state store."""

import threading
from datetime import datetime

from socialauth.domain.model.oauth_state import OAuthState
from socialauth.domain.repository.oauth_state import OAuthStateRepository


class InMemoryOAuthStateRepository(OAuthStateRepository):
    """Lock-guarded dict of pending state tokens.

    Shared by every request of one process. Not suitable for deployments
    with more than one server instance.
    """

    def __init__(self) -> None:
        self._states: dict[str, OAuthState] = {}
        self._lock = threading.Lock()

    def add(self, state: OAuthState) -> None:
        with self._lock:
            self._states[state.token] = state

    def pop(self, token: str) -> OAuthState | None:
        with self._lock:
            return self._states.pop(token, None)

    def delete_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [t for t, s in self._states.items() if s.is_expired(now)]
            for token in expired:
                del self._states[token]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
