"""CSRF state entry for the provider redirect round trip."""

from datetime import datetime

from socialauth.domain.model.common import DomainModel
from socialauth.domain.value import StateMetadata


class OAuthState(DomainModel):
    """Single-use state token bound to a provider and request origin."""

    token: str
    provider: str
    issued_at: datetime
    expires_at: datetime
    metadata: StateMetadata = StateMetadata()

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
