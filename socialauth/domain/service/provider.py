"""Provider adapter contract.

Every identity provider (Google, GitHub, ...) is integrated through one
adapter exposing the same capability set. Adapters never raise for expected
failures: provider-reported errors, transport errors and missing verified
emails come back as ``Failure`` values.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from socialauth.domain.value import (
    Failure,
    NormalizedIdentity,
    OAuthTokens,
    RevokeOutcome,
)


@runtime_checkable
class ProviderAdapter(Protocol):
    """Capability set {AuthUrl, Exchange, VerifyToken, FetchUserInfo, Revoke}."""

    provider: str
    default_scopes: tuple[str, ...]

    def auth_url(self, state: str, scopes: Sequence[str] | None = None) -> str:
        """Build the provider authorization URL.

        Pure: never touches the network.

        Args:
            state: CSRF state token to round-trip
            scopes: Requested scopes (provider defaults if None)

        Returns:
            Authorization URL to redirect the user to
        """
        ...

    async def exchange(self, code: str) -> OAuthTokens | Failure:
        """Exchange an authorization code for tokens."""
        ...

    async def verify_token(self, id_token: str) -> NormalizedIdentity | Failure:
        """Verify a signed identity token and normalize its claims."""
        ...

    async def fetch_user_info(self, access_token: str) -> NormalizedIdentity | Failure:
        """Fetch and normalize the profile behind an access token."""
        ...

    async def revoke(self, access_token: str) -> RevokeOutcome:
        """Best-effort token revocation."""
        ...
