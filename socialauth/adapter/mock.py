"""Shared behaviour of the mock provider adapters."""

from collections.abc import Sequence
from urllib.parse import urlencode

from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    NormalizedIdentity,
    OAuthTokens,
    RevokeOutcome,
)

INVALID_CREDENTIAL = "invalid"


class MockProviderAdapter:
    """Deterministic in-process provider.

    Any credential except ``"invalid"`` resolves to ``identity``. Tests may
    reassign ``identity`` to drive different resolution paths.
    """

    provider: str
    default_scopes: tuple[str, ...]
    authorize_url: str

    def __init__(self, identity: NormalizedIdentity) -> None:
        self.identity = identity
        self.revoked: list[str] = []

    def auth_url(self, state: str, scopes: Sequence[str] | None = None) -> str:
        params = {
            "scope": " ".join(scopes or self.default_scopes),
            "state": state,
            "mock": "true",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str) -> OAuthTokens | Failure:
        if code == INVALID_CREDENTIAL:
            return Failure(
                code=AuthErrorCode.PROVIDER_ERROR, message="bad_verification_code"
            )
        return OAuthTokens(access_token=f"mock-access-{code}", token_type="bearer")

    async def verify_token(self, id_token: str) -> NormalizedIdentity | Failure:
        if id_token == INVALID_CREDENTIAL:
            return Failure(
                code=AuthErrorCode.TOKEN_VERIFICATION_FAILED,
                message="Invalid token signature",
            )
        return self.identity

    async def fetch_user_info(self, access_token: str) -> NormalizedIdentity | Failure:
        if access_token == INVALID_CREDENTIAL:
            return Failure(code=AuthErrorCode.PROVIDER_ERROR, message="Bad credentials")
        return self.identity

    async def revoke(self, access_token: str) -> RevokeOutcome:
        self.revoked.append(access_token)
        return RevokeOutcome.REVOKED
