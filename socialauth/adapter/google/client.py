"""Google OpenID Connect adapter.

Supports both the id-token path (signature verified locally against
Google's published keys) and the code-exchange path.
"""

import asyncio
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt
import logfire

from socialauth.adapter.error import ProviderError, provider_failure
from socialauth.adapter.mock import MockProviderAdapter
from socialauth.domain.value import (
    AuthErrorCode,
    AuthProvider,
    Failure,
    NormalizedIdentity,
    OAuthTokens,
    RevokeOutcome,
)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def google_scope(scope: str) -> str:
    """Expand a short scope name to Google's scope URL."""
    if scope == "openid" or scope.startswith("https://"):
        return scope
    return f"https://www.googleapis.com/auth/{scope}"


def normalize_google_profile(raw: dict[str, Any]) -> NormalizedIdentity:
    """Map id-token claims or a userinfo payload to a NormalizedIdentity.

    Args:
        raw: Either OIDC claims (``sub``, ``email_verified``) or a v2
            userinfo response (``id``, ``verified_email``)

    Returns:
        Normalized identity
    """
    verified = raw.get("email_verified", raw.get("verified_email", False))
    if isinstance(verified, str):
        verified = verified.lower() == "true"

    email = raw.get("email")
    return NormalizedIdentity(
        provider=AuthProvider.GOOGLE.value,
        provider_id=str(raw.get("sub") or raw.get("id")),
        email=email,
        email_verified=bool(verified),
        username=email.split("@")[0] if email else None,
        display_name=raw.get("name"),
        avatar_url=raw.get("picture"),
        profile_url=None,
        raw_payload=raw,
    )


class GoogleAdapter:
    """Base class for Google adapters.

    Provides type distinction for dependency injection.
    """

    provider = AuthProvider.GOOGLE.value
    default_scopes: tuple[str, ...] = ("profile", "email")


class RealGoogleAdapter(GoogleAdapter):
    """Google adapter talking to Google's OAuth 2.0 and OIDC endpoints."""

    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_info_url = "https://www.googleapis.com/oauth2/v2/userinfo"
    jwks_url = "https://www.googleapis.com/oauth2/v3/certs"

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str) -> None:
        """Initialize Google adapter.

        Args:
            client_id: Google OAuth client ID (also the id-token audience)
            client_secret: Google OAuth client secret
            redirect_uri: Redirect URI registered with Google
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._jwks_client = jwt.PyJWKClient(self.jwks_url, cache_keys=True)

    def auth_url(self, state: str, scopes: Sequence[str] | None = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(
                google_scope(s) for s in (scopes or self.default_scopes)
            ),
            "state": state,
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str) -> OAuthTokens | Failure:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the Google redirect

        Returns:
            Access token (and refresh token when granted), or a failure
        """
        data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(self.token_url, data=data, timeout=30.0)
                result = response.json()
                if response.status_code != 200:
                    raise ProviderError(
                        result.get("error_description")
                        or result.get("error")
                        or f"Token exchange failed: {response.status_code}",
                        status_code=response.status_code,
                    )
                if "access_token" not in result:
                    raise ProviderError(
                        "Token response has no access token",
                        status_code=response.status_code,
                    )
                expires_in = result.get("expires_in")
                expires_at = (
                    datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
                    if expires_in
                    else None
                )
        except (httpx.HTTPError, ValueError, TypeError, ProviderError) as e:
            return provider_failure("google", "token exchange", e)

        return OAuthTokens(
            access_token=result["access_token"],
            refresh_token=result.get("refresh_token"),
            expires_at=expires_at,
            token_type=result.get("token_type"),
            scope=result.get("scope"),
        )

    async def verify_token(self, id_token: str) -> NormalizedIdentity | Failure:
        """Verify a Google id token.

        Checks the RS256 signature against Google's cached JWKS, the audience
        (our client ID) and the issuer.

        Args:
            id_token: Signed OIDC id token

        Returns:
            Normalized identity from the token claims, or a failure
        """
        try:
            signing_key = await asyncio.to_thread(
                self._jwks_client.get_signing_key_from_jwt, id_token
            )
            claims = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.client_id,
            )
        except jwt.PyJWTError as e:
            logfire.warn("Google id token verification failed", error=str(e))
            return Failure(
                code=AuthErrorCode.TOKEN_VERIFICATION_FAILED, message=str(e)
            )

        if claims.get("iss") not in GOOGLE_ISSUERS:
            logfire.warn("Google id token has wrong issuer", issuer=claims.get("iss"))
            return Failure(
                code=AuthErrorCode.TOKEN_VERIFICATION_FAILED,
                message="Invalid token issuer",
            )

        if not claims.get("sub"):
            logfire.warn("Google id token has no subject")
            return Failure(
                code=AuthErrorCode.TOKEN_VERIFICATION_FAILED,
                message="Token has no subject",
            )

        return normalize_google_profile(claims)

    async def fetch_user_info(self, access_token: str) -> NormalizedIdentity | Failure:
        """Fetch the v2 userinfo profile for an access token."""
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.user_info_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=30.0,
                )
                if response.status_code != 200:
                    raise ProviderError(
                        f"User info request failed: {response.status_code}",
                        status_code=response.status_code,
                    )
                data = response.json()
                if not (data.get("id") or data.get("sub")):
                    raise ProviderError(
                        "User info response has no account ID",
                        status_code=response.status_code,
                    )
        except (httpx.HTTPError, ValueError, ProviderError) as e:
            return provider_failure("google", "user info request", e)

        if not data.get("email"):
            return Failure(
                code=AuthErrorCode.NO_VERIFIED_EMAIL,
                message="Google account has no email address",
            )

        identity = normalize_google_profile(data)
        logfire.info("Google user info fetched", provider_id=identity.provider_id)
        return identity

    async def revoke(self, access_token: str) -> RevokeOutcome:
        return RevokeOutcome.UNSUPPORTED


class MockGoogleAdapter(MockProviderAdapter, GoogleAdapter):
    """Mock Google adapter for testing.

    Returns a deterministic verified identity without network calls.
    """

    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"

    def __init__(self, identity: NormalizedIdentity | None = None) -> None:
        super().__init__(
            identity
            or NormalizedIdentity(
                provider=AuthProvider.GOOGLE.value,
                provider_id="mock-google-sub-123",
                email="mock.user@gmail.com",
                email_verified=True,
                username="mock.user",
                display_name="Mock Google User",
                avatar_url="https://example.com/google-avatar.png",
            )
        )

    async def revoke(self, access_token: str) -> RevokeOutcome:
        return RevokeOutcome.UNSUPPORTED
