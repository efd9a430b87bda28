"""GitHub OAuth 2.0 adapter.

GitHub offers no signed identity token, so identities always come from the
REST API after a code exchange.
"""

import asyncio
from collections.abc import Sequence
from typing import Any
from urllib.parse import urlencode

import httpx
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

GITHUB_API_HEADERS = {"Accept": "application/vnd.github.v3+json"}


def normalize_github_profile(
    user: dict[str, Any], primary_email: dict[str, Any]
) -> NormalizedIdentity:
    """Map a ``/user`` payload and its primary email entry.

    Args:
        user: ``GET /user`` response
        primary_email: Entry of ``GET /user/emails`` marked primary

    Returns:
        Normalized identity
    """
    return NormalizedIdentity(
        provider=AuthProvider.GITHUB.value,
        provider_id=str(user["id"]),
        email=primary_email.get("email"),
        email_verified=bool(primary_email.get("verified")),
        username=user.get("login"),
        display_name=user.get("name") or user.get("login"),
        avatar_url=user.get("avatar_url"),
        profile_url=user.get("html_url"),
        raw_payload={**user, "primary_email": primary_email},
    )


class GitHubAdapter:
    """Base class for GitHub adapters.

    Provides type distinction for dependency injection.
    """

    provider = AuthProvider.GITHUB.value
    default_scopes: tuple[str, ...] = ("read:user", "user:email")


class RealGitHubAdapter(GitHubAdapter):
    """GitHub adapter talking to github.com and the REST API."""

    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    api_url = "https://api.github.com"

    def __init__(self, client_id: str, client_secret: str, callback_url: str) -> None:
        """Initialize GitHub adapter.

        Args:
            client_id: GitHub OAuth app client ID
            client_secret: GitHub OAuth app client secret
            callback_url: Callback URL registered with the OAuth app
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url

    def auth_url(self, state: str, scopes: Sequence[str] | None = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": " ".join(scopes or self.default_scopes),
            "state": state,
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str) -> OAuthTokens | Failure:
        """Exchange an authorization code for an access token.

        GitHub reports most errors with a 200 status and an ``error`` field.

        Args:
            code: Authorization code from the GitHub redirect

        Returns:
            Access token, or a failure carrying GitHub's error description
        """
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.callback_url,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.token_url,
                    json=payload,
                    headers={"Accept": "application/json"},
                    timeout=30.0,
                )
                result = response.json()
                if result.get("error"):
                    raise ProviderError(
                        result.get("error_description") or result["error"],
                        status_code=response.status_code,
                    )
                if response.status_code != 200 or "access_token" not in result:
                    raise ProviderError(
                        f"Token exchange failed: {response.status_code}",
                        status_code=response.status_code,
                    )
        except (httpx.HTTPError, ValueError, ProviderError) as e:
            return provider_failure("github", "token exchange", e)

        return OAuthTokens(
            access_token=result["access_token"],
            token_type=result.get("token_type"),
            scope=result.get("scope"),
        )

    async def verify_token(self, id_token: str) -> NormalizedIdentity | Failure:
        return Failure(
            code=AuthErrorCode.TOKEN_VERIFICATION_FAILED,
            message="GitHub does not issue identity tokens",
        )

    async def fetch_user_info(self, access_token: str) -> NormalizedIdentity | Failure:
        """Fetch the user profile and its verified primary email.

        ``/user`` and ``/user/emails`` are requested concurrently.

        Args:
            access_token: OAuth access token

        Returns:
            Normalized identity, NO_VERIFIED_EMAIL when GitHub reports no
            primary verified address, or a provider failure
        """
        headers = {**GITHUB_API_HEADERS, "Authorization": f"Bearer {access_token}"}

        try:
            async with httpx.AsyncClient() as client:
                user_response, emails_response = await asyncio.gather(
                    client.get(f"{self.api_url}/user", headers=headers, timeout=30.0),
                    client.get(
                        f"{self.api_url}/user/emails", headers=headers, timeout=30.0
                    ),
                )
                for response in (user_response, emails_response):
                    if response.status_code != 200:
                        raise ProviderError(
                            f"GitHub API request failed: {response.status_code}",
                            status_code=response.status_code,
                        )
                user = user_response.json()
                emails = emails_response.json()
        except (httpx.HTTPError, ValueError, ProviderError) as e:
            return provider_failure("github", "user info request", e)

        primary_email = next(
            (e for e in emails if e.get("primary") and e.get("verified")), None
        )
        if primary_email is None:
            logfire.warn(
                "GitHub account has no verified primary email", login=user.get("login")
            )
            return Failure(
                code=AuthErrorCode.NO_VERIFIED_EMAIL,
                message="No verified primary email found",
            )

        identity = normalize_github_profile(user, primary_email)
        logfire.info(
            "GitHub user info fetched",
            provider_id=identity.provider_id,
            login=identity.username,
        )
        return identity

    async def revoke(self, access_token: str) -> RevokeOutcome:
        """Revoke an access token through the OAuth app API."""
        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    "DELETE",
                    f"{self.api_url}/applications/{self.client_id}/token",
                    auth=(self.client_id, self.client_secret),
                    json={"access_token": access_token},
                    headers=GITHUB_API_HEADERS,
                    timeout=30.0,
                )
        except httpx.HTTPError as e:
            logfire.error("GitHub token revocation HTTP error", error=str(e))
            return RevokeOutcome.FAILED

        if response.status_code != 204:
            logfire.warn(
                "GitHub token revocation failed", status_code=response.status_code
            )
            return RevokeOutcome.FAILED
        return RevokeOutcome.REVOKED


class MockGitHubAdapter(MockProviderAdapter, GitHubAdapter):
    """Mock GitHub adapter for testing.

    Returns a deterministic verified identity without network calls.
    """

    authorize_url = "https://github.com/login/oauth/authorize"

    def __init__(self, identity: NormalizedIdentity | None = None) -> None:
        super().__init__(
            identity
            or NormalizedIdentity(
                provider=AuthProvider.GITHUB.value,
                provider_id="583231",
                email="octocat@github.com",
                email_verified=True,
                username="octocat",
                display_name="The Octocat",
                avatar_url="https://avatars.githubusercontent.com/u/583231",
                profile_url="https://github.com/octocat",
            )
        )

    async def verify_token(self, id_token: str) -> NormalizedIdentity | Failure:
        return Failure(
            code=AuthErrorCode.TOKEN_VERIFICATION_FAILED,
            message="GitHub does not issue identity tokens",
        )
