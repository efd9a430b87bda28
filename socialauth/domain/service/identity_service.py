"""Identity acquisition through provider adapters."""

import asyncio

import logfire

from socialauth.config import AuthSettings
from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    NormalizedIdentity,
    SocialCredentials,
    StateMetadata,
)

from .base import Service
from .oauth_state_service import OAuthStateService
from .provider import ProviderAdapter
from .provider_registry import ProviderRegistry


class IdentityService(Service):
    """Turns client credentials into a verified NormalizedIdentity.

    Shared by login and linking: resolve the adapter, validate and consume
    the CSRF state, call the provider under a deadline, then apply the
    verified-email gate.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        state_service: OAuthStateService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize identity service.

        Args:
            registry: Provider adapters
            state_service: CSRF state store
            auth_settings: Provider call timeout
        """
        self.registry = registry
        self.state_service = state_service
        self.auth_settings = auth_settings

    async def acquire(
        self,
        provider: str,
        credentials: SocialCredentials,
        state: str | None = None,
        metadata: StateMetadata | None = None,
    ) -> NormalizedIdentity | Failure:
        """Acquire a verified identity from a provider.

        Credentials are used in the order id_token, code, access_token. A
        code always needs a state token; a state supplied alongside the
        other credentials is validated too.

        Args:
            provider: Provider name from the request
            credentials: Credentials returned by the consent flow
            state: CSRF state token
            metadata: Origin of the callback request

        Returns:
            Identity with a verified email, or a failure
        """
        name = ProviderRegistry.normalize(provider)
        with logfire.span("identity_service.acquire", provider=name):
            adapter = self.registry.get(name)
            if isinstance(adapter, Failure):
                return adapter

            if credentials.is_empty:
                return Failure(
                    code=AuthErrorCode.INVALID_CREDENTIALS,
                    message="An id token, authorization code or access token is required",
                )

            if credentials.code and not credentials.id_token and not state:
                return Failure(
                    code=AuthErrorCode.INVALID_STATE,
                    message="State parameter missing",
                )

            if state:
                consumed = self.state_service.validate_and_consume(
                    name, state, metadata
                )
                if isinstance(consumed, Failure):
                    return consumed

            identity = await self._call_provider(adapter, credentials)
            if isinstance(identity, Failure):
                logfire.warn(
                    "Identity acquisition failed",
                    provider=name,
                    code=identity.code.value,
                    error=identity.message,
                )
                return identity

            identity = identity.model_copy(update={"provider": name})
            return self._verification_gate(identity)

    async def _call_provider(
        self, adapter: ProviderAdapter, credentials: SocialCredentials
    ) -> NormalizedIdentity | Failure:
        timeout = self.auth_settings.provider_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                if credentials.id_token:
                    return await adapter.verify_token(credentials.id_token)

                if credentials.code:
                    tokens = await adapter.exchange(credentials.code)
                    if isinstance(tokens, Failure):
                        return tokens
                    return await adapter.fetch_user_info(tokens.access_token)

                if credentials.access_token:
                    return await adapter.fetch_user_info(credentials.access_token)

                return Failure(
                    code=AuthErrorCode.INVALID_CREDENTIALS,
                    message="No provider credentials supplied",
                )
        except TimeoutError:
            logfire.error(
                "Provider call timed out",
                provider=adapter.provider,
                timeout_seconds=timeout,
            )
            return Failure(
                code=AuthErrorCode.PROVIDER_ERROR,
                message=f"Provider did not respond within {timeout:g}s",
            )

    @staticmethod
    def _verification_gate(identity: NormalizedIdentity) -> NormalizedIdentity | Failure:
        if not identity.email_verified:
            logfire.warn(
                "Unverified provider email rejected",
                provider=identity.provider,
                provider_id=identity.provider_id,
            )
            return Failure(
                code=AuthErrorCode.EMAIL_NOT_VERIFIED,
                message="Provider email address is not verified",
            )
        if not identity.email:
            return Failure(
                code=AuthErrorCode.NO_VERIFIED_EMAIL,
                message="Provider account has no email address",
            )
        return identity
