"""Get provider authorization URL use case."""

import logfire
from pydantic import BaseModel

from socialauth.domain.service import OAuthStateService, ProviderRegistry
from socialauth.domain.value import StateMetadata

from ..base import BaseUseCase


class GetAuthUrlRequest(BaseModel):
    """Authorization URL request."""

    provider: str
    scopes: list[str] | None = None
    origin_ip: str | None = None
    user_agent: str | None = None


class GetAuthUrlResponse(BaseModel):
    """Authorization URL and the state token it carries."""

    url: str
    state: str


class GetAuthUrlUseCase(BaseUseCase):
    """Use case for starting a provider consent flow."""

    def __init__(
        self, registry: ProviderRegistry, state_service: OAuthStateService
    ) -> None:
        """Initialize get auth URL use case.

        Args:
            registry: Provider adapter registry
            state_service: CSRF state service
        """
        self.registry = registry
        self.state_service = state_service

    async def execute(self, request: GetAuthUrlRequest) -> GetAuthUrlResponse:
        """Issue a state token and build the provider authorization URL.

        The provider is checked before a state is issued, so unsupported
        providers never leave pending state behind.

        Args:
            request: Provider, optional scopes and request origin

        Returns:
            Authorization URL and state token

        Raises:
            SocialAuthError: PROVIDER_UNSUPPORTED
        """
        adapter = self.unwrap(self.registry.get(request.provider))
        provider = self.registry.normalize(request.provider)

        state = self.state_service.issue(
            provider,
            StateMetadata(origin_ip=request.origin_ip, user_agent=request.user_agent),
        )
        url = adapter.auth_url(state, request.scopes or None)

        logfire.info("Authorization URL issued", provider=provider)
        return GetAuthUrlResponse(url=url, state=state)
