"""Unlink provider use case."""

from uuid import UUID

from pydantic import BaseModel

from socialauth.domain.service import LinkingService, ProviderRegistry
from socialauth.domain.value import UserId

from ..base import BaseUseCase


class UnlinkProviderRequest(BaseModel):
    """Unlink provider request."""

    user_id: str
    provider: str


class UnlinkProviderResponse(BaseModel):
    """Unlink provider response."""

    success: bool
    provider: str


class UnlinkProviderUseCase(BaseUseCase):
    """Use case for removing a provider from an authenticated user."""

    def __init__(self, linking_service: LinkingService) -> None:
        self.linking_service = linking_service

    async def execute(self, request: UnlinkProviderRequest) -> UnlinkProviderResponse:
        """Remove the provider link.

        Raises:
            SocialAuthError: SOCIAL_ACCOUNT_NOT_FOUND or LAST_AUTH_METHOD
        """
        self.unwrap(
            await self.linking_service.unlink(
                UserId(UUID(request.user_id)), request.provider
            )
        )
        return UnlinkProviderResponse(
            success=True, provider=ProviderRegistry.normalize(request.provider)
        )
