"""Link provider use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from socialauth.domain.service import LinkingService
from socialauth.domain.value import (
    LinkOutcome,
    SocialCredentials,
    StateMetadata,
    UserId,
)

from ..base import BaseUseCase
from .list_linked_accounts import SocialAccountInfo


class LinkProviderRequest(BaseModel):
    """Link provider request."""

    user_id: str
    provider: str
    id_token: str | None = None
    code: str | None = None
    access_token: str | None = None
    state: str | None = None
    origin_ip: str | None = None
    user_agent: str | None = None


class LinkProviderResponse(BaseModel):
    """Link provider response.

    ``outcome`` is ``already_linked`` when the identity was linked to the
    caller before this request.
    """

    outcome: LinkOutcome
    social_account: SocialAccountInfo


class LinkProviderUseCase(BaseUseCase):
    """Use case for linking an additional provider to an authenticated user."""

    def __init__(self, linking_service: LinkingService) -> None:
        """Initialize link provider use case.

        Args:
            linking_service: Account linking service
        """
        self.linking_service = linking_service

    async def execute(self, request: LinkProviderRequest) -> LinkProviderResponse:
        """Acquire the provider identity and link it to the caller.

        Args:
            request: Authenticated user, provider and credentials

        Returns:
            Link outcome and the linked social account

        Raises:
            SocialAuthError: LINK_CONFLICT or any identity acquisition failure
        """
        result = self.unwrap(
            await self.linking_service.link(
                UserId(UUID(request.user_id)),
                request.provider,
                SocialCredentials(
                    id_token=request.id_token,
                    code=request.code,
                    access_token=request.access_token,
                ),
                state=request.state,
                metadata=StateMetadata(
                    origin_ip=request.origin_ip, user_agent=request.user_agent
                ),
            )
        )
        logfire.info(
            "Provider link completed",
            user_id=request.user_id,
            provider=result.social_account.provider,
            outcome=result.outcome.value,
        )
        return LinkProviderResponse(
            outcome=result.outcome,
            social_account=SocialAccountInfo.from_account(result.social_account),
        )
