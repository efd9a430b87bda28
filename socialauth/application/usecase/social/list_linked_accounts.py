"""List linked social accounts use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from socialauth.domain.model import SocialAccount
from socialauth.domain.service import LinkingService
from socialauth.domain.value import UserId

from ..base import BaseUseCase


class SocialAccountInfo(BaseModel):
    """Linked account as shown to its owner.

    Never carries provider tokens or the raw provider payload.
    """

    id: str
    provider: str
    provider_id: str
    provider_username: str | None
    provider_email: str | None
    display_name: str | None
    avatar_url: str | None
    profile_url: str | None
    created_at: datetime
    last_used_at: datetime | None

    @classmethod
    def from_account(cls, account: SocialAccount) -> "SocialAccountInfo":
        return cls(
            id=str(account.id),
            provider=account.provider,
            provider_id=account.provider_id,
            provider_username=account.provider_username,
            provider_email=account.provider_email,
            display_name=account.display_name,
            avatar_url=account.avatar_url,
            profile_url=account.profile_url,
            created_at=account.created_at,
            last_used_at=account.last_used_at,
        )


class ListLinkedAccountsRequest(BaseModel):
    """List linked accounts request."""

    user_id: str


class ListLinkedAccountsResponse(BaseModel):
    """List linked accounts response."""

    social_accounts: list[SocialAccountInfo]


class ListLinkedAccountsUseCase(BaseUseCase):
    """Use case for listing the caller's linked providers."""

    def __init__(self, linking_service: LinkingService) -> None:
        self.linking_service = linking_service

    async def execute(
        self, request: ListLinkedAccountsRequest
    ) -> ListLinkedAccountsResponse:
        accounts = await self.linking_service.list_linked(
            UserId(UUID(request.user_id))
        )
        return ListLinkedAccountsResponse(
            social_accounts=[SocialAccountInfo.from_account(a) for a in accounts]
        )
