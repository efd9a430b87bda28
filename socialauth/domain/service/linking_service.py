"""Linking and unlinking provider identities on an existing account."""

import logfire
from pydantic import BaseModel

from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    LinkOutcome,
    SocialCredentials,
    StateMetadata,
    UserId,
)

from .base import Service
from .identity_service import IdentityService
from .provider_registry import ProviderRegistry
from .social_account_service import SocialAccountService
from .user_service import UserService


class LinkResult(BaseModel):
    """Outcome of a successful link request."""

    outcome: LinkOutcome
    social_account: SocialAccount


class LinkingService(Service):
    """Adds and removes provider identities for an authenticated user.

    A user without a password must always keep at least one social account.
    """

    def __init__(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        social_account_service: SocialAccountService,
    ) -> None:
        self.identity_service = identity_service
        self.user_service = user_service
        self.social_account_service = social_account_service

    async def link(
        self,
        user_id: UserId,
        provider: str,
        credentials: SocialCredentials,
        state: str | None = None,
        metadata: StateMetadata | None = None,
    ) -> LinkResult | Failure:
        """Link a provider identity to a user.

        Args:
            user_id: Authenticated user
            provider: Provider name
            credentials: Credentials from the consent flow
            state: CSRF state token
            metadata: Origin of the request

        Returns:
            LINKED or ALREADY_LINKED with the social account, or a failure
            (LINK_CONFLICT when the identity belongs to another user)
        """
        with logfire.span("linking_service.link", user_id=str(user_id), provider=provider):
            identity = await self.identity_service.acquire(
                provider, credentials, state, metadata
            )
            if isinstance(identity, Failure):
                return identity

            existing = await self.social_account_service.get_by_provider(
                identity.provider, identity.provider_id
            )
            if existing is not None:
                if existing.user_id != user_id:
                    logfire.warn(
                        "Provider identity linked to another user",
                        provider=identity.provider,
                        user_id=str(user_id),
                    )
                    return Failure(
                        code=AuthErrorCode.LINK_CONFLICT,
                        message="This account is already linked to another user",
                    )
                logfire.info(
                    "Provider identity already linked",
                    provider=identity.provider,
                    user_id=str(user_id),
                )
                return LinkResult(
                    outcome=LinkOutcome.ALREADY_LINKED, social_account=existing
                )

            account = await self.social_account_service.create_from_identity(
                user_id, identity
            )
            return LinkResult(outcome=LinkOutcome.LINKED, social_account=account)

    async def unlink(self, user_id: UserId, provider: str) -> None | Failure:
        """Remove a provider link from a user.

        Refuses with LAST_AUTH_METHOD rather than leave a passwordless user
        with no way to sign in.

        Args:
            user_id: Authenticated user
            provider: Provider name

        Returns:
            None on success, or a failure
        """
        name = ProviderRegistry.normalize(provider)
        with logfire.span("linking_service.unlink", user_id=str(user_id), provider=name):
            user = await self.user_service.get_by_id(user_id)
            accounts = await self.social_account_service.list_for_user(user_id)

            linked = [a for a in accounts if a.provider == name]
            if not linked:
                return Failure(
                    code=AuthErrorCode.SOCIAL_ACCOUNT_NOT_FOUND,
                    message=f"No {name} account is linked",
                )

            if not user.has_password and len(accounts) - len(linked) < 1:
                logfire.warn(
                    "Refusing to unlink last authentication method",
                    user_id=str(user_id),
                    provider=name,
                )
                return Failure(
                    code=AuthErrorCode.LAST_AUTH_METHOD,
                    message="Cannot unlink the only way to sign in; set a password first",
                )

            await self.social_account_service.unlink(user_id, name)
            return None

    async def list_linked(self, user_id: UserId) -> list[SocialAccount]:
        """Social accounts linked to a user, newest first."""
        return await self.social_account_service.list_for_user(user_id)
