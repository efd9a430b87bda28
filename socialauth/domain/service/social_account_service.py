"""Social account domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.repository import SocialAccountRepository
from socialauth.domain.value import NormalizedIdentity, SocialAccountId, UserId

from .base import Service


class SocialAccountService(Service):
    """Domain service for social account operations."""

    def __init__(self, social_account_repository: SocialAccountRepository) -> None:
        """Initialize social account service.

        Args:
            social_account_repository: Social account repository
        """
        self.social_account_repository = social_account_repository

    async def get_by_provider(
        self, provider: str, provider_id: str
    ) -> SocialAccount | None:
        """Get social account by its (provider, provider_id) join key.

        Args:
            provider: Provider name
            provider_id: Provider-specific user ID

        Returns:
            Social account if found, None otherwise
        """
        with logfire.span(
            "social_account_service.get_by_provider",
            provider=provider,
            provider_id=provider_id,
        ):
            account = await self.social_account_repository.find_by_provider(
                provider, provider_id
            )
            if account:
                logfire.info(
                    "Social account found",
                    provider=provider,
                    provider_id=provider_id,
                    user_id=str(account.user_id),
                )
            else:
                logfire.info(
                    "Social account not found",
                    provider=provider,
                    provider_id=provider_id,
                )
            return account

    async def list_for_user(self, user_id: UserId) -> list[SocialAccount]:
        """Get all social accounts linked to a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of social accounts (may be empty)
        """
        with logfire.span(
            "social_account_service.list_for_user", user_id=str(user_id)
        ):
            accounts = await self.social_account_repository.find_all_by_user_id(
                user_id
            )
            logfire.info(
                "Social accounts retrieved for user",
                user_id=str(user_id),
                count=len(accounts),
            )
            return accounts

    def build_from_identity(
        self, user_id: UserId, identity: NormalizedIdentity
    ) -> SocialAccount:
        """Build an unsaved social account for a verified identity.

        Args:
            user_id: Owner
            identity: Verified identity

        Returns:
            Unsaved social account
        """
        now = datetime.now(timezone.utc)
        return SocialAccount(
            id=SocialAccountId(uuid4()),
            user_id=user_id,
            provider=identity.provider,
            provider_id=identity.provider_id,
            provider_username=identity.username,
            provider_email=identity.email,
            display_name=identity.display_name,
            avatar_url=identity.avatar_url,
            profile_url=identity.profile_url,
            created_at=now,
            last_used_at=now,
        )

    async def create_from_identity(
        self, user_id: UserId, identity: NormalizedIdentity
    ) -> SocialAccount:
        """Link a verified identity to a user.

        Args:
            user_id: Owner
            identity: Verified identity

        Returns:
            Saved social account
        """
        with logfire.span(
            "social_account_service.create_from_identity",
            user_id=str(user_id),
            provider=identity.provider,
        ):
            saved = await self.social_account_repository.save(
                self.build_from_identity(user_id, identity)
            )
            logfire.info(
                "Social account linked",
                account_id=str(saved.id),
                provider=saved.provider,
                user_id=str(user_id),
            )
            return saved

    async def touch(
        self, account: SocialAccount, identity: NormalizedIdentity | None = None
    ) -> SocialAccount:
        """Mark a social account as just used, refreshing its profile fields.

        Args:
            account: Existing social account
            identity: Freshly acquired identity, if any

        Returns:
            Updated social account
        """
        update: dict = {"last_used_at": datetime.now(timezone.utc)}
        if identity is not None:
            update.update(
                provider_username=identity.username or account.provider_username,
                provider_email=identity.email or account.provider_email,
                display_name=identity.display_name or account.display_name,
                avatar_url=identity.avatar_url or account.avatar_url,
                profile_url=identity.profile_url or account.profile_url,
            )
        return await self.social_account_repository.save(
            account.evolve(**update)
        )

    async def unlink(self, user_id: UserId, provider: str) -> int:
        """Remove a user's link to a provider.

        Args:
            user_id: Owner
            provider: Provider name

        Returns:
            Number of social accounts removed
        """
        with logfire.span(
            "social_account_service.unlink", user_id=str(user_id), provider=provider
        ):
            removed = await self.social_account_repository.delete_by_user_and_provider(
                user_id, provider
            )
            logfire.info(
                "Social account unlinked",
                user_id=str(user_id),
                provider=provider,
                removed=removed,
            )
            return removed
