"""Social account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.value import SocialAccountId, UserId


class SocialAccountRepository(ABC):
    """Repository for SocialAccount entity.

    Manages the relationship between users and their external
    provider identities.
    """

    @abstractmethod
    async def find_by_id(self, account_id: SocialAccountId) -> Optional[SocialAccount]:
        """Find a social account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The social account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider(
        self, provider: str, provider_id: str
    ) -> Optional[SocialAccount]:
        """Find a social account by its (provider, provider_id) join key.

        Args:
            provider: Provider name
            provider_id: The identity's ID on that provider

        Returns:
            The social account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[SocialAccount]:
        """Get all social accounts owned by a user, newest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of social accounts (may be empty)
        """
        pass

    @abstractmethod
    async def count_by_user_id(self, user_id: UserId) -> int:
        """Count social accounts owned by a user.

        Args:
            user_id: The user's unique identifier

        Returns:
            Number of linked social accounts
        """
        pass

    @abstractmethod
    async def save(self, account: SocialAccount) -> SocialAccount:
        """Save a social account (create or update).

        Args:
            account: The social account to save

        Returns:
            The saved social account

        Raises:
            IntegrityError: If (provider, provider_id) already belongs to another row
        """
        pass

    @abstractmethod
    async def delete_by_user_and_provider(self, user_id: UserId, provider: str) -> int:
        """Delete a user's social accounts for one provider.

        Args:
            user_id: Owner
            provider: Provider name

        Returns:
            Number of rows deleted
        """
        pass
