"""In-memory social account repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.repository.social_account import SocialAccountRepository
from socialauth.domain.value import SocialAccountId, UserId


class InMemorySocialAccountRepository(SocialAccountRepository):
    """In-memory implementation of SocialAccountRepository for testing."""

    def __init__(self) -> None:
        self._accounts: list[SocialAccount] = []

    async def find_by_id(self, account_id: SocialAccountId) -> Optional[SocialAccount]:
        """Find social account by ID."""
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    async def find_by_provider(
        self, provider: str, provider_id: str
    ) -> Optional[SocialAccount]:
        """Find social account by provider and provider ID."""
        for account in self._accounts:
            if account.provider == provider and account.provider_id == provider_id:
                return account
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[SocialAccount]:
        """Find all social accounts for a user, newest first."""
        matches = [a for a in self._accounts if a.user_id == user_id]
        matches.sort(key=lambda a: a.created_at, reverse=True)
        return matches

    async def count_by_user_id(self, user_id: UserId) -> int:
        return sum(1 for a in self._accounts if a.user_id == user_id)

    async def save(self, account: SocialAccount) -> SocialAccount:
        """Save social account.

        Raises:
            IntegrityError: If (provider, provider_id) belongs to another row
        """
        # Check for existing account with same ID (update case)
        for i, existing in enumerate(self._accounts):
            if existing.id == account.id:
                self._accounts[i] = account
                return account

        # Check for duplicate provider identity (create case)
        if await self.find_by_provider(account.provider, account.provider_id):
            raise IntegrityError("Duplicate provider identity", None, Exception())

        self._accounts.append(account)
        return account

    async def delete_by_user_and_provider(self, user_id: UserId, provider: str) -> int:
        before = len(self._accounts)
        self._accounts = [
            a
            for a in self._accounts
            if not (a.user_id == user_id and a.provider == provider)
        ]
        return before - len(self._accounts)

    def snapshot(self) -> list[SocialAccount]:
        return list(self._accounts)

    def restore(self, snapshot: list[SocialAccount]) -> None:
        self._accounts = snapshot
