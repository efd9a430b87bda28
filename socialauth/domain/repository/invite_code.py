"""Invite code repository interface."""

from abc import ABC, abstractmethod

from socialauth.domain.model.invite_code import InviteCode, InviteUsage
from socialauth.domain.value import InviteCodeId


class InviteCodeRepository(ABC):
    """Repository for InviteCode and InviteUsage entities."""

    @abstractmethod
    async def find_by_code(self, code: str) -> InviteCode | None:
        """Find an invite code by its public code string.

        Args:
            code: The invite code

        Returns:
            The invite code if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_id(self, code_id: InviteCodeId) -> InviteCode | None:
        """Find an invite code by ID.

        Args:
            code_id: The invite code's unique identifier

        Returns:
            The invite code if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, invite_code: InviteCode) -> InviteCode:
        """Save an invite code (create or update).

        Args:
            invite_code: The invite code to save

        Returns:
            The saved invite code
        """
        pass

    @abstractmethod
    async def increment_use(self, code_id: InviteCodeId) -> bool:
        """Atomically consume one use of an invite code.

        The increment only happens while ``used_count < max_uses``.

        Args:
            code_id: The invite code's unique identifier

        Returns:
            True if a use was consumed, False if the code is exhausted or missing
        """
        pass

    @abstractmethod
    async def save_usage(self, usage: InviteUsage) -> InviteUsage:
        """Record an invite code consumption.

        Args:
            usage: The usage record

        Returns:
            The saved usage record
        """
        pass

    @abstractmethod
    async def find_usages(self, code_id: InviteCodeId) -> list[InviteUsage]:
        """List usage records for an invite code.

        Args:
            code_id: The invite code's unique identifier

        Returns:
            Usage records (may be empty)
        """
        pass
