"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from socialauth.domain.model.user import User
from socialauth.domain.value import UserId


class UserRepository(ABC):
    """Storage for passwordless users created through social login.

    Emails are unique case-insensitively and usernames are unique exactly.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find the user holding ``email``, ignoring case.

        Used by account resolution to detect an email already registered
        through another provider.
        """
        pass

    @abstractmethod
    async def username_exists(self, username: str) -> bool:
        """Whether ``username`` is taken, for unique username generation."""
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert a new user or overwrite the stored one with the same ID.

        Raises:
            IntegrityError: If another user holds the email or username
        """
        pass
