"""In-memory user repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from socialauth.domain.model.user import User
from socialauth.domain.repository.user import UserRepository
from socialauth.domain.value import UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email, case-insensitively."""
        for user in self._users.values():
            if user.email.lower() == email.lower():
                return user
        return None

    async def username_exists(self, username: str) -> bool:
        return any(user.username.root == username for user in self._users.values())

    async def save(self, user: User) -> User:
        """Save or update a user.

        Raises:
            IntegrityError: If another user holds the username or email
        """
        for existing in self._users.values():
            if existing.id == user.id:
                continue
            if existing.username == user.username:
                raise IntegrityError("Duplicate username", None, Exception())
            if existing.email.lower() == user.email.lower():
                raise IntegrityError("Duplicate email", None, Exception())
        self._users[user.id] = user
        return user

    def snapshot(self) -> dict[UserId, User]:
        return dict(self._users)

    def restore(self, snapshot: dict[UserId, User]) -> None:
        self._users = snapshot
