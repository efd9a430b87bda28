"""User domain service."""

import re
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from socialauth.domain.error import NotFoundError
from socialauth.domain.model.user import User
from socialauth.domain.repository import UserRepository
from socialauth.domain.value import NormalizedIdentity, UserId, Username
from socialauth.domain.value.invite import InviteValidation

from .base import Service

USERNAME_MAX_BASE_LENGTH = 20
FALLBACK_USERNAME = "user"


def sanitize_username(candidate: str) -> str:
    """Lower-case, strip to ``[a-z0-9_]`` and truncate a username candidate."""
    sanitized = re.sub(r"[^a-z0-9_]", "", candidate.lower())
    return sanitized[:USERNAME_MAX_BASE_LENGTH] or FALLBACK_USERNAME


class UserService(Service):
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            The user

        Raises:
            NotFoundError: If user doesn't exist
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_by_id(self, user_id: UserId) -> User | None:
        return await self.user_repository.find_by_id(user_id)

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email, compared lower-cased.

        Args:
            email: Email address as reported by a provider

        Returns:
            User if found, None otherwise
        """
        with logfire.span("user_service.get_by_email"):
            return await self.user_repository.find_by_email(email.strip().lower())

    async def generate_unique_username(self, base: str) -> Username:
        """Derive an unused username from a provider username or email local part.

        Appends 1, 2, 3, ... to the sanitized base until no user holds it.

        Args:
            base: Raw candidate

        Returns:
            An unused username
        """
        with logfire.span("user_service.generate_unique_username"):
            sanitized = sanitize_username(base)
            candidate = sanitized
            counter = 1
            while await self.user_repository.username_exists(candidate):
                candidate = f"{sanitized}{counter}"
                counter += 1
            logfire.info("Username generated", base=sanitized, username=candidate)
            return Username(candidate)

    def build_social_user(
        self,
        identity: NormalizedIdentity,
        username: Username,
        invite: InviteValidation | None,
    ) -> User:
        """Build a new passwordless user from a verified identity.

        Args:
            identity: Verified identity the account is created from
            username: Unused username
            invite: Consumed invite, or None when no code was required

        Returns:
            Unsaved user entity
        """
        now = datetime.now(timezone.utc)
        if invite is None:
            provenance: dict = {"invite_verified": True}
        else:
            provenance = {
                "invite_verified": True,
                "invited_by": invite.inviter_id,
                "invite_code_used": invite.code,
                "invite_code_id": invite.invite_code_id,
            }

        return User(
            id=UserId(uuid4()),
            username=username,
            email=(identity.email or "").lower(),
            password_hash=None,
            display_name=identity.display_name,
            avatar_url=identity.avatar_url,
            last_login_at=now,
            created_at=now,
            updated_at=now,
            **provenance,
        )

    async def record_login(self, user: User) -> User:
        """Update the user's last-login marker."""
        now = datetime.now(timezone.utc)
        updated = user.evolve(last_login_at=now, updated_at=now)
        return await self.user_repository.save(updated)

    async def apply_invite_exemption(self, user: User) -> User:
        """Mark a user invite-verified and clear invite provenance.

        Args:
            user: User created or logged in during an exemption window

        Returns:
            Updated user
        """
        with logfire.span("user_service.apply_invite_exemption", user_id=str(user.id)):
            updated = user.evolve(
                invite_verified=True,
                invited_by=None,
                invite_code_used=None,
                invite_code_id=None,
                updated_at=datetime.now(timezone.utc),
            )
            saved = await self.user_repository.save(updated)
            logfire.info("Invite exemption applied", user_id=str(user.id))
            return saved

    async def save(self, user: User) -> User:
        """Save user (create or update)."""
        with logfire.span("user_service.save", user_id=str(user.id)):
            return await self.user_repository.save(user)
