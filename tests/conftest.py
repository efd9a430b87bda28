"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire
from dishka import AsyncContainer

from socialauth.config import InvitationSettings
from socialauth.domain.model import SocialAccount, User
from socialauth.domain.repository import InviteCodeRepository, UnitOfWork
from socialauth.domain.service import (
    AccountResolver,
    IdentityService,
    InviteCodeService,
    SocialAccountService,
    UserService,
)
from socialauth.domain.value import (
    NormalizedIdentity,
    SocialAccountId,
    UserId,
    Username,
)

# Local-only telemetry for tests
logfire.configure(send_to_logfire=False, console=False)

OPEN_REGISTRATION = InvitationSettings(invite_code_required=False)


class FixedClock:
    """Controllable clock for services that take a ``clock`` callable."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_identity(**overrides) -> NormalizedIdentity:
    """Verified Google identity, with any field overridden."""
    fields = {
        "provider": "google",
        "provider_id": f"sub-{uuid4().hex[:12]}",
        "email": "alice@example.com",
        "email_verified": True,
        "username": "alice",
        "display_name": "Alice Example",
        "avatar_url": "https://example.com/alice.png",
    }
    fields.update(overrides)
    return NormalizedIdentity(**fields)


def make_user(**overrides) -> User:
    """Passwordless, invite-verified user."""
    now = datetime.now(timezone.utc)
    fields = {
        "id": UserId(uuid4()),
        "username": Username("alice"),
        "email": "alice@example.com",
        "invite_verified": True,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return User(**fields)


def make_social_account(user_id: UserId, **overrides) -> SocialAccount:
    """Social account owned by ``user_id``."""
    fields = {
        "id": SocialAccountId(uuid4()),
        "user_id": user_id,
        "provider": "google",
        "provider_id": f"sub-{uuid4().hex[:12]}",
        "provider_email": "alice@example.com",
        "created_at": datetime.now(timezone.utc),
    }
    fields.update(overrides)
    return SocialAccount(**fields)


async def build_invite_service(
    env: AsyncContainer,
    settings: InvitationSettings = OPEN_REGISTRATION,
    clock: FixedClock | None = None,
) -> InviteCodeService:
    """Invite service over the container's repository with custom settings."""
    kwargs = {"clock": clock} if clock else {}
    return InviteCodeService(
        invite_code_repository=await env.get(InviteCodeRepository),
        settings=settings,
        **kwargs,
    )


async def build_resolver(
    env: AsyncContainer,
    invitations: InvitationSettings = OPEN_REGISTRATION,
    clock: FixedClock | None = None,
) -> AccountResolver:
    """Account resolver wired from the container with custom invite settings."""
    return AccountResolver(
        identity_service=await env.get(IdentityService),
        user_service=await env.get(UserService),
        social_account_service=await env.get(SocialAccountService),
        invite_service=await build_invite_service(env, invitations, clock),
        unit_of_work=await env.get(UnitOfWork),
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
