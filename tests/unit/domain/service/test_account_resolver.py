"""Unit tests for AccountResolver."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from socialauth.config import InvitationSettings
from socialauth.domain.error import DataIntegrityError
from socialauth.domain.repository import (
    InviteCodeRepository,
    SocialAccountRepository,
    UserRepository,
)
from socialauth.domain.service import OAuthStateService, ProviderRegistry
from socialauth.domain.service.account_resolver import LoginResolution
from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    SocialCredentials,
    StateMetadata,
    UserId,
    Username,
)
from tests.conftest import (
    FixedClock,
    build_invite_service,
    build_resolver,
    make_identity,
    make_social_account,
    make_user,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

INVITE_ONLY = InvitationSettings(invite_code_required=True)
# FixedClock defaults to 2025-06-01 12:00 UTC, inside this window
EXEMPT_WINDOW = InvitationSettings(
    invite_code_required=True,
    exempt_start="2025-05-01 00:00:00",
    exempt_end="2025-07-01",
)
PAST_WINDOW = InvitationSettings(
    invite_code_required=True,
    exempt_start="2025-01-01T00:00:00Z",
    exempt_end="2025-02-01T00:00:00Z",
)

ID_TOKEN = SocialCredentials(id_token="id-token")


async def use_identity(env, provider: str, **overrides):
    """Make the mock adapter for ``provider`` return a custom identity."""
    registry = await env.get(ProviderRegistry)
    identity = make_identity(provider=provider, **overrides)
    registry.get(provider).identity = identity
    return identity


class TestNewAccount:
    """Scenario: first login creates an account."""

    @pytest.mark.asyncio
    async def test_first_login_creates_user_and_social_account(self, unit_env):
        """A verified identity with an unused email creates a new account."""
        identity = await use_identity(
            unit_env, "google", provider_id="g-1", email="Alice@Example.com"
        )
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, LoginResolution)
        assert result.is_new_user is True
        assert result.user.email == "alice@example.com"
        assert result.user.username == Username("alice")
        assert result.user.password_hash is None
        assert result.user.invite_verified is True
        assert result.social_account.provider == "google"
        assert result.social_account.provider_id == identity.provider_id
        assert result.social_account.user_id == result.user.id

        users = await unit_env.get(UserRepository)
        assert await users.find_by_id(result.user.id) == result.user

    @pytest.mark.asyncio
    async def test_created_account_round_trips_through_identity(self, unit_env):
        """The stored (provider, provider_id) maps back to the new user."""
        await use_identity(unit_env, "github", provider_id="42", username="octo")
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("github", SocialCredentials(access_token="t"))

        accounts = await unit_env.get(SocialAccountRepository)
        account = await accounts.find_by_provider("github", "42")
        assert account is not None
        assert account.user_id == result.user.id
        assert account.provider_username == "octo"

    @pytest.mark.asyncio
    async def test_username_falls_back_to_email_local_part(self, unit_env):
        """Without a provider username the email local part is used."""
        await use_identity(
            unit_env, "google", username=None, email="Bob.Smith+x@example.com"
        )
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert result.user.username == Username("bobsmithx")

    @pytest.mark.asyncio
    async def test_taken_username_gets_numeric_suffix(self, unit_env):
        """Colliding usernames get 1, 2, ... appended."""
        users = await unit_env.get(UserRepository)
        await users.save(make_user(username=Username("alice"), email="a1@example.com"))
        await users.save(
            make_user(username=Username("alice1"), email="a2@example.com")
        )
        await use_identity(unit_env, "google", username="Alice")
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert result.user.username == Username("alice2")


class TestExistingAccount:
    """Scenario: returning user logs in through the same identity."""

    @pytest.mark.asyncio
    async def test_second_login_reuses_account(self, unit_env):
        """Resolving the same identity twice yields the same user."""
        await use_identity(unit_env, "google", provider_id="g-2")
        resolver = await build_resolver(unit_env)

        first = await resolver.resolve("google", ID_TOKEN)
        second = await resolver.resolve("google", ID_TOKEN)

        assert first.is_new_user is True
        assert second.is_new_user is False
        assert second.user.id == first.user.id
        assert second.social_account.id == first.social_account.id

        accounts = await unit_env.get(SocialAccountRepository)
        assert await accounts.count_by_user_id(first.user.id) == 1

    @pytest.mark.asyncio
    async def test_login_updates_last_used_and_profile(self, unit_env):
        """A returning login refreshes the social account profile."""
        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        user = await users.save(make_user())
        account = await accounts.save(
            make_social_account(user.id, provider_id="g-3", display_name="Old Name")
        )
        await use_identity(
            unit_env, "google", provider_id="g-3", display_name="New Name"
        )
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert result.is_new_user is False
        assert result.social_account.id == account.id
        assert result.social_account.display_name == "New Name"
        assert result.social_account.last_used_at is not None
        assert result.user.last_login_at is not None

    @pytest.mark.asyncio
    async def test_existing_link_wins_over_email_check(self, unit_env):
        """A linked identity logs in even though its email is taken."""
        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        user = await users.save(make_user(email="alice@example.com"))
        await accounts.save(make_social_account(user.id, provider_id="g-4"))
        await use_identity(
            unit_env, "google", provider_id="g-4", email="alice@example.com"
        )
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, LoginResolution)
        assert result.user.id == user.id

    @pytest.mark.asyncio
    async def test_orphaned_social_account_is_integrity_error(self, unit_env):
        """A social account without its user is an internal error."""
        accounts = await unit_env.get(SocialAccountRepository)
        await accounts.save(make_social_account(UserId(uuid4()), provider_id="g-5"))
        await use_identity(unit_env, "google", provider_id="g-5")
        resolver = await build_resolver(unit_env)

        with pytest.raises(DataIntegrityError):
            await resolver.resolve("google", ID_TOKEN)


class TestEmailConflict:
    """Scenario: email already belongs to an account from another provider."""

    @pytest.mark.asyncio
    async def test_email_owned_by_other_account_conflicts(self, unit_env):
        """A new identity with a registered email is refused with the owner summary."""
        users = await unit_env.get(UserRepository)
        owner = await users.save(
            make_user(email="shared@example.com", password_hash="$argon2$hash")
        )
        await use_identity(
            unit_env, "github", provider_id="gh-9", email="SHARED@example.com"
        )
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("github", SocialCredentials(access_token="t"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_EXISTS_DIFFERENT_PROVIDER
        assert result.detail == {
            "existingUser": {
                "id": str(owner.id),
                "email": "shared@example.com",
                "hasPassword": True,
            }
        }
        assert "$argon2$hash" not in str(result)

        accounts = await unit_env.get(SocialAccountRepository)
        assert await accounts.find_by_provider("github", "gh-9") is None
        assert await accounts.count_by_user_id(owner.id) == 0


class TestGatesBeforePersistence:
    """Failures before step 5 must not touch storage."""

    @pytest.mark.asyncio
    async def test_unverified_email_never_creates_account(self, unit_env):
        """Unverified identities fail with EMAIL_NOT_VERIFIED."""
        await use_identity(unit_env, "google", email_verified=False, provider_id="u1")
        resolver = await build_resolver(unit_env)

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_NOT_VERIFIED
        users = await unit_env.get(UserRepository)
        assert await users.find_by_email("alice@example.com") is None

    @pytest.mark.asyncio
    async def test_state_is_consumed_by_login(self, unit_env):
        """The state used for a login cannot be replayed."""
        state_service = await unit_env.get(OAuthStateService)
        state = state_service.issue("github")
        resolver = await build_resolver(unit_env)

        first = await resolver.resolve("github", SocialCredentials(code="c"), state)
        replay = await resolver.resolve("github", SocialCredentials(code="c"), state)

        assert isinstance(first, LoginResolution)
        assert isinstance(replay, Failure)
        assert replay.code == AuthErrorCode.INVALID_STATE


class TestInviteGate:
    """Invite code enforcement for new accounts."""

    @pytest.mark.asyncio
    async def test_new_account_requires_invite_code(self, unit_env):
        """Without a code, sign-up fails with INVITE_REQUIRED."""
        resolver = await build_resolver(unit_env, INVITE_ONLY, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_REQUIRED
        assert result.detail == {"requires_invite_code": True}

    @pytest.mark.asyncio
    async def test_unknown_invite_code_is_invalid(self, unit_env):
        """An unknown code fails with INVITE_INVALID and the reason."""
        resolver = await build_resolver(unit_env, INVITE_ONLY, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN, invite_code="NOPE2345")

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_INVALID
        assert result.detail["reason"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_valid_invite_records_provenance_and_usage(self, unit_env):
        """A valid code creates the account, counts a use and records provenance."""
        clock = FixedClock()
        inviter = await (await unit_env.get(UserRepository)).save(
            make_user(username=Username("inviter"), email="inviter@example.com")
        )
        invites = await build_invite_service(unit_env, INVITE_ONLY, clock)
        invite_code = await invites.create_invite_code(
            created_by=inviter.id, max_uses=2
        )
        await use_identity(unit_env, "google", email="new@example.com")
        resolver = await build_resolver(unit_env, INVITE_ONLY, clock)

        result = await resolver.resolve(
            "google",
            ID_TOKEN,
            metadata=StateMetadata(origin_ip="203.0.113.9", user_agent="pytest"),
            invite_code=f"  {invite_code.code.lower()} ",
        )

        assert isinstance(result, LoginResolution)
        assert result.user.invite_verified is True
        assert result.user.invited_by == inviter.id
        assert result.user.invite_code_used == invite_code.code
        assert result.user.invite_code_id == invite_code.id

        repo = await unit_env.get(InviteCodeRepository)
        stored = await repo.find_by_id(invite_code.id)
        assert stored.used_count == 1
        usages = await repo.find_usages(invite_code.id)
        assert len(usages) == 1
        assert usages[0].user_id == result.user.id
        assert usages[0].ip_address == "203.0.113.9"
        assert usages[0].user_agent == "pytest"

    @pytest.mark.asyncio
    async def test_exhausted_code_is_invalid(self, unit_env):
        """A fully used code fails with MAX_USES_REACHED."""
        clock = FixedClock()
        invites = await build_invite_service(unit_env, INVITE_ONLY, clock)
        invite_code = await invites.create_invite_code(max_uses=1)
        await use_identity(unit_env, "google", provider_id="first", email="a@x.io")
        resolver = await build_resolver(unit_env, INVITE_ONLY, clock)
        await resolver.resolve("google", ID_TOKEN, invite_code=invite_code.code)

        await use_identity(unit_env, "google", provider_id="second", email="b@x.io")
        result = await resolver.resolve(
            "google", ID_TOKEN, invite_code=invite_code.code
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_INVALID
        assert result.detail["reason"] == "MAX_USES_REACHED"

    @pytest.mark.asyncio
    async def test_losing_last_use_race_rolls_back_account(self, unit_env):
        """If the last use is taken concurrently, no partial account remains."""
        clock = FixedClock()
        invites = await build_invite_service(unit_env, INVITE_ONLY, clock)
        invite_code = await invites.create_invite_code(max_uses=1)
        await use_identity(unit_env, "google", provider_id="racer", email="r@x.io")
        resolver = await build_resolver(unit_env, INVITE_ONLY, clock)
        repo = await unit_env.get(InviteCodeRepository)

        with patch.object(repo, "increment_use", AsyncMock(return_value=False)):
            result = await resolver.resolve(
                "google", ID_TOKEN, invite_code=invite_code.code
            )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_INVALID
        assert result.detail["reason"] == "MAX_USES_REACHED"

        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        assert await users.find_by_email("r@x.io") is None
        assert await accounts.find_by_provider("google", "racer") is None

    @pytest.mark.asyncio
    async def test_storage_error_rolls_back_user(self, unit_env):
        """A failure after the user row is written leaves no user behind."""
        await use_identity(unit_env, "google", provider_id="boom", email="boom@x.io")
        resolver = await build_resolver(unit_env)

        with patch.object(
            resolver.social_account_service,
            "create_from_identity",
            AsyncMock(side_effect=RuntimeError("connection lost")),
        ):
            with pytest.raises(RuntimeError):
                await resolver.resolve("google", ID_TOKEN)

        users = await unit_env.get(UserRepository)
        assert await users.find_by_email("boom@x.io") is None

    @pytest.mark.asyncio
    async def test_open_registration_needs_no_code(self, unit_env):
        """With enforcement off, accounts are created verified without provenance."""
        resolver = await build_resolver(
            unit_env, InvitationSettings(invite_code_required=False)
        )

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, LoginResolution)
        assert result.user.invite_verified is True
        assert result.user.invited_by is None
        assert result.user.invite_code_used is None


class TestExemptionWindow:
    """Invite exemption window behaviour."""

    @pytest.mark.asyncio
    async def test_window_suspends_invite_requirement(self, unit_env):
        """Inside the window, sign-up needs no code and records no provenance."""
        resolver = await build_resolver(unit_env, EXEMPT_WINDOW, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, LoginResolution)
        assert result.is_new_user is True
        assert result.user.invite_verified is True
        assert result.user.invited_by is None
        assert result.user.invite_code_used is None

    @pytest.mark.asyncio
    async def test_past_window_enforces_invites(self, unit_env):
        """After the window ends, codes are required again."""
        resolver = await build_resolver(unit_env, PAST_WINDOW, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_REQUIRED

    @pytest.mark.asyncio
    async def test_malformed_window_is_ignored(self, unit_env):
        """A window with end before start never applies."""
        settings = InvitationSettings(
            invite_code_required=True,
            exempt_start="2025-07-01",
            exempt_end="2025-05-01",
        )
        resolver = await build_resolver(unit_env, settings, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVITE_REQUIRED

    @pytest.mark.asyncio
    async def test_existing_unverified_user_is_exempted_on_login(self, unit_env):
        """Logging in during the window verifies the user and clears provenance."""
        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        user = await users.save(
            make_user(
                invite_verified=False,
                invited_by=UserId(uuid4()),
                invite_code_used="OLDCODE2",
            )
        )
        await accounts.save(make_social_account(user.id, provider_id="legacy"))
        await use_identity(unit_env, "google", provider_id="legacy")
        resolver = await build_resolver(unit_env, EXEMPT_WINDOW, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert result.is_new_user is False
        assert result.user.invite_verified is True
        assert result.user.invited_by is None
        assert result.user.invite_code_used is None
        stored = await users.find_by_id(user.id)
        assert stored.invite_verified is True

    @pytest.mark.asyncio
    async def test_unverified_user_unchanged_outside_window(self, unit_env):
        """Outside the window, returning users keep their invite state."""
        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        user = await users.save(make_user(invite_verified=False))
        await accounts.save(make_social_account(user.id, provider_id="legacy2"))
        await use_identity(unit_env, "google", provider_id="legacy2")
        resolver = await build_resolver(unit_env, PAST_WINDOW, FixedClock())

        result = await resolver.resolve("google", ID_TOKEN)

        assert result.is_new_user is False
        assert result.user.invite_verified is False
