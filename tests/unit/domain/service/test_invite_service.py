"""Unit tests for InviteCodeService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from socialauth.config import InvitationSettings
from socialauth.domain.error import InviteCodeExhaustedError
from socialauth.domain.model import InviteCode
from socialauth.domain.repository import InviteCodeRepository
from socialauth.domain.service.invite_service import (
    INVITE_CODE_ALPHABET,
    INVITE_CODE_LENGTH,
)
from socialauth.domain.value import InviteCodeId, StateMetadata, UserId
from tests.conftest import FixedClock, build_invite_service
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

INVITE_ONLY = InvitationSettings(invite_code_required=True)


async def seed_code(env, **overrides) -> InviteCode:
    fields = {
        "id": InviteCodeId(uuid4()),
        "code": "WELCOME2",
        "max_uses": 1,
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    repo = await env.get(InviteCodeRepository)
    return await repo.save(InviteCode(**fields))


class TestValidateCode:
    """Tests for validate_code method."""

    @pytest.mark.asyncio
    async def test_valid_code(self, unit_env):
        """An active, unexpired code with uses left is valid."""
        inviter_id = UserId(uuid4())
        invite_code = await seed_code(unit_env, created_by=inviter_id)
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code("welcome2")

        assert result.valid is True
        assert result.invite_code_id == invite_code.id
        assert result.inviter_id == inviter_id
        assert result.code == "WELCOME2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [None, "", "   "])
    async def test_missing_code(self, unit_env, code):
        """Blank codes are reported as MISSING."""
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code(code)

        assert result.valid is False
        assert result.error == "MISSING"

    @pytest.mark.asyncio
    async def test_unknown_code(self, unit_env):
        """Codes that do not exist are NOT_FOUND."""
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code("NOPE2345")

        assert result.error == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_inactive_code(self, unit_env):
        """Disabled codes are INACTIVE."""
        await seed_code(unit_env, is_active=False)
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code("WELCOME2")

        assert result.error == "INACTIVE"

    @pytest.mark.asyncio
    async def test_expired_code(self, unit_env):
        """Codes past expires_at are EXPIRED."""
        clock = FixedClock()
        await seed_code(unit_env, expires_at=clock.now - timedelta(seconds=1))
        service = await build_invite_service(unit_env, INVITE_ONLY, clock)

        result = await service.validate_code("WELCOME2")

        assert result.error == "EXPIRED"

    @pytest.mark.asyncio
    async def test_naive_expiry_is_treated_as_utc(self, unit_env):
        """A naive expiry in the future is still valid."""
        await seed_code(unit_env, expires_at=datetime(2030, 1, 1))
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code("WELCOME2")

        assert result.valid is True

    @pytest.mark.asyncio
    async def test_used_up_code(self, unit_env):
        """Codes with no uses left are MAX_USES_REACHED."""
        await seed_code(unit_env, max_uses=2, used_count=2)
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())

        result = await service.validate_code("WELCOME2")

        assert result.error == "MAX_USES_REACHED"


class TestConsume:
    """Tests for consume method."""

    @pytest.mark.asyncio
    async def test_consume_increments_and_records_usage(self, unit_env):
        """Consuming a code counts one use and records the sign-up origin."""
        clock = FixedClock()
        invite_code = await seed_code(unit_env, max_uses=3)
        service = await build_invite_service(unit_env, INVITE_ONLY, clock)
        validation = await service.validate_code("WELCOME2")
        user_id = UserId(uuid4())

        usage = await service.consume(
            validation, user_id, StateMetadata(origin_ip="198.51.100.7")
        )

        repo = await unit_env.get(InviteCodeRepository)
        assert (await repo.find_by_id(invite_code.id)).used_count == 1
        assert usage.user_id == user_id
        assert usage.ip_address == "198.51.100.7"
        assert usage.used_at == clock.now
        assert await repo.find_usages(invite_code.id) == [usage]

    @pytest.mark.asyncio
    async def test_consume_after_exhaustion_raises(self, unit_env):
        """A code used up after validation raises InviteCodeExhaustedError."""
        await seed_code(unit_env, max_uses=1)
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())
        validation = await service.validate_code("WELCOME2")
        await service.consume(validation, UserId(uuid4()))

        with pytest.raises(InviteCodeExhaustedError):
            await service.consume(validation, UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_consume_rejects_failed_validation(self, unit_env):
        """A failed validation cannot be consumed."""
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())
        validation = await service.validate_code("NOPE2345")

        with pytest.raises(ValueError):
            await service.consume(validation, UserId(uuid4()))


class TestCreateInviteCode:
    """Tests for create_invite_code method."""

    @pytest.mark.asyncio
    async def test_create_generates_valid_code(self, unit_env):
        """Generated codes use the unambiguous alphabet and validate."""
        service = await build_invite_service(unit_env, INVITE_ONLY, FixedClock())
        creator = UserId(uuid4())

        invite_code = await service.create_invite_code(
            created_by=creator, max_uses=5, description="launch batch"
        )

        assert len(invite_code.code) == INVITE_CODE_LENGTH
        assert set(invite_code.code) <= set(INVITE_CODE_ALPHABET)
        assert invite_code.max_uses == 5
        assert invite_code.used_count == 0
        result = await service.validate_code(invite_code.code)
        assert result.valid is True
        assert result.inviter_id == creator


class TestPolicy:
    """Tests for the invite policy and exemption window."""

    def make_settings(self, required=True, start=None, end=None):
        return InvitationSettings(
            invite_code_required=required, exempt_start=start, exempt_end=end
        )

    @pytest.mark.asyncio
    async def test_required_without_window(self, unit_env):
        """Enforcement on, no window: codes required."""
        service = await build_invite_service(
            unit_env, self.make_settings(), FixedClock()
        )

        policy = service.current_policy()

        assert policy.required is True
        assert policy.exemption_active is False

    @pytest.mark.asyncio
    async def test_not_required_when_enforcement_off(self, unit_env):
        """Enforcement off: codes never required."""
        service = await build_invite_service(
            unit_env, self.make_settings(required=False), FixedClock()
        )

        assert service.current_policy().required is False

    @pytest.mark.asyncio
    async def test_window_bounds_are_inclusive(self, unit_env):
        """The window applies at exactly its start and end instants."""
        clock = FixedClock()
        service = await build_invite_service(
            unit_env,
            self.make_settings(start="2025-06-01T12:00:00", end="2025-06-02T12:00:00"),
            clock,
        )

        assert service.current_policy().required is False
        clock.advance(24 * 3600)
        assert service.exemption_window_active() is True
        clock.advance(1)
        assert service.exemption_window_active() is False
        assert service.current_policy().required is True

    @pytest.mark.asyncio
    async def test_half_configured_window_is_ignored(self, unit_env):
        """A window needs both bounds."""
        service = await build_invite_service(
            unit_env, self.make_settings(start="2025-01-01"), FixedClock()
        )

        assert service.exemption_window is None
        assert service.current_policy().required is True
