"""Unit tests for IdentityService."""

import asyncio

import pytest

from socialauth.config import AuthSettings
from socialauth.domain.service import IdentityService, OAuthStateService, ProviderRegistry
from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    NormalizedIdentity,
    SocialCredentials,
    StateMetadata,
)
from tests.conftest import make_identity
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestCredentialRules:
    """Tests for credential precedence and state requirements."""

    @pytest.mark.asyncio
    async def test_id_token_path_verifies_token(self, unit_env):
        """An id token should be verified without a state."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials(id_token="jwt"))

        assert isinstance(result, NormalizedIdentity)
        assert result.provider == "google"
        assert result.provider_id == "mock-google-sub-123"

    @pytest.mark.asyncio
    async def test_code_without_state_is_rejected(self, unit_env):
        """An authorization code needs a state token."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire("github", SocialCredentials(code="abc"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVALID_STATE

    @pytest.mark.asyncio
    async def test_code_with_valid_state_exchanges(self, unit_env):
        """A code with a freshly issued state should resolve the identity."""
        service = await unit_env.get(IdentityService)
        state_service = await unit_env.get(OAuthStateService)
        state = state_service.issue("github")

        result = await service.acquire(
            "github", SocialCredentials(code="abc"), state=state
        )

        assert isinstance(result, NormalizedIdentity)
        assert result.provider_id == "583231"

    @pytest.mark.asyncio
    async def test_state_for_other_provider_is_rejected(self, unit_env):
        """A state issued for google cannot complete a github login."""
        service = await unit_env.get(IdentityService)
        state_service = await unit_env.get(OAuthStateService)
        state = state_service.issue("google")

        result = await service.acquire(
            "github", SocialCredentials(code="abc"), state=state
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.STATE_PROVIDER_MISMATCH

    @pytest.mark.asyncio
    async def test_supplied_state_is_validated_on_token_path(self, unit_env):
        """A bogus state next to an id token should still be rejected."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire(
            "google", SocialCredentials(id_token="jwt"), state="forged"
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVALID_STATE

    @pytest.mark.asyncio
    async def test_state_metadata_is_checked(self, unit_env):
        """The callback must come from the origin the state was issued to."""
        service = await unit_env.get(IdentityService)
        state_service = await unit_env.get(OAuthStateService)
        state = state_service.issue("github", StateMetadata(origin_ip="1.1.1.1"))

        result = await service.acquire(
            "github",
            SocialCredentials(code="abc"),
            state=state,
            metadata=StateMetadata(origin_ip="2.2.2.2"),
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.STATE_METADATA_MISMATCH

    @pytest.mark.asyncio
    async def test_no_credentials_is_rejected(self, unit_env):
        """A request with no credential at all fails INVALID_CREDENTIALS."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials())

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_unsupported_provider(self, unit_env):
        """Unknown providers fail before any state is touched."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire("myspace", SocialCredentials(id_token="x"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.PROVIDER_UNSUPPORTED

    @pytest.mark.asyncio
    async def test_access_token_fetches_user_info(self, unit_env):
        """An access token should go straight to user info."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire(
            "github", SocialCredentials(access_token="gho_123")
        )

        assert isinstance(result, NormalizedIdentity)
        assert result.username == "octocat"

    @pytest.mark.asyncio
    async def test_provider_call_with_blank_credentials_fails(self, unit_env):
        """Blank credentials never reach the adapter."""
        service = await unit_env.get(IdentityService)
        registry = await unit_env.get(ProviderRegistry)

        result = await service._call_provider(
            registry.get("github"), SocialCredentials(access_token="")
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.INVALID_CREDENTIALS


class TestProviderFailures:
    """Tests for provider error propagation."""

    @pytest.mark.asyncio
    async def test_exchange_failure_surfaces(self, unit_env):
        """A rejected code should surface as PROVIDER_ERROR."""
        service = await unit_env.get(IdentityService)
        state = (await unit_env.get(OAuthStateService)).issue("github")

        result = await service.acquire(
            "github", SocialCredentials(code="invalid"), state=state
        )

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.PROVIDER_ERROR
        assert result.message == "bad_verification_code"

    @pytest.mark.asyncio
    async def test_token_verification_failure_surfaces(self, unit_env):
        """A bad id token should surface as TOKEN_VERIFICATION_FAILED."""
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials(id_token="invalid"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.TOKEN_VERIFICATION_FAILED

    @pytest.mark.asyncio
    async def test_slow_provider_times_out(self, unit_env):
        """A provider call past the deadline should fail with PROVIDER_ERROR."""
        registry = await unit_env.get(ProviderRegistry)
        google = registry.get("google")

        async def slow_verify(id_token: str):
            await asyncio.sleep(5)

        google.verify_token = slow_verify
        service = IdentityService(
            registry=registry,
            state_service=await unit_env.get(OAuthStateService),
            auth_settings=AuthSettings(provider_timeout_seconds=0.05),
        )

        result = await service.acquire("google", SocialCredentials(id_token="jwt"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.PROVIDER_ERROR


class TestVerificationGate:
    """Tests for the verified-email gate."""

    @pytest.mark.asyncio
    async def test_unverified_email_is_rejected(self, unit_env):
        """Unverified identities never reach account resolution."""
        registry = await unit_env.get(ProviderRegistry)
        registry.get("google").identity = make_identity(email_verified=False)
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials(id_token="jwt"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_unverified_without_email_reports_not_verified(self, unit_env):
        """Verification is checked before email presence."""
        registry = await unit_env.get(ProviderRegistry)
        registry.get("google").identity = make_identity(
            email=None, email_verified=False
        )
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials(id_token="jwt"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_verified_flag_without_email_is_rejected(self, unit_env):
        """A verified flag with no email address fails NO_VERIFIED_EMAIL."""
        registry = await unit_env.get(ProviderRegistry)
        registry.get("google").identity = make_identity(email=None)
        service = await unit_env.get(IdentityService)

        result = await service.acquire("google", SocialCredentials(id_token="jwt"))

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.NO_VERIFIED_EMAIL
