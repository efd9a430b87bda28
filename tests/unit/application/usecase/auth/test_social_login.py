"""Unit tests for SocialLoginUseCase."""

import pytest
from dishka import AsyncContainer

from socialauth.application.usecase.auth.social_login import (
    SocialLoginRequest,
    SocialLoginUseCase,
)
from socialauth.domain.error import SocialAuthError
from socialauth.domain.service import JWTService, OAuthStateService
from socialauth.domain.value import AuthErrorCode
from tests.conftest import build_resolver
from tests.harness import create_env_fixture

unit_env = create_env_fixture()
invite_only_env = create_env_fixture(
    env={"INVITATIONS__INVITE_CODE_REQUIRED": "true"}
)


async def build_use_case(env: AsyncContainer) -> SocialLoginUseCase:
    return SocialLoginUseCase(
        account_resolver=await build_resolver(env),
        jwt_service=await env.get(JWTService),
    )


class TestSocialLoginUseCase:
    """Tests for SocialLoginUseCase."""

    @pytest.mark.asyncio
    async def test_first_login_creates_user_and_session(self, unit_env):
        """A new identity signs up and receives a session."""
        use_case = await build_use_case(unit_env)
        jwt_service = await unit_env.get(JWTService)

        response = await use_case.execute(
            SocialLoginRequest(provider="google", id_token="google-id-token")
        )

        assert response.is_new_user is True
        assert response.user.email == "mock.user@gmail.com"
        assert response.user.username == "mockuser"
        payload = jwt_service.verify_token(response.session.session_token)
        assert payload.user_id == response.user.id

    @pytest.mark.asyncio
    async def test_second_login_returns_same_user(self, unit_env):
        """The same identity logs back into the same account."""
        use_case = await build_use_case(unit_env)
        request = SocialLoginRequest(provider="google", id_token="google-id-token")

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert second.is_new_user is False
        assert second.user.id == first.user.id

    @pytest.mark.asyncio
    async def test_code_flow_consumes_state(self, unit_env):
        """The code path needs the state token issued with the URL."""
        use_case = await build_use_case(unit_env)
        state_service = await unit_env.get(OAuthStateService)
        state = state_service.issue("github")

        response = await use_case.execute(
            SocialLoginRequest(provider="github", code="gh-code", state=state)
        )

        assert response.user.username == "octocat"
        with pytest.raises(SocialAuthError) as exc_info:
            await use_case.execute(
                SocialLoginRequest(provider="github", code="gh-code", state=state)
            )
        assert exc_info.value.code == AuthErrorCode.INVALID_STATE

    @pytest.mark.asyncio
    async def test_failure_is_raised(self, unit_env):
        """Expected failures surface as SocialAuthError."""
        use_case = await build_use_case(unit_env)

        with pytest.raises(SocialAuthError) as exc_info:
            await use_case.execute(
                SocialLoginRequest(provider="myspace", id_token="token")
            )

        assert exc_info.value.code == AuthErrorCode.PROVIDER_UNSUPPORTED

    @pytest.mark.asyncio
    async def test_invite_required_without_code(self, invite_only_env):
        """With invites enforced a new account needs an invite code."""
        use_case = await invite_only_env.get(SocialLoginUseCase)

        with pytest.raises(SocialAuthError) as exc_info:
            await use_case.execute(
                SocialLoginRequest(provider="google", id_token="google-id-token")
            )

        assert exc_info.value.code == AuthErrorCode.INVITE_REQUIRED
