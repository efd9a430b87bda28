"""Unit tests for GetCurrentUserUseCase."""

from uuid import uuid4

import pytest

from socialauth.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserUseCase,
)
from socialauth.domain.error import NotFoundError
from socialauth.domain.repository import SocialAccountRepository, UserRepository
from socialauth.domain.service import JWTService
from socialauth.domain.value import UserId
from socialauth.util.jwt import JWTError
from tests.conftest import make_social_account, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetCurrentUserUseCase:
    """Tests for GetCurrentUserUseCase."""

    @pytest.mark.asyncio
    async def test_returns_user_with_linked_accounts(self, unit_env):
        users = await unit_env.get(UserRepository)
        accounts = await unit_env.get(SocialAccountRepository)
        user = await users.save(make_user())
        await accounts.save(make_social_account(user.id, provider="google"))
        await accounts.save(
            make_social_account(user.id, provider="github", provider_id="42")
        )
        token = (await unit_env.get(JWTService)).create_session(user).session_token
        use_case = await unit_env.get(GetCurrentUserUseCase)

        response = await use_case.execute(GetCurrentUserRequest(token=token))

        assert response.user.id == str(user.id)
        assert response.has_password is False
        assert sorted(a.provider for a in response.social_accounts) == [
            "github",
            "google",
        ]

    @pytest.mark.asyncio
    async def test_invalid_token(self, unit_env):
        use_case = await unit_env.get(GetCurrentUserUseCase)

        with pytest.raises(JWTError):
            await use_case.execute(GetCurrentUserRequest(token="not-a-jwt"))

    @pytest.mark.asyncio
    async def test_deleted_user(self, unit_env):
        """A valid token for a user that no longer exists raises NotFoundError."""
        ghost = make_user(id=UserId(uuid4()))
        token = (await unit_env.get(JWTService)).create_session(ghost).session_token
        use_case = await unit_env.get(GetCurrentUserUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(GetCurrentUserRequest(token=token))
