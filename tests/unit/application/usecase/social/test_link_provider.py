"""Unit tests for the provider linking use cases."""

import pytest

from socialauth.application.usecase.social import (
    LinkProviderRequest,
    LinkProviderUseCase,
    ListLinkedAccountsRequest,
    ListLinkedAccountsUseCase,
    ListProvidersUseCase,
    UnlinkProviderRequest,
    UnlinkProviderUseCase,
)
from socialauth.domain.error import SocialAuthError
from socialauth.domain.repository import SocialAccountRepository, UserRepository
from socialauth.domain.value import AuthErrorCode, LinkOutcome, Username
from tests.conftest import make_social_account, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def seed_google_user(env):
    """Passwordless user signed up with Google."""
    users = await env.get(UserRepository)
    accounts = await env.get(SocialAccountRepository)
    user = await users.save(make_user())
    await accounts.save(make_social_account(user.id, provider="google"))
    return user


class TestLinkProviderUseCase:
    """Tests for LinkProviderUseCase."""

    @pytest.mark.asyncio
    async def test_link_then_relink(self, unit_env):
        """Linking twice reports already_linked the second time."""
        user = await seed_google_user(unit_env)
        use_case = await unit_env.get(LinkProviderUseCase)
        request = LinkProviderRequest(
            user_id=str(user.id), provider="github", access_token="gho_abc"
        )

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert first.outcome == LinkOutcome.LINKED
        assert first.social_account.provider_username == "octocat"
        assert second.outcome == LinkOutcome.ALREADY_LINKED
        assert second.social_account.id == first.social_account.id

    @pytest.mark.asyncio
    async def test_link_conflict(self, unit_env):
        """An identity owned by someone else cannot be linked."""
        users = await unit_env.get(UserRepository)
        other = await users.save(
            make_user(username=Username("bob"), email="bob@example.com")
        )
        accounts = await unit_env.get(SocialAccountRepository)
        await accounts.save(
            make_social_account(other.id, provider="github", provider_id="583231")
        )
        user = await seed_google_user(unit_env)
        use_case = await unit_env.get(LinkProviderUseCase)

        with pytest.raises(SocialAuthError) as exc_info:
            await use_case.execute(
                LinkProviderRequest(
                    user_id=str(user.id), provider="github", access_token="gho_abc"
                )
            )

        assert exc_info.value.code == AuthErrorCode.LINK_CONFLICT


class TestUnlinkProviderUseCase:
    """Tests for UnlinkProviderUseCase."""

    @pytest.mark.asyncio
    async def test_last_method_is_kept(self, unit_env):
        user = await seed_google_user(unit_env)
        use_case = await unit_env.get(UnlinkProviderUseCase)

        with pytest.raises(SocialAuthError) as exc_info:
            await use_case.execute(
                UnlinkProviderRequest(user_id=str(user.id), provider="google")
            )

        assert exc_info.value.code == AuthErrorCode.LAST_AUTH_METHOD

    @pytest.mark.asyncio
    async def test_unlink_after_linking_another(self, unit_env):
        """With two providers, either may be removed."""
        user = await seed_google_user(unit_env)
        link = await unit_env.get(LinkProviderUseCase)
        await link.execute(
            LinkProviderRequest(
                user_id=str(user.id), provider="github", access_token="gho_abc"
            )
        )
        unlink = await unit_env.get(UnlinkProviderUseCase)
        listing = await unit_env.get(ListLinkedAccountsUseCase)

        response = await unlink.execute(
            UnlinkProviderRequest(user_id=str(user.id), provider="Google")
        )
        remaining = await listing.execute(
            ListLinkedAccountsRequest(user_id=str(user.id))
        )

        assert response.success is True
        assert response.provider == "google"
        assert [a.provider for a in remaining.social_accounts] == ["github"]


class TestListProvidersUseCase:
    """Tests for ListProvidersUseCase."""

    @pytest.mark.asyncio
    async def test_lists_registered_providers(self, unit_env):
        use_case = await unit_env.get(ListProvidersUseCase)

        response = await use_case.execute()

        assert sorted(response.providers) == ["github", "google"]
