"""Application layer DI providers."""

from dishka import Scope, provide

from socialauth.application.usecase.auth import (
    GetAuthUrlUseCase,
    GetCurrentUserUseCase,
    SocialLoginUseCase,
)
from socialauth.application.usecase.social import (
    LinkProviderUseCase,
    ListLinkedAccountsUseCase,
    ListProvidersUseCase,
    UnlinkProviderUseCase,
)
from socialauth.domain.service import (
    AccountResolver,
    JWTService,
    LinkingService,
    OAuthStateService,
    ProviderRegistry,
    SocialAccountService,
    UserService,
)
from socialauth.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_auth_url_use_case(
        self, registry: ProviderRegistry, state_service: OAuthStateService
    ) -> GetAuthUrlUseCase:
        """Provide get authorization URL use case."""
        return GetAuthUrlUseCase(registry=registry, state_service=state_service)

    @provide(scope=Scope.REQUEST)
    def get_social_login_use_case(
        self, account_resolver: AccountResolver, jwt_service: JWTService
    ) -> SocialLoginUseCase:
        """Provide social login use case."""
        return SocialLoginUseCase(
            account_resolver=account_resolver, jwt_service=jwt_service
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self,
        jwt_service: JWTService,
        user_service: UserService,
        social_account_service: SocialAccountService,
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            jwt_service=jwt_service,
            user_service=user_service,
            social_account_service=social_account_service,
        )

    # Social account use cases
    @provide(scope=Scope.REQUEST)
    def get_link_provider_use_case(
        self, linking_service: LinkingService
    ) -> LinkProviderUseCase:
        """Provide link provider use case."""
        return LinkProviderUseCase(linking_service=linking_service)

    @provide(scope=Scope.REQUEST)
    def get_unlink_provider_use_case(
        self, linking_service: LinkingService
    ) -> UnlinkProviderUseCase:
        """Provide unlink provider use case."""
        return UnlinkProviderUseCase(linking_service=linking_service)

    @provide(scope=Scope.REQUEST)
    def get_list_linked_accounts_use_case(
        self, linking_service: LinkingService
    ) -> ListLinkedAccountsUseCase:
        """Provide list linked accounts use case."""
        return ListLinkedAccountsUseCase(linking_service=linking_service)

    @provide(scope=Scope.REQUEST)
    def get_list_providers_use_case(
        self, registry: ProviderRegistry
    ) -> ListProvidersUseCase:
        """Provide list providers use case."""
        return ListProvidersUseCase(registry=registry)
