"""Domain layer DI providers."""

from dishka import Scope, provide

from socialauth.config import AuthSettings, InvitationSettings, OAuthStateSettings
from socialauth.domain.repository import (
    InviteCodeRepository,
    OAuthStateRepository,
    SocialAccountRepository,
    UnitOfWork,
    UserRepository,
)
from socialauth.domain.service import (
    AccountResolver,
    IdentityService,
    InviteCodeService,
    JWTService,
    LinkingService,
    OAuthStateService,
    ProviderRegistry,
    SocialAccountService,
    UserService,
)
from socialauth.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    The state service is the exception: pending state tokens live for the
    whole process, so it is APP-scoped.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_oauth_state_service(
        self, repository: OAuthStateRepository, settings: OAuthStateSettings
    ) -> OAuthStateService:
        """Provide the process-wide CSRF state service."""
        return OAuthStateService(repository=repository, settings=settings)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT session domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_social_account_service(
        self, social_account_repository: SocialAccountRepository
    ) -> SocialAccountService:
        """Provide social account domain service."""
        return SocialAccountService(
            social_account_repository=social_account_repository
        )

    @provide
    def get_invite_code_service(
        self,
        invite_code_repository: InviteCodeRepository,
        settings: InvitationSettings,
    ) -> InviteCodeService:
        """Provide invite code domain service."""
        return InviteCodeService(
            invite_code_repository=invite_code_repository, settings=settings
        )

    @provide
    def get_identity_service(
        self,
        registry: ProviderRegistry,
        state_service: OAuthStateService,
        auth_settings: AuthSettings,
    ) -> IdentityService:
        """Provide identity acquisition service."""
        return IdentityService(
            registry=registry,
            state_service=state_service,
            auth_settings=auth_settings,
        )

    @provide
    def get_account_resolver(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        social_account_service: SocialAccountService,
        invite_service: InviteCodeService,
        unit_of_work: UnitOfWork,
    ) -> AccountResolver:
        """Provide account resolution service."""
        return AccountResolver(
            identity_service=identity_service,
            user_service=user_service,
            social_account_service=social_account_service,
            invite_service=invite_service,
            unit_of_work=unit_of_work,
        )

    @provide
    def get_linking_service(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        social_account_service: SocialAccountService,
    ) -> LinkingService:
        """Provide account linking service."""
        return LinkingService(
            identity_service=identity_service,
            user_service=user_service,
            social_account_service=social_account_service,
        )
