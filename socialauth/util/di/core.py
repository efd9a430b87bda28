"""Core DI providers (non-mockable)."""

from dishka import Scope, provide
from pydantic import ValidationError

from socialauth.config import (
    AuthSettings,
    InvitationSettings,
    OAuthStateSettings,
    Settings,
)
from socialauth.util.di.base import ProviderBase
from socialauth.util.error import ConfigurationError


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment.

        Raises:
            ConfigurationError: If the environment holds invalid settings
        """
        try:
            return Settings()
        except ValidationError as e:
            fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ConfigurationError(fields) from e

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_oauth_state_settings(self, settings: Settings) -> OAuthStateSettings:
        """Provide CSRF state settings."""
        return settings.oauth_state

    @provide(scope=Scope.APP)
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        """Provide invite code settings."""
        return settings.invitations
