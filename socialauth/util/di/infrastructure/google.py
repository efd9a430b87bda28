"""Google infrastructure providers."""

from dishka import Scope, provide

from socialauth.adapter.google import GoogleAdapter, RealGoogleAdapter
from socialauth.config import Settings
from socialauth.util.di.base import ProviderBase
from socialauth.util.error import ConfigurationError


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_adapter(self, settings: Settings) -> GoogleAdapter:
        """Provide Google adapter.

        Returns:
            Google OpenID Connect adapter

        Raises:
            ConfigurationError: If Google OAuth credentials are not configured
        """
        missing = [
            f"auth.google.{name}"
            for name in ("client_id", "client_secret")
            if not getattr(settings.auth.google, name)
        ]
        if missing:
            raise ConfigurationError(missing)

        return RealGoogleAdapter(
            client_id=settings.auth.google.client_id,
            client_secret=settings.auth.google.client_secret,
            redirect_uri=settings.auth.google_redirect_uri,
        )
