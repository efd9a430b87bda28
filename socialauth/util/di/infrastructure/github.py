"""GitHub infrastructure providers."""

from dishka import Scope, provide

from socialauth.adapter.github import GitHubAdapter, RealGitHubAdapter
from socialauth.config import Settings
from socialauth.util.di.base import ProviderBase
from socialauth.util.error import ConfigurationError


class GitHubProvider(ProviderBase):
    """GitHub component base."""

    __mock_component__ = "github"


class ProdGitHubProvider(GitHubProvider):
    """Production GitHub provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_github_adapter(self, settings: Settings) -> GitHubAdapter:
        """Provide GitHub adapter.

        Returns:
            GitHub OAuth 2.0 adapter

        Raises:
            ConfigurationError: If GitHub OAuth credentials are not configured
        """
        missing = [
            f"auth.github.{name}"
            for name in ("client_id", "client_secret")
            if not getattr(settings.auth.github, name)
        ]
        if missing:
            raise ConfigurationError(missing)

        return RealGitHubAdapter(
            client_id=settings.auth.github.client_id,
            client_secret=settings.auth.github.client_secret,
            callback_url=settings.auth.github_callback_url,
        )
