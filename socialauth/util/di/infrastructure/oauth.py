"""Provider registry infrastructure provider."""

from dishka import Scope, provide

from socialauth.adapter.github import GitHubAdapter
from socialauth.adapter.google import GoogleAdapter
from socialauth.domain.service import ProviderRegistry
from socialauth.domain.value import AuthProvider
from socialauth.util.di.base import ProviderBase


class ProviderRegistryProvider(ProviderBase):
    """Provider that registers every provider adapter by name."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_provider_registry(
        self,
        google_adapter: GoogleAdapter,
        github_adapter: GitHubAdapter,
    ) -> ProviderRegistry:
        """Provide the registry of all provider adapters.

        Args:
            google_adapter: Google adapter (specific type)
            github_adapter: GitHub adapter (specific type)

        Returns:
            Registry keyed by provider name
        """
        return ProviderRegistry(
            {
                AuthProvider.GOOGLE.value: google_adapter,
                AuthProvider.GITHUB.value: github_adapter,
            }
        )
