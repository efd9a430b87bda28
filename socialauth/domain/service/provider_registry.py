"""Registry of named provider adapters."""

from collections.abc import Mapping

import logfire

from socialauth.domain.service.provider import ProviderAdapter
from socialauth.domain.value import AuthErrorCode, Failure

from .base import Service


class ProviderRegistry(Service):
    """Holds adapters by provider name.

    Names are case-insensitive. Registering a name twice replaces the
    previous adapter, which is how tests swap in doubles.
    """

    def __init__(self, adapters: Mapping[str, ProviderAdapter] | None = None) -> None:
        """Initialize registry.

        Args:
            adapters: Initial adapters keyed by provider name
        """
        self._adapters: dict[str, ProviderAdapter] = {}
        for name, adapter in (adapters or {}).items():
            self.register(name, adapter)

    @staticmethod
    def normalize(name: str) -> str:
        return name.strip().lower()

    def register(self, name: str, adapter: ProviderAdapter) -> None:
        """Register (or replace) the adapter for a provider name."""
        key = self.normalize(name)
        replaced = key in self._adapters
        self._adapters[key] = adapter
        logfire.debug("Provider adapter registered", provider=key, replaced=replaced)

    def get(self, name: str) -> ProviderAdapter | Failure:
        """Look up the adapter for a provider name.

        Returns:
            The adapter, or a PROVIDER_UNSUPPORTED failure
        """
        adapter = self._adapters.get(self.normalize(name))
        if adapter is None:
            return Failure(
                code=AuthErrorCode.PROVIDER_UNSUPPORTED,
                message=f"Provider '{name}' is not supported",
            )
        return adapter

    def list_providers(self) -> list[str]:
        """Names of all registered providers, in registration order."""
        return list(self._adapters)
