"""Dishka providers for the social auth service.

``PROVIDERS`` lists every provider base in resolution order. Swappable
components (the two identity providers and persistence) are abstract bases
whose real and mock subclasses are picked by ``get_provider``.
"""

from typing import Type

from socialauth.util.di.application import ProdApplicationProvider
from socialauth.util.di.base import Component, ProviderBase
from socialauth.util.di.core import ProdConfigProvider
from socialauth.util.di.domain import ProdDomainProvider
from socialauth.util.di.infrastructure import (
    GitHubProvider,
    GoogleProvider,
    PersistenceProvider,
    ProdGitHubProvider,
    ProdGoogleProvider,
    ProdPersistenceProvider,
    ProviderRegistryProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    GoogleProvider,
    GitHubProvider,
    PersistenceProvider,
    ProviderRegistryProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider base to the class to instantiate.

    A base without subclasses is used as-is. Otherwise the subclass whose
    ``__is_mock__`` equals ``use_mock`` is returned; mock subclasses only
    exist once the test providers have been imported.

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    for candidate in subclasses:
        if getattr(candidate, "__is_mock__", False) == use_mock:
            return candidate

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "GitHubProvider",
    "GoogleProvider",
    "PersistenceProvider",
    "ProviderRegistryProvider",
    "ProdGitHubProvider",
    "ProdGoogleProvider",
    "ProdPersistenceProvider",
]
