"""Social account use cases."""

from .link_provider import LinkProviderRequest, LinkProviderResponse, LinkProviderUseCase
from .list_linked_accounts import (
    ListLinkedAccountsRequest,
    ListLinkedAccountsResponse,
    ListLinkedAccountsUseCase,
    SocialAccountInfo,
)
from .list_providers import ListProvidersResponse, ListProvidersUseCase
from .unlink_provider import (
    UnlinkProviderRequest,
    UnlinkProviderResponse,
    UnlinkProviderUseCase,
)

__all__ = [
    "LinkProviderRequest",
    "LinkProviderResponse",
    "LinkProviderUseCase",
    "ListLinkedAccountsRequest",
    "ListLinkedAccountsResponse",
    "ListLinkedAccountsUseCase",
    "ListProvidersResponse",
    "ListProvidersUseCase",
    "SocialAccountInfo",
    "UnlinkProviderRequest",
    "UnlinkProviderResponse",
    "UnlinkProviderUseCase",
]
