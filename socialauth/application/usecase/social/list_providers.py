"""List providers use case."""

from pydantic import BaseModel

from socialauth.domain.service import ProviderRegistry

from ..base import BaseUseCase


class ListProvidersResponse(BaseModel):
    """Registered provider names."""

    providers: list[str]


class ListProvidersUseCase(BaseUseCase):
    """Use case for listing the providers a client may offer."""

    def __init__(self, registry: ProviderRegistry) -> None:
        self.registry = registry

    async def execute(self, request: None = None) -> ListProvidersResponse:
        return ListProvidersResponse(providers=self.registry.list_providers())
