"""Production container assembly."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from socialauth.util.di import PROVIDERS, get_provider


def create_container(for_app: bool = True) -> AsyncContainer:
    """Build the container with real adapters and Postgres persistence.

    Args:
        for_app: Include the FastAPI integration provider. Scripts that open
            request scopes by hand pass False.
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    if for_app:
        providers.append(FastapiProvider())
    return make_async_container(*providers)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach ``container`` to ``app`` so routes resolve ``FromDishka`` args."""
    setup_dishka(container, app)
