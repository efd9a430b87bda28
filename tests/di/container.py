"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from socialauth.util.di import PROVIDERS, Component, get_provider


def mockable_components() -> set[str]:
    """Components that ship both a real and a mock provider."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__subclasses__() and base.__mock_component__
    }


def build_test_container(
    unmock: set[Component] | None = None, for_app: bool = False
) -> AsyncContainer:
    """Build a container with mock adapters and in-memory persistence.

    Args:
        unmock: Components to use real implementations for. Real
            persistence expects a reachable Postgres; real adapters call
            Google and GitHub.
        for_app: Include the FastAPI integration provider, for containers
            handed to ``create_app``.

    Raises:
        ValueError: If ``unmock`` names an unknown component

    Examples:
        # Route and service tests
        container = build_test_container()

        # Repository tests against Postgres
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    unknown = unmock - mockable_components()
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    providers = []
    for base in PROVIDERS:
        mockable = bool(base.__subclasses__())
        use_mock = mockable and base.__mock_component__ not in unmock
        providers.append(get_provider(base, use_mock=use_mock)())

    if for_app:
        providers.append(FastapiProvider())

    return make_async_container(*providers)
