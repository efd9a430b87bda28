"""Fixtures for HTTP-level tests against the mocked container."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from socialauth.interface.api.app import create_app
from tests.di import build_test_container


@pytest_asyncio.fixture
async def app_container(monkeypatch):
    """Mocked app container with open registration.

    Tests that need invite enforcement set the variable back before the
    first request.
    """
    monkeypatch.setenv("INVITATIONS__INVITE_CODE_REQUIRED", "false")
    monkeypatch.setenv("ENVIRONMENT", "test")
    container = build_test_container(for_app=True)
    yield container
    await container.close()


@pytest_asyncio.fixture
async def api_client(app_container):
    transport = ASGITransport(app=create_app(app_container))
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
