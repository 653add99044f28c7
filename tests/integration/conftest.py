"""
Integration Test Fixtures.

Fixtures for integration tests - the real FastAPI app with only the
upstream transport replaced.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from flightstack.backend.core.dependencies import get_upstream_client


@pytest.fixture
def app() -> FastAPI:
    """Create a fresh application instance."""
    from flightstack.backend.main import create_app

    return create_app()


@pytest.fixture
async def client(app: FastAPI, fake_upstream) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client whose relay talks to the recording upstream.

    Usage:
        async def test_flights(client, fake_upstream):
            response = await client.get("/api/flights?flight_iata=BA283")
            assert fake_upstream.last.url.params["flight_iata"] == "BA283"
    """
    app.dependency_overrides[get_upstream_client] = lambda: fake_upstream.client(
        api_key="relay-test-key", source="web",
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client_real_upstream(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client without overriding the upstream dependency.

    Only for tests that fail before any network call is made.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client
