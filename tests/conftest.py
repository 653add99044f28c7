"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Upstream Configuration:
    Tests never reach the real Aviationstack API. Upstream clients are
    built on httpx.MockTransport through the `fake_upstream` fixture, which
    records every outbound request and answers with a configurable handler.

    Both API keys are set in the process environment for every test, so a
    developer's config/.env is never needed.
"""

import json
from collections.abc import Callable, Generator

import httpx
import pytest

from flightstack.backend.core.config import get_app_config, get_settings
from flightstack.backend.core.logging import setup_logging
from flightstack.backend.services.upstream import UpstreamClient

CLI_TEST_KEY = "cli-test-key"
RELAY_TEST_KEY = "relay-test-key"
TEST_BASE_URL = "https://api.aviationstack.test/v1"


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def _configure_logging() -> None:
    """Route structlog through stdlib at WARNING so debug noise stays out of output."""
    setup_logging(level="WARNING", enable_console=False, enable_file_logging=False)


@pytest.fixture(autouse=True)
def _test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Provide both API keys and fresh config caches to every test."""
    monkeypatch.setenv("AVIATIONSTACK_API_KEY", CLI_TEST_KEY)
    monkeypatch.setenv("API_KEY", RELAY_TEST_KEY)
    monkeypatch.delenv("USE_HTTPS", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Upstream Fixtures
# =============================================================================


Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """
    Stand-in for Aviationstack.

    Usage:
        def test_something(fake_upstream):
            fake_upstream.respond_json({"data": []})
            client = fake_upstream.client()
            ...
            assert fake_upstream.last.url.params["flight_iata"] == "BA283"
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(200, json={"data": []})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def respond_json(self, body: object, status_code: int = 200) -> None:
        content = json.dumps(body).encode("utf-8")
        self.handler = lambda request: httpx.Response(
            status_code, content=content, headers={"content-type": "application/json"},
        )

    def respond_text(self, text: str, status_code: int, content_type: str | None = None) -> None:
        headers = {"content-type": content_type} if content_type else None
        self.handler = lambda request: httpx.Response(
            status_code, content=text.encode("utf-8"), headers=headers,
        )

    def fail_with(self, exc_factory: Callable[[httpx.Request], Exception]) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)

        self.handler = _raise

    def client(self, api_key: str = CLI_TEST_KEY, source: str = "internal") -> UpstreamClient:
        return UpstreamClient(
            base_url=TEST_BASE_URL,
            api_key=api_key,
            timeout=5.0,
            source=source,
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    """Provide a fresh recording upstream."""
    return FakeUpstream()


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
