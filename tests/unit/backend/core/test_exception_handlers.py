"""
Unit Tests for Exception Handlers.

Calls the handlers directly with a minimal mocked request.
"""

import json
from unittest.mock import MagicMock

import pytest

from flightstack.backend.core.exception_handlers import (
    application_error_handler,
    unhandled_exception_handler,
)
from flightstack.backend.core.exceptions import ApplicationError, ConfigurationError


@pytest.fixture
def mock_request():
    """Create a mock request with a request ID in state."""
    request = MagicMock()
    request.state.request_id = "req-123"
    request.url.path = "/api/flights"
    request.method = "GET"
    return request


class TestApplicationErrorHandler:
    """Tests for ApplicationError conversion."""

    @pytest.mark.asyncio
    async def test_configuration_error(self, mock_request):
        response = await application_error_handler(mock_request, ConfigurationError("Missing API_KEY in .env"))

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"] == {"code": "SYS_CONFIGURATION_ERROR", "message": "Missing API_KEY in .env"}
        assert body["metadata"]["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_base_error_keeps_its_code(self, mock_request):
        response = await application_error_handler(mock_request, ApplicationError("odd"))

        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "SYS_INTERNAL_ERROR"

    @pytest.mark.asyncio
    async def test_request_id_from_header_without_state(self):
        request = MagicMock()
        request.state = object()
        request.headers = {"x-request-id": "from-header"}

        response = await application_error_handler(request, ConfigurationError())

        assert json.loads(response.body)["metadata"]["request_id"] == "from-header"


class TestUnhandledExceptionHandler:
    """Tests for the catch-all handler."""

    @pytest.mark.asyncio
    async def test_hides_details(self, mock_request):
        response = await unhandled_exception_handler(mock_request, RuntimeError("secret detail"))

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["error"]["code"] == "SYS_INTERNAL_ERROR"
        assert "secret detail" not in response.body.decode()
