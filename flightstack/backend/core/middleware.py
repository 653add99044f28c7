"""
Request Context Middleware.

Tags every relay request with an ID, binds it into the logging context and
reports how long the request took.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from flightstack.backend.core.logging import bind_source, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds X-Request-ID (echoed when the caller sends one) and X-Response-Time
    to every response, including relayed upstream responses and static files.

    Log records emitted while the request is handled carry source="web",
    request_id, method and path. The ID is also exposed as
    request.state.request_id for the error envelope.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_source("web", request_id=request_id, method=request.method, path=request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error("Request failed", duration_ms=_elapsed_ms(started))
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = _elapsed_ms(started)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms}ms"
        logger.debug(
            "Request completed",
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return response


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
