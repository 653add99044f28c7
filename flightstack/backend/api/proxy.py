"""
Proxy Relay Endpoints.

Re-exposes the upstream `flights` and `airports` endpoints. The caller's
query string is merged into the upstream query, the server-held credential
is injected, and the upstream status, content type and body are forwarded
unchanged. Upstream error statuses are forwarded too.

Endpoints:
- GET /api/flights: upstream `flights`, no defaults
- GET /api/airports: upstream `airports`, default limit=5&offset=0

The only body built locally is the proxy_error envelope returned with a
500 when the fetch itself fails.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from flightstack.backend.core.config import get_app_config
from flightstack.backend.core.dependencies import Upstream
from flightstack.backend.core.logging import get_logger
from flightstack.backend.schemas.base import ProxyErrorResponse
from flightstack.backend.services.upstream import QueryValue, UpstreamClient

router = APIRouter()
logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


def group_query_items(items: Iterable[tuple[str, str]]) -> dict[str, QueryValue]:
    """Collapse query pairs: a key seen once maps to a string, repeats to a list."""
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else values for key, values in grouped.items()}


async def relay(
    client: UpstreamClient,
    endpoint: str,
    request: Request,
    defaults: Mapping[str, Any] | None = None,
) -> Response:
    """Forward one request upstream and mirror the answer back."""
    try:
        params = group_query_items(request.query_params.multi_items())
        upstream = await client.fetch_raw(endpoint, params, defaults=defaults)
    except Exception as e:
        logger.error(
            "Proxy fetch failed",
            extra={"endpoint": endpoint, "error_type": type(e).__name__, "error": str(e)},
        )
        return JSONResponse(
            status_code=500,
            content=ProxyErrorResponse(message=str(e)).model_dump(),
        )

    if not upstream.is_success:
        logger.warning(
            "Upstream returned error status",
            extra={"endpoint": endpoint, "status_code": upstream.status_code},
        )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
    )


@router.get(
    "/flights",
    summary="Proxy upstream flights",
    description="Forward the query string to Aviationstack /flights.",
)
async def proxy_flights(request: Request, client: Upstream) -> Response:
    return await relay(client, "flights", request)


@router.get(
    "/airports",
    summary="Proxy upstream airports",
    description="Forward the query string to Aviationstack /airports (default limit=5, offset=0).",
)
async def proxy_airports(request: Request, client: Upstream) -> Response:
    upstream = get_app_config().application.upstream
    defaults = {"limit": upstream.default_limit, "offset": upstream.default_offset}
    return await relay(client, "airports", request, defaults=defaults)
