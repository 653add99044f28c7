"""
Aviationstack Upstream Client.

Shared by the query CLI and the proxy relay. Each call opens its own
httpx.AsyncClient, issues a single GET and closes it again: no retries,
no connection reuse and no timeout handling beyond the transport timeout.

Query construction:
    credential -> endpoint defaults -> caller parameters

A later write to the same key replaces every earlier value for that key.
List values expand into repeated pairs, in order. The credential is
written again after the caller merge so it can never be replaced by
caller input.

Usage:
    client = UpstreamClient(base_url="https://api.aviationstack.com/v1", api_key="...")
    body = await client.fetch_json("flights", {"flight_iata": "BA283"})
    response = await client.fetch_raw("airports", {"search": "heathrow"})
"""

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from flightstack.backend.core.exceptions import UpstreamError
from flightstack.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

QueryValue = str | Sequence[str]
QueryParams = Mapping[str, QueryValue]


def merge_query(
    credential: tuple[str, str],
    defaults: Mapping[str, Any] | None,
    params: QueryParams | None,
) -> list[tuple[str, str]]:
    """
    Merge credential, defaults and caller parameters into ordered query pairs.

    Args:
        credential: (parameter name, key) injected on every request
        defaults: Endpoint defaults, overridden per key by `params`
        params: Caller parameters; a list value becomes repeated pairs

    Returns:
        List of (name, value) pairs ready for httpx
    """
    credential_param, api_key = credential
    merged: dict[str, list[str]] = {credential_param: [api_key]}

    for source in (defaults or {}, params or {}):
        for key, value in source.items():
            if isinstance(value, (str, int, float)):
                merged[key] = [str(value)]
            else:
                merged[key] = [str(item) for item in value]

    merged[credential_param] = [api_key]

    return [(key, value) for key, values in merged.items() for value in values]


class UpstreamClient:
    """
    HTTP client for the Aviationstack REST API.

    fetch_json() is the CLI path: non-2xx raises UpstreamError, success
    returns the parsed body. fetch_raw() is the relay path: the response
    is returned as-is whatever its status.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        credential_param: str = "access_key",
        source: str = "internal",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the upstream client.

        Args:
            base_url: Upstream base URL, e.g. https://api.aviationstack.com/v1
            api_key: Credential injected into every query string
            timeout: Transport timeout in seconds
            credential_param: Query parameter carrying the credential
            source: Log source for records emitted by this client
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.credential_param = credential_param
        self.source = source
        self._api_key = api_key
        self._transport = transport

    def build_params(
        self,
        params: QueryParams | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> list[tuple[str, str]]:
        """Build the outbound query for this client's credential."""
        return merge_query((self.credential_param, self._api_key), defaults, params)

    def endpoint_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    async def fetch_raw(
        self,
        endpoint: str,
        params: QueryParams | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """
        GET an upstream endpoint and return the response untouched.

        Raises:
            httpx.HTTPError: On transport failure
        """
        query = self.build_params(params, defaults)

        log_with_source(
            logger,
            self.source,
            "debug",
            "Upstream request",
            endpoint=endpoint,
            params=sorted({key for key, _ in query if key != self.credential_param}),
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.endpoint_url(endpoint), params=query)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                self.source,
                "error",
                "Upstream request failed",
                endpoint=endpoint,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            self.source,
            "debug",
            "Upstream response",
            endpoint=endpoint,
            status_code=response.status_code,
        )
        return response

    async def fetch_json(
        self,
        endpoint: str,
        params: QueryParams | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        GET an upstream endpoint and return its parsed JSON body.

        Raises:
            UpstreamError: If upstream answers with a non-2xx status
            httpx.HTTPError: On transport failure
        """
        response = await self.fetch_raw(endpoint, params, defaults)
        if not response.is_success:
            raise UpstreamError(endpoint, response.status_code, response.text)
        return response.json()
