"""
Query Dispatcher.

Maps a `(command, argument)` pair from the command line onto exactly one
upstream query and renders the answer as report lines.

    flight <IATA_OR_NUMBER>      flights   flight_iata=<arg>
    arrivals <AIRPORT_IATA>      flights   arr_iata=<arg>
    departures <AIRPORT_IATA>    flights   dep_iata=<arg>
    airport <IATA|ICAO|text>     airports  iata_code / icao_code / search
"""

import re
from dataclasses import dataclass, field

from flightstack.backend.core.config import (
    get_app_config,
    get_upstream_base_url,
    require_cli_api_key,
)
from flightstack.backend.schemas.aviation import AirportsPage, FlightsPage
from flightstack.backend.services.upstream import UpstreamClient
from flightstack.cli.formatting import render_airports, render_flights

USAGE = (
    "Usage:\n"
    "  flight <IATA>\n"
    "  arrivals <AIRPORT_IATA>\n"
    "  departures <AIRPORT_IATA>\n"
    "  airport <IATA|ICAO|search text>"
)

_IATA_PATTERN = re.compile(r"[A-Za-z]{3}")
_ICAO_PATTERN = re.compile(r"[A-Za-z]{4}")

# command -> upstream flights filter
FLIGHT_FILTERS = {
    "flight": "flight_iata",
    "arrivals": "arr_iata",
    "departures": "dep_iata",
}


@dataclass(frozen=True)
class UpstreamQuery:
    """A resolved CLI command: which endpoint to call and with what."""

    command: str
    endpoint: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def show_aircraft(self) -> bool:
        return self.command == "flight"


def airport_params(argument: str) -> dict[str, str]:
    """
    Guess which airports filter an argument is meant for.

    Three letters are an IATA code, four letters an ICAO code, anything
    else is sent as free-text search. There is no fallback when the guess
    finds nothing upstream.
    """
    if _IATA_PATTERN.fullmatch(argument):
        return {"iata_code": argument.upper()}
    if _ICAO_PATTERN.fullmatch(argument):
        return {"icao_code": argument.upper()}
    return {"search": argument}


def resolve_query(command: str | None, argument: str | None) -> UpstreamQuery | None:
    """Resolve a command line to a query, or None when it is not recognised."""
    if not command or not argument:
        return None
    if command in FLIGHT_FILTERS:
        return UpstreamQuery(command, "flights", {FLIGHT_FILTERS[command]: argument})
    if command == "airport":
        return UpstreamQuery(command, "airports", airport_params(argument))
    return None


def build_cli_client() -> UpstreamClient:
    """
    Create the upstream client used by the CLI.

    Raises:
        ConfigurationError: If AVIATIONSTACK_API_KEY is not set
    """
    api_key = require_cli_api_key()
    app_settings = get_app_config().application
    return UpstreamClient(
        base_url=get_upstream_base_url(use_https=True),
        api_key=api_key,
        timeout=float(app_settings.timeouts.external_api),
        credential_param=app_settings.upstream.credential_param,
        source="cli",
    )


def _list_defaults() -> dict[str, int]:
    upstream = get_app_config().application.upstream
    return {"limit": upstream.default_limit, "offset": upstream.default_offset}


async def run_query(client: UpstreamClient, query: UpstreamQuery) -> list[str]:
    """
    Perform the single upstream call for a query and render the report.

    Raises:
        UpstreamError: If upstream answers with a non-2xx status
        httpx.HTTPError: On transport failure
    """
    body = await client.fetch_json(query.endpoint, query.params, defaults=_list_defaults())
    if not isinstance(body, dict):
        body = {}

    if query.endpoint == "airports":
        page = AirportsPage.model_validate(body)
        return render_airports(page.data or [])

    page = FlightsPage.model_validate(body)
    return render_flights(page.data or [], show_aircraft=query.show_aircraft)
