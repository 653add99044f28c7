"""
Aviationstack Schemas.

Lenient models for the records returned by the upstream `flights` and
`airports` endpoints. Every field is optional; absence is rendered with a
placeholder by the CLI and never treated as an error. Unknown keys are
ignored.

Upstream values are never rejected. A text field accepts any scalar and
keeps its string form, a nested object that is not a mapping reads as
absent, and a delay that is not a number reads as no delay.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict


def first_present(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is not None, else `default`."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_minutes(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def _as_mapping(value: Any) -> Any:
    if isinstance(value, (dict, BaseModel)):
        return value
    return None


def _as_records(value: Any) -> list[Any] | None:
    if not isinstance(value, list):
        return None
    return [item if isinstance(item, (dict, BaseModel)) else {} for item in value]


Text = Annotated[str | None, BeforeValidator(_as_text)]
Minutes = Annotated[int | float | None, BeforeValidator(_as_minutes)]


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# =============================================================================
# flights
# =============================================================================


class FlightIdent(_UpstreamModel):
    iata: Text = None
    number: Text = None


class Airline(_UpstreamModel):
    name: Text = None
    iata: Text = None


class FlightLeg(_UpstreamModel):
    """Departure or arrival side of a flight."""

    airport: Text = None
    iata: Text = None
    scheduled: Text = None
    estimated: Text = None
    terminal: Text = None
    gate: Text = None
    delay: Minutes = None


class Aircraft(_UpstreamModel):
    registration: Text = None
    iata: Text = None
    icao: Text = None

    @property
    def identified(self) -> bool:
        return bool(self.registration or self.iata or self.icao)


class FlightRecord(_UpstreamModel):
    flight: Annotated[FlightIdent | None, BeforeValidator(_as_mapping)] = None
    airline: Annotated[Airline | None, BeforeValidator(_as_mapping)] = None
    departure: Annotated[FlightLeg | None, BeforeValidator(_as_mapping)] = None
    arrival: Annotated[FlightLeg | None, BeforeValidator(_as_mapping)] = None
    aircraft: Annotated[Aircraft | None, BeforeValidator(_as_mapping)] = None
    status: Text = None


# =============================================================================
# airports
# =============================================================================


class AirportRecord(_UpstreamModel):
    airport_name: Text = None
    iata_code: Text = None
    icao_code: Text = None
    city: Text = None
    city_name: Text = None
    city_iata_code: Text = None
    country_name: Text = None
    country_iso2: Text = None
    timezone: Text = None
    timezone_gmt: Text = None
    latitude: Text = None
    longitude: Text = None

    @property
    def city_label(self) -> str:
        return first_present(self.city, self.city_name, self.city_iata_code, default="")

    @property
    def country_label(self) -> str:
        return first_present(self.country_name, self.country_iso2, default="")

    @property
    def timezone_label(self) -> str:
        return first_present(self.timezone, self.timezone_gmt, default="")


# =============================================================================
# Envelopes
# =============================================================================


class FlightsPage(_UpstreamModel):
    data: Annotated[list[FlightRecord] | None, BeforeValidator(_as_records)] = None
    pagination: Any = None
    error: Any = None


class AirportsPage(_UpstreamModel):
    data: Annotated[list[AirportRecord] | None, BeforeValidator(_as_records)] = None
    pagination: Any = None
    error: Any = None
