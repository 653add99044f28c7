"""
Report Rendering.

Turns upstream records into the plain-text lines printed by the query CLI.
"""

from collections.abc import Sequence

from flightstack.backend.schemas.aviation import (
    AirportRecord,
    FlightLeg,
    FlightRecord,
    first_present,
)

SEPARATOR = "—" * 60
PLACEHOLDER = "—"
NO_RESULTS = "No results."


def flight_code(record: FlightRecord) -> str:
    ident = record.flight
    if ident is None:
        return "N/A"
    return first_present(ident.iata, ident.number, default="N/A")


def airline_label(record: FlightRecord) -> str:
    airline = record.airline
    if airline is None:
        return "Unknown Airline"
    return first_present(airline.name, airline.iata, default="Unknown Airline")


def _format_delay(delay: int | float | None) -> str:
    if delay is None:
        return "0"
    if isinstance(delay, float) and delay.is_integer():
        return str(int(delay))
    return str(delay)


def format_leg(label: str, leg: FlightLeg | None) -> str:
    """One `From:` / `To:` line for a departure or arrival leg."""
    leg = leg or FlightLeg()
    airport = first_present(leg.airport, leg.iata, default="N/A")
    scheduled = first_present(leg.scheduled, default=PLACEHOLDER)
    estimated = first_present(leg.estimated, default=PLACEHOLDER)
    terminal = first_present(leg.terminal, default=PLACEHOLDER)
    gate = first_present(leg.gate, default=PLACEHOLDER)
    return (
        f"{label} {airport}  "
        f"sched: {scheduled}  est: {estimated}  "
        f"T{terminal} G{gate}  delay: {_format_delay(leg.delay)}m"
    )


def render_flights(records: Sequence[FlightRecord], show_aircraft: bool = False) -> list[str]:
    """
    Render flight records as report lines.

    Args:
        records: Records from the upstream `flights` endpoint
        show_aircraft: Add an aircraft line where any identifier is present

    Returns:
        Lines to print; ["No results."] when there are no records
    """
    if not records:
        return [NO_RESULTS]

    lines: list[str] = []
    for record in records:
        status = first_present(record.status, default="unknown")
        lines.append(SEPARATOR)
        lines.append(f"{flight_code(record)} • {airline_label(record)} • status: {status}")
        lines.append(format_leg("From:", record.departure))
        lines.append(format_leg("To:  ", record.arrival))

        aircraft = record.aircraft
        if show_aircraft and aircraft is not None and aircraft.identified:
            lines.append(
                f"Aircraft: reg {first_present(aircraft.registration, default=PLACEHOLDER)}"
                f" • type IATA {first_present(aircraft.iata, default=PLACEHOLDER)}"
                f" / ICAO {first_present(aircraft.icao, default=PLACEHOLDER)}"
            )

    lines.append(SEPARATOR)
    return lines


def render_airports(records: Sequence[AirportRecord]) -> list[str]:
    """Render airport records as report lines."""
    if not records:
        return [NO_RESULTS]

    lines: list[str] = []
    for airport in records:
        name = first_present(airport.airport_name, default="Unknown airport")
        iata = first_present(airport.iata_code, default=PLACEHOLDER)
        icao = first_present(airport.icao_code, default=PLACEHOLDER)
        city = airport.city_label
        country = airport.country_label

        lines.append(SEPARATOR)
        lines.append(f"{name} ({iata}/{icao})")
        if city or country:
            lines.append(", ".join(part for part in (city, country) if part))
        if airport.timezone_label:
            lines.append(f"TZ: {airport.timezone_label}")
        if airport.latitude is not None and airport.longitude is not None:
            lines.append(f"Coords: {airport.latitude}, {airport.longitude}")

    lines.append(SEPARATOR)
    return lines
