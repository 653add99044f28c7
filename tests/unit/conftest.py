"""
Unit Test Fixtures.

Fixtures for unit tests - upstream is always the recording fake.
"""

from typing import Any

import pytest


@pytest.fixture
def flight_record() -> dict[str, Any]:
    """A fully populated upstream flight record."""
    return {
        "flight": {"iata": "BA283", "number": "283"},
        "airline": {"name": "British Airways", "iata": "BA"},
        "status": "active",
        "departure": {
            "airport": "Heathrow",
            "iata": "LHR",
            "scheduled": "2024-05-01T10:00:00+00:00",
            "estimated": "2024-05-01T10:05:00+00:00",
            "terminal": "5",
            "gate": "B32",
            "delay": 5,
        },
        "arrival": {
            "airport": "Los Angeles International",
            "iata": "LAX",
            "scheduled": "2024-05-01T13:20:00+00:00",
            "terminal": "B",
            "gate": "150",
        },
        "aircraft": {"registration": "G-XWBA", "iata": "A35K", "icao": "A35K"},
    }


@pytest.fixture
def airport_record() -> dict[str, Any]:
    """A fully populated upstream airport record."""
    return {
        "airport_name": "Heathrow",
        "iata_code": "LHR",
        "icao_code": "EGLL",
        "city_iata_code": "LON",
        "country_name": "United Kingdom",
        "country_iso2": "GB",
        "timezone": "Europe/London",
        "gmt": "0",
        "latitude": "51.4775",
        "longitude": "-0.461389",
    }
