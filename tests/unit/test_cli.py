"""
Unit Tests for the cli.py Entry Script.

Runs the click command end to end against the recording upstream.
"""

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from cli import main
from flightstack.backend.core import config as config_module
from flightstack.backend.core.config import Settings
from flightstack.cli.dispatcher import USAGE
from flightstack.cli.formatting import SEPARATOR


@pytest.fixture
def runner() -> CliRunner:
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, fake_upstream):
    """Invoke the CLI with the upstream client replaced by the fake."""

    def _invoke(*args: str):
        with patch("cli.setup_logging"), \
             patch("cli.build_cli_client", return_value=fake_upstream.client(source="cli")):
            return runner.invoke(main, list(args))

    return _invoke


class TestProjectRoot:
    """The project root is located from the working directory."""

    def test_runs_from_a_subdirectory(self, invoke, fake_upstream, monkeypatch):
        monkeypatch.chdir(Path(__file__).parent)

        result = invoke("flight", "BA283")

        assert result.exit_code == 0
        assert fake_upstream.last.url.params["flight_iata"] == "BA283"

    def test_exits_outside_the_project(self, invoke, fake_upstream, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = invoke("flight", "BA283")

        assert result.exit_code == 1
        assert "Project root not found" in result.output
        assert fake_upstream.requests == []


class TestUsage:
    """Unrecognised command lines print usage and exit 0."""

    @pytest.mark.parametrize("args", [[], ["flight"], ["status", "BA283"], ["airport", ""]])
    def test_prints_usage(self, invoke, fake_upstream, args):
        result = invoke(*args)

        assert result.exit_code == 0
        assert result.stdout == USAGE + "\n"
        assert fake_upstream.requests == []


class TestMissingKey:
    """The CLI refuses to start without AVIATIONSTACK_API_KEY."""

    @pytest.fixture(autouse=True)
    def _no_key(self, monkeypatch):
        monkeypatch.delenv("AVIATIONSTACK_API_KEY")
        monkeypatch.setattr(config_module, "get_settings", lambda: Settings(_env_file=None))
        monkeypatch.setattr("cli.setup_logging", lambda **kwargs: None)

    def test_exits_with_message(self, runner):
        result = runner.invoke(main, ["flight", "BA283"])

        assert result.exit_code == 1
        assert "Cannot find AVIATIONSTACK_API_KEY" in result.output

    def test_checked_before_usage(self, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 1
        assert "Usage:" not in result.output


class TestQueries:
    """Successful queries print the rendered report."""

    def test_flight_report(self, invoke, fake_upstream, flight_record):
        fake_upstream.respond_json({"data": [flight_record]})

        result = invoke("flight", "BA283")

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == SEPARATOR
        assert lines[1] == "BA283 • British Airways • status: active"
        assert lines[2].startswith("From: Heathrow  ")
        assert lines[3].startswith("To:   Los Angeles International  ")
        assert lines[4].startswith("Aircraft: reg G-XWBA")
        assert lines[5] == SEPARATOR
        assert len(lines) == 6
        assert fake_upstream.last.url.params["flight_iata"] == "BA283"

    def test_no_results(self, invoke, fake_upstream):
        fake_upstream.respond_json({"data": []})

        result = invoke("arrivals", "LHR")

        assert result.exit_code == 0
        assert result.stdout == "No results.\n"

    def test_unexpected_field_types_do_not_abort(self, invoke, fake_upstream, flight_record):
        record = dict(flight_record, departure=dict(flight_record["departure"], gate=True))
        fake_upstream.respond_json({"data": [record]})

        result = invoke("flight", "BA283")

        assert result.exit_code == 0
        assert " Gtrue  " in result.stdout.splitlines()[2]

    def test_unquoted_airport_search(self, invoke, fake_upstream):
        result = invoke("airport", "new", "york")

        assert result.exit_code == 0
        assert fake_upstream.last.url.params["search"] == "new york"

    def test_airport_icao(self, invoke, fake_upstream, airport_record):
        fake_upstream.respond_json({"data": [airport_record]})

        result = invoke("airport", "egll")

        assert result.exit_code == 0
        assert fake_upstream.last.url.params["icao_code"] == "EGLL"
        assert "Heathrow (LHR/EGLL)" in result.stdout


class TestFailures:
    """Any failure during the query prints its message and exits 1."""

    def test_upstream_error_status(self, invoke, fake_upstream):
        fake_upstream.respond_text('{"error":"invalid_access_key"}', 401)

        result = invoke("departures", "LHR")

        assert result.exit_code == 1
        assert 'Aviationstack flights endpoint error 401: {"error":"invalid_access_key"}' in result.output

    def test_transport_error(self, invoke, fake_upstream):
        fake_upstream.fail_with(lambda request: httpx.ConnectError("connection refused", request=request))

        result = invoke("flight", "BA283")

        assert result.exit_code == 1
        assert "connection refused" in result.output
