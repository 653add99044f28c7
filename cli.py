#!/usr/bin/env python3
"""
Flight Query CLI.

Runs one Aviationstack query, prints a text report and exits.

Usage:
    python cli.py flight BA283
    python cli.py arrivals LHR
    python cli.py departures JFK
    python cli.py airport EGLL
    python cli.py airport "san francisco"
    python cli.py --debug flight BA283

Exit codes:
    0  report or usage printed
    1  missing AVIATIONSTACK_API_KEY, or the query failed
"""

import asyncio
import sys
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from flightstack.backend.core.config import validate_project_root
from flightstack.backend.core.exceptions import ConfigurationError
from flightstack.backend.core.logging import bind_source, get_logger, setup_logging
from flightstack.cli.dispatcher import USAGE, build_cli_client, resolve_query, run_query


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", required=False)
@click.argument("argument", nargs=-1)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
def main(command: str | None, argument: tuple[str, ...], verbose: bool, debug: bool) -> None:
    """
    Query flights, arrivals, departures or airports on Aviationstack.

    \b
    Examples:
        python cli.py flight BA283
        python cli.py arrivals LHR
        python cli.py departures LHR
        python cli.py airport LHR
        python cli.py airport EGLL
        python cli.py airport heathrow
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    bind_source("cli")

    logger = get_logger(__name__)

    try:
        client = build_cli_client()
    except ConfigurationError as e:
        click.echo(e.message, err=True)
        sys.exit(1)

    query = resolve_query(command, " ".join(argument))
    if query is None:
        click.echo(USAGE)
        return

    logger.debug("CLI query", extra={"command": query.command, "endpoint": query.endpoint})

    try:
        lines = asyncio.run(run_query(client, query))
    except Exception as e:
        logger.debug("CLI query failed", extra={"error_type": type(e).__name__})
        click.echo(str(e), err=True)
        sys.exit(1)

    for line in lines:
        click.echo(line)


if __name__ == "__main__":
    main()
