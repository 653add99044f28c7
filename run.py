#!/usr/bin/env python3
"""
Proxy Relay Entry Script.

Starts the relay server (default) or prints the loaded configuration.

Usage:
    python run.py --help
    python run.py --verbose
    python run.py --port 8080 --reload
    python run.py --action config
"""

import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from flightstack.backend.core.config import validate_project_root
from flightstack.backend.core.exceptions import ConfigurationError
from flightstack.backend.core.logging import get_logger, setup_logging


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "config"]),
    default="server",
    help="Action to perform.",
)
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
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action). Falls back to PORT, then application.yaml.",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    Flight Proxy Relay.

    Serves /api/flights and /api/airports backed by Aviationstack, plus
    the static files in public/.

    Examples:

        # Start the relay on the configured port (3000)
        python run.py --verbose

        # Development mode on another port
        python run.py --port 8080 --reload --debug

        # View loaded configuration
        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "config":
        show_config(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Check the relay credential, then start uvicorn."""
    from flightstack.backend.core.config import (
        get_app_config,
        get_server_port,
        require_server_api_key,
    )

    try:
        require_server_api_key()
    except ConfigurationError as e:
        click.echo(e.message, err=True)
        sys.exit(1)

    server_host = host or get_app_config().application.server.host
    server_port = get_server_port(port)

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "flightstack.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Server running: http://localhost:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are reported as set/unset only."""
    from flightstack.backend.core.config import get_app_config, get_settings

    click.echo("Application Configuration:\n")

    try:
        app_config = get_app_config()
        settings = get_settings()
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    sections = {
        "Application Settings (from YAML)": app_config.application.model_dump(),
        "Logging Settings (from YAML)": app_config.logging.model_dump(),
    }
    for title, values in sections.items():
        click.echo(f"{title}:")
        click.echo("-" * 40)
        for key, value in values.items():
            if isinstance(value, dict):
                click.echo(f"  {key}:")
                for k, v in value.items():
                    click.echo(f"    {k}: {v}")
            else:
                click.echo(f"  {key}: {value}")
        click.echo("")

    click.echo("Environment (from config/.env):")
    click.echo("-" * 40)
    click.echo(f"  AVIATIONSTACK_API_KEY: {'set' if settings.aviationstack_api_key else 'unset'}")
    click.echo(f"  API_KEY: {'set' if settings.api_key else 'unset'}")
    click.echo(f"  USE_HTTPS: {settings.use_https}")
    click.echo(f"  PORT: {settings.port if settings.port is not None else 'unset'}")

    logger.info("Configuration displayed successfully")


if __name__ == "__main__":
    main()
