"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Process environment variables take precedence over config/.env.

Secrets (.env):
    AVIATIONSTACK_API_KEY  - key used by the query CLI
    API_KEY                - key injected by the proxy relay
    USE_HTTPS              - relay talks to upstream over https when true
    PORT                   - relay port override

Settings (YAML):
    application.yaml   - App identity, server, cors, timeouts, upstream, static
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from flightstack.backend.core.config_schema import ApplicationSchema, LoggingSchema
from flightstack.backend.core.exceptions import ConfigurationError


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets and environment switches loaded from config/.env."""

    aviationstack_api_key: str | None = None
    api_key: str | None = None
    use_https: bool = False
    port: int | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def require_cli_api_key() -> str:
    """Return the query CLI key or raise ConfigurationError."""
    key = get_settings().aviationstack_api_key
    if not key:
        raise ConfigurationError("Cannot find AVIATIONSTACK_API_KEY")
    return key


def require_server_api_key() -> str:
    """Return the relay key or raise ConfigurationError."""
    key = get_settings().api_key
    if not key:
        raise ConfigurationError("Missing API_KEY in .env")
    return key


def get_upstream_base_url(use_https: bool = True) -> str:
    """
    Construct the Aviationstack base URL from application.yaml.

    Args:
        use_https: Use the https scheme if True, plain http if False.

    Returns:
        Base URL without trailing slash, e.g. https://api.aviationstack.com/v1
    """
    upstream = get_app_config().application.upstream
    scheme = "https" if use_https else "http"
    return f"{scheme}://{upstream.host}{upstream.path}".rstrip("/")


def get_server_port(port: int | None = None) -> int:
    """Resolve the relay port: explicit argument, then PORT, then application.yaml."""
    if port is not None:
        return port
    env_port = get_settings().port
    if env_port is not None:
        return env_port
    return get_app_config().application.server.port


def get_static_directory() -> Path:
    """Absolute path of the static asset directory served by the relay."""
    directory = Path(get_app_config().application.static.directory)
    if directory.is_absolute():
        return directory
    return find_project_root() / directory
