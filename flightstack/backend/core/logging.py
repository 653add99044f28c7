"""
Logging Setup.

structlog on top of stdlib logging, configured from the validated
config/settings/logging.yaml. Console records go to stderr so the query
CLI's report on stdout stays clean; the optional file handler writes
JSON lines.

Every record carries a `source`: "cli" for the query CLI, "web" for relay
requests (bound per request by the middleware, together with request_id,
method and path) and "internal" for everything else.

Usage:
    setup_logging(level="DEBUG", format_type="console")
    bind_source("cli")
    logger = get_logger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from flightstack.backend.core.config import find_project_root, get_app_config

LOG_SOURCES = ("web", "cli", "internal")

# Chatty third-party loggers; upstream calls are logged by UpstreamClient
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None take their value from logging.yaml.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        format_type: 'json' or 'console' for the stderr handler.
        enable_console: Attach the stderr handler.
        enable_file_logging: Attach the rotating JSONL file handler.
    """
    config = get_app_config().logging
    level = level if level is not None else config.level
    format_type = format_type if format_type is not None else config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = config.handlers.file.enabled

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        if format_type == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), processors)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        file_config = config.handlers.file
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_source(source: str, **fields: Any) -> None:
    """
    Replace the logging context with `source` plus any extra fields.

    Raises:
        ValueError: If source is not one of LOG_SOURCES
    """
    if source not in LOG_SOURCES:
        raise ValueError(f"Unknown log source {source!r}; expected one of {LOG_SOURCES}")
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(source=source, **fields)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log one record with an explicit source, outside any bound context.

    Raises:
        AttributeError: If level is not a logger method name
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
