"""
Structured logging configuration using structlog.

Events are snake_case names with key-value context, e.g.
``logger.info("stock_movement_applied", item_id=3, delta=-2)``. Development
renders them for the console, staging and production emit one JSON object
per line.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from src.config.settings import get_settings

# Keys whose values never reach the log output
REDACTED_KEYS = frozenset({"authorization", "token", "access_token", "secret_key"})

# Libraries that log every statement or request at INFO
QUIET_LOGGERS = ("aiosqlite", "uvicorn.access", "httpx")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp every event with app name, version and environment."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def redact_credentials(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask bearer tokens and keys passed as event context."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def configure_logging(json_logs: bool | None = None) -> None:
    """
    Configure structlog and route stdlib logging through the same level.

    Args:
        json_logs: Force JSON (True) or console (False) output; by default
            JSON is used outside development.
    """
    settings = get_settings()
    if json_logs is None:
        json_logs = settings.environment != "development"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        redact_credentials,
    ]
    if json_logs:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
