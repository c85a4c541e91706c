"""Structured logging for the Marquee service.

Core modules log through structlog with snake_case event names grouped by
the part of the app that emits them:

- ``banner_*``: the home banner rotator (activation, ticks, presses).
- ``store_*``: the document store gateway; ``store_operation_failed`` carries
  the error kind, operation and collection of every failed call.
- ``library_*``: favorites and watchlist changes, plus skipped malformed
  records.
- ``catalog_*`` and ``health_*``: TMDB requests and readiness checks.

Library write routes bind ``user_id`` and ``list_name`` as context variables, so
every event raised while serving a request carries them. The Firestore and
TMDB adapters log through the stdlib ``logging`` module; their records pass
through the same root handler. Credentials that end up in event fields (the
TMDB bearer token, mostly) are masked before rendering.

Usage:
    from src.core.logging import configure_logging, get_logger

    configure_logging()  # reads ENVIRONMENT and LOG_LEVEL

    logger = get_logger(__name__)
    logger.info("banner_loaded", kind="movie", slides=10)
"""

import logging
import sys
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Firestore (google, grpc) and TMDB (aiohttp) clients are chatty at INFO
QUIET_LOGGERS = ("google", "grpc", "aiohttp", "httpx", "httpcore", "urllib3")

# Event fields whose values never reach the output
REDACTED_FIELDS = frozenset({"authorization", "access_token", "api_key", "token", "headers"})
REDACTED = "***"


def redact_credentials(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Mask credential fields, e.g. ``logger.debug("catalog_request", headers=...)``."""
    for key in event_dict.keys() & REDACTED_FIELDS:
        event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger for the API process.

    Called once by ``api_main`` before uvicorn starts. Existing root handlers
    are replaced so core and adapter events share one stream.

    Args:
        development: Colored console output when True, one JSON object per
            line when False. None reads ENVIRONMENT (anything but
            "production" is development).
        log_level: DEBUG, INFO, WARNING or ERROR. None reads LOG_LEVEL
            (default INFO). Banner timer ticks only show at DEBUG.
    """
    if development is None:
        development = getenv("ENVIRONMENT", "development").lower() != "production"

    if log_level is None:
        log_level = getenv("LOG_LEVEL", "INFO")
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if development:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True replaces handlers installed by uvicorn or an earlier call
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically with ``__name__``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Bind request-scoped values (user_id, list_name) to every later log call."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Drop all bound context; library routes call this when a request ends."""
    structlog.contextvars.clear_contextvars()


def unbind_contextvars(*keys: str) -> None:
    """Remove specific context variables.

    Args:
        *keys: Names of context variables to remove.
    """
    structlog.contextvars.unbind_contextvars(*keys)
