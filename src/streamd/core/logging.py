"""
Structured logging for streamd.

Configuration resolution runs once at daemon startup, and its log lines
are usually the only record of *why* a daemon refused to start.  This
module configures structlog so those lines come out either as JSON (for
log aggregation) or as colored console output (for development).

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="streamd")
            │
            ▼
        structlog processor chain:
            1. merge_contextvars
            2. add_log_level
            3. TimeStamper (ISO)
            4. _add_service_metadata
            5. JSONRenderer  (or ConsoleRenderer when attached to a tty)

Examples:
    >>> from streamd.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="streamd")
    >>> logger = get_logger(__name__)
    >>> logger.info("configuration_resolved", retrieval_mode="fanout")

Tags:
    logging, structlog, observability, json-logging, streamd

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "streamd"


def _add_service_metadata(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "streamd",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the daemon.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
