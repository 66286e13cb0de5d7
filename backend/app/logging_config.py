"""Structured logging configuration using structlog.

Routers log event-style with keyword context; engines and services use
plain ``logging.getLogger(__name__)`` with %-style messages.  Both end up
in the same handler and renderer: JSON for log aggregation in
production, colored console output in development.

Usage::

    from app.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("activity_submitted", activity_id=12, status="verified")
    # {"event": "activity_submitted", "activity_id": 12, "status": "verified", ...}
"""

import logging
import sys
from typing import Any

import structlog

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call repeatedly; the root handler is replaced, not stacked.

    Args:
        json_logs: If True, output JSON format. If False, use human-readable format.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    level = getattr(logging, log_level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=_SHARED_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Stdlib records (engines, services, uvicorn) get the same pre-chain
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def bind_context(**values: Any) -> None:
    """Attach key/values to every log line emitted in the current context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the module.

    Returns:
        Structured logger instance with bound context.
    """
    return structlog.get_logger(name)
