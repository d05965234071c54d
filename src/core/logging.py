"""Observability setup backed by Pydantic Logfire.

Modules log through the standard library (`logging.getLogger(__name__)`) and
attach context with `extra={...}`. Once `configure_logfire()` has run, those
records are forwarded to Logfire alongside the request and service spans.
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Configure Logfire and route standard logging records through it.

    Without LOGFIRE_TOKEN nothing is exported, but spans and logs still reach
    the local console.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name="smart-pantry",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(handlers=[logfire.LogfireLoggingHandler()], level=logging.INFO)
    logger.info("Logfire configured", extra={"environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by the app."""
    logfire.instrument_fastapi(app)


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Open a Logfire span around a service operation.

    Usage:
        with span("pantry_service.add_item", item_name="milk"):
            ...
    """
    return logfire.span(name, **attributes)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: object) -> None:
    """Log at the named level with context fields passed as `extra`."""
    getattr(logger, level.lower())(message, extra=context)
