"""
Logging setup — structlog configuration for applications using deferred-railway.

The package itself only emits events through structlog.get_logger(); it never
configures logging on import. Applications call configure_structlog() once at
startup, or configure_from_settings() to take the values from RailwaySettings.
"""

from __future__ import annotations

import logging

import structlog

from deferred_railway.config import RailwaySettings, get_settings


def configure_structlog(log_level: str = "INFO", json: bool = False) -> None:
    """
    Configure structlog for structured logging.

    In production: JSON lines to stdout (machine-readable).
    In development: colored, human-readable console output.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: RailwaySettings | None = None) -> None:
    """Configure structlog from RailwaySettings (the cached instance by default)."""
    settings = settings or get_settings()
    configure_structlog(settings.log_level, json=settings.json_logs)
