"""Structured logging configuration using structlog.

The HTTP service logs JSON lines; the CLI logs human-readable key/value
lines so they stay legible next to rendered tables.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def setup_logging(level: str = "info", json_output: bool = True) -> None:
    """Configure structlog for output to stderr."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


@contextmanager
def analysis_context(analysis_id: str) -> Iterator[None]:
    """Bind ``analysis_id`` to every log line emitted inside the block."""
    structlog.contextvars.bind_contextvars(analysis_id=analysis_id)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars("analysis_id")
