"""Structured logging configuration using structlog.

Provides correlation IDs for tracing edits across an editor session and
configurable output formats (JSON for production, colored console for dev).
"""

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, cast

import structlog
from structlog.types import Processor

from mapfence.config import settings

# Context variables for correlation IDs
_session_id: ContextVar[str | None] = ContextVar("session_id", default=None)
_region_id: ContextVar[str | None] = ContextVar("region_id", default=None)
_draw_mode: ContextVar[str | None] = ContextVar("draw_mode", default=None)
_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "session_id": _session_id,
    "region_id": _region_id,
    "draw_mode": _draw_mode,
}


def set_correlation_context(
    session_id: str | None = None,
    region_id: str | None = None,
    draw_mode: str | None = None,
) -> None:
    """Set correlation IDs for the current context.

    Args:
        session_id: Identifier of the editor session.
        region_id: Region currently being edited.
        draw_mode: Active draw mode ("region" or "playing_area").
    """
    if session_id is not None:
        _session_id.set(session_id)
    if region_id is not None:
        _region_id.set(region_id)
    if draw_mode is not None:
        _draw_mode.set(draw_mode)


def clear_correlation_context(*names: str) -> None:
    """Clear correlation context variables.

    Args:
        *names: Variables to clear ("session_id", "region_id", "draw_mode").
            Clears all of them when omitted.
    """
    for name in names or tuple(_CONTEXT_VARS):
        _CONTEXT_VARS[name].set(None)


@contextmanager
def correlation_scope(
    region_id: str | None = None,
    draw_mode: str | None = None,
) -> Iterator[None]:
    """Bind correlation IDs for the duration of a block, then restore them."""
    tokens: list[tuple[ContextVar[str | None], Token[str | None]]] = []
    if region_id is not None:
        tokens.append((_region_id, _region_id.set(region_id)))
    if draw_mode is not None:
        tokens.append((_draw_mode, _draw_mode.set(draw_mode)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor to add correlation IDs to log events."""
    _ = logger, method_name  # Required by structlog processor signature
    session_id = _session_id.get()
    region_id = _region_id.get()
    draw_mode = _draw_mode.get()

    if session_id is not None:
        event_dict["session_id"] = session_id
    if region_id is not None:
        event_dict.setdefault("region_id", region_id)
    if draw_mode is not None:
        event_dict.setdefault("draw_mode", draw_mode)

    return event_dict


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the specified settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to match
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
