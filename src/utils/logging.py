# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""structlog setup for the admin console.

Development and debug runs render colored key/value lines. Every other
environment renders one JSON object per line. Context bound with
``bind_context`` (an edit session binds ``institution_id``) is merged into
every event logged from the same context until it is reset.

Example:
    >>> setup_logging(get_settings())
    >>> tokens = bind_context(institution_id="inst-1")
    >>> get_logger(__name__).info("Classroom deleted", classroom_id="c-1")
    >>> reset_context(tokens)
"""

import logging
import sys
from collections.abc import Mapping
from contextvars import Token
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from src.core.config.settings import Settings

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

ContextTokens = Mapping[str, Token[Any]]


def _drop_empty_values(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Remove keys whose value is None so optional ids don't clutter events."""
    return {key: value for key, value in event_dict.items() if value is not None}


def _event_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        _drop_empty_values,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderers(settings: "Settings") -> list[Processor]:
    if settings.is_development or settings.debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Application settings. ``log_level`` sets the threshold,
            ``environment`` and ``debug`` pick the renderer.
    """
    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    # add_logger_name reads the name from a stdlib logger
    structlog.configure(
        processors=[*_event_processors(), *_renderers(settings)],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("src").setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**values: Any) -> ContextTokens:
    """Bind values to every event logged from the current context.

    Returns:
        Tokens that ``reset_context`` uses to restore the previous values.
    """
    return structlog.contextvars.bind_contextvars(**values)


def reset_context(tokens: ContextTokens) -> None:
    """Restore the context variables bound by a ``bind_context`` call."""
    structlog.contextvars.reset_contextvars(**tokens)
