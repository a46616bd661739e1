"""Structured logging configuration with structlog.

Logs go to stderr so they never mix with signatures, extracted messages or
"Signature Verified" lines written to stdout. Every entry of one invocation
carries the same ``invocation_id``.

Usage:
    from pysignify.observability import configure_structlog

    configure_structlog(LoggingConfig.from_environment())

    import structlog
    log = structlog.get_logger(__name__)
    log.info("message_signed", sigfile="msg.sig")

Secret material (passphrases, keys, masks) MUST NOT be passed to a logger.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, cast
from uuid import uuid4

import structlog
from structlog.typing import Processor

from pysignify.config import LoggingConfig

_invocation_id: ContextVar[str] = ContextVar("invocation_id", default="")


def new_invocation_id() -> str:
    """Start a new invocation context and return its id."""
    invocation_id = str(uuid4())
    _invocation_id.set(invocation_id)
    return invocation_id


def get_invocation_id() -> str:
    """Return the current invocation id, or "" outside an invocation."""
    return _invocation_id.get()


def invocation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding invocation_id to every log entry.

    Args:
        logger: The wrapped logger (unused).
        method_name: The name of the log method called (unused).
        event_dict: The event dictionary being processed.

    Returns:
        The event dictionary with invocation_id added if set.
    """
    invocation_id = get_invocation_id()
    if invocation_id:
        event_dict["invocation_id"] = invocation_id
    return event_dict


def _get_log_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_structlog(config: LoggingConfig | None = None) -> None:
    """Configure structlog for a pysignify invocation.

    Args:
        config: Logging settings; read from the environment when omitted.

    Configuration:
        json:
            - JSON output for machine parsing
        console:
            - Plain console output without colors
        Both use ISO 8601 timestamps and write to stderr.
    """
    config = config or LoggingConfig.from_environment()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, invocation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.fmt == "json":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level(config.level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
