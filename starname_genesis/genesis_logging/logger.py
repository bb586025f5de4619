"""
Structured logging for migration runs.

Every record is one JSON object on stderr carrying event_type, level, logger,
timestamp and whatever context the caller bound (stage, addresses, amounts).
stdout is left to the tools (the holdings report writes its CSV there).

LOG_LEVEL and LOG_FORMAT (json | console) set the defaults; CLIs may call
configure_structlog() again with --log-level. No starname_genesis imports
here, the rest of the package imports this module first.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import PurePath
from typing import Any

import structlog

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "json"


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _plain_values(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Paths and Decimal amounts are logged as their exact string form."""
    for key, value in event_dict.items():
        if isinstance(value, (PurePath, Decimal)):
            event_dict[key] = str(value)
    return event_dict


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).strip().upper()
    return getattr(logging, name, logging.INFO)


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """(Re)configure structlog. Arguments override LOG_LEVEL / LOG_FORMAT."""
    fmt = (fmt or os.getenv("LOG_FORMAT") or DEFAULT_FORMAT).strip().lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _add_timestamp,
        _event_type,
        _plain_values,
    ]
    if fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type"))
    else:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # module-level loggers must pick up a later --log-level
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("escrow_consolidated", source=source, escrows=3)

    emits {"event_type": "escrow_consolidated", "escrows": 3, "level": "info",
    "logger": "...", "source": "...", "timestamp": "..."}.
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_stage(stage: str, **context: Any) -> structlog.BoundLogger:
    """Logger for one pipeline stage; stage and context go on every record."""
    return get_logger("starname_genesis.pipeline").bind(stage=stage, **context)
