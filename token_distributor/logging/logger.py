"""
structlog setup for the distributor process.

Every line carries timestamp, level, logger, service and event_type. Secret
fields (signing key, signed payload) are redacted before rendering so a stray
keyword argument can never leak them. LOG_FORMAT=json (default) renders one JSON
object per line; anything else uses the console renderer.

No token_distributor imports here: every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

SERVICE_NAME = "token_distributor"
REDACTED = "***"
SECRET_KEYS = frozenset({"private_key", "signed_payload", "raw_transaction"})


def _stamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """distribution_* events are keyed as event_type, mirrored into message."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def _redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _level_from_env() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def _format_from_env() -> str:
    return os.getenv("LOG_FORMAT", "json").strip().lower()


def configure_structlog(level: int | None = None, fmt: str | None = None) -> None:
    """(Re)configure structlog; level/fmt default to LOG_LEVEL / LOG_FORMAT."""
    level = _level_from_env() if level is None else level
    fmt = _format_from_env() if fmt is None else fmt
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _stamp,
            _event_type,
            _redact_secrets,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to the module name: get_logger(__name__).info("distribution_submitted", tx_hash=...)."""
    return structlog.get_logger(name).bind(logger=name)
