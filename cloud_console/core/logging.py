# cloud_console/core/logging.py
"""
Process logging for the API.

These lines go to stdout for whoever runs the server. They are not the
console's "Logging" section: those entries are data (LogEntry records held
by the store) and are written by services/activity.py.

Every line carries the id of the HTTP request that produced it ("-" outside
a request). The request middleware in main.py binds the id.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def bind_request_id(request_id: str) -> Token:
    """Set the request id for the current task; pass the token to `reset_request_id`."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Adds `record.request_id` so the format string can always reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stdout handler on the root logger.

    Unknown level names fall back to INFO. Calling this again (each
    create_app() does) replaces the handler instead of stacking a second one.
    """
    root = logging.getLogger()
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestIdFilter())

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
