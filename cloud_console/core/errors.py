# cloud_console/core/errors.py
"""
Error taxonomy and the JSON error envelope.

- ValidationError -> 400 (missing/malformed fields, duplicates, unknown parent)
- NotFoundError   -> 404 (unknown identifier on get/update/delete)

Codes are machine-stable; messages are short and safe to show to callers.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ConsoleError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(ConsoleError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(ConsoleError):
    status_code = 404
    code = "NOT_FOUND"


def ok(data: Any = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"success": True, "data": data, "error": None, "meta": meta or {}}


def fail(
    code: str,
    message: str,
    details: Optional[Any] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "success": False,
        "data": None,
        "error": {"code": code, "message": message, "details": details},
        "meta": meta or {},
    }
