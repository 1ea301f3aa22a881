# cloud_console/schemas/logs.py
"""
Schemas for /api/logs.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from cloud_console.schemas.common import ConsoleModel

ALL_SERVICES = "All Services"
ALL_LEVELS = "All Levels"


class LogLevel(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


class LogEntryCreate(ConsoleModel):
    """Body for POST /api/logs. The timestamp is always assigned by the server."""
    service: str = Field(..., min_length=1, description="Service name, e.g. 'Cloud Functions'")
    level: LogLevel = Field(..., description="ERROR | WARNING | INFO | DEBUG")
    message: str = Field(..., min_length=1)


class LogEntry(ConsoleModel):
    """A single console log line."""
    id: int
    service: str
    level: LogLevel
    message: str
    timestamp: datetime = Field(..., description="Server creation time")
