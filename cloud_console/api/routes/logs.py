# cloud_console/api/routes/logs.py
"""
GET /api/logs

Browse console log entries.

Supported filters:
- service (exact match; "All Services" = no filter)
- level   (exact match; "All Levels" = no filter)
- limit   (hard cap, applied after filtering and newest-first sorting; 0 = no cap)

POST /api/logs lets callers append an entry directly; the timestamp is always
server time.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from cloud_console.api.deps import get_store
from cloud_console.schemas.logs import LogEntry, LogEntryCreate
from cloud_console.services.store import ResourceStore

router = APIRouter()


@router.get("/logs", response_model=List[LogEntry])
async def get_logs(
    service: Optional[str] = Query(default=None, description="Filter by service"),
    level: Optional[str] = Query(default=None, description="Filter by level"),
    limit: Optional[int] = Query(default=None, ge=0, description="Max results to return (0 = no limit)"),
    store: ResourceStore = Depends(get_store),
):
    """
    Example:
      /api/logs?service=IAM&level=INFO&limit=20
    """
    return store.list_log_entries(service=service, level=level, limit=limit)


@router.post("/logs", response_model=LogEntry)
async def create_log(payload: LogEntryCreate, store: ResourceStore = Depends(get_store)):
    return store.create_log_entry(payload.model_dump())
