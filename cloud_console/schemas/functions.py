# cloud_console/schemas/functions.py
"""
Schemas for /api/functions.

A "deploy" is just a create: nothing is executed, the record only remembers the
code it was given.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from cloud_console.schemas.common import ConsoleModel


class CloudFunctionCreate(ConsoleModel):
    """Body for POST /api/functions."""
    name: str = Field(..., min_length=1, description="Function name (unique)")
    runtime: str = Field(..., min_length=1, description="Runtime label, e.g. 'Python 3.9'")
    trigger: str = Field(..., min_length=1, description="Trigger label, e.g. 'HTTP'")
    code: str = Field(..., description="Source code as submitted")


class CloudFunctionUpdate(ConsoleModel):
    """Body for PUT /api/functions/{id}; only supplied fields are merged."""
    name: Optional[str] = Field(None, min_length=1)
    runtime: Optional[str] = Field(None, min_length=1)
    trigger: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = None


class CloudFunction(ConsoleModel):
    """A deployed (simulated) cloud function."""
    id: int
    name: str
    runtime: str
    trigger: str
    code: str
    status: str = Field("Active", description="Fixed to 'Active' at creation")
    deployed: datetime = Field(..., description="Server time of the deploy")
