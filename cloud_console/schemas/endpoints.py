# cloud_console/schemas/endpoints.py
"""
Schemas for /api/endpoints, including the simulated endpoint test.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from cloud_console.schemas.common import ConsoleModel


class ApiEndpointCreate(ConsoleModel):
    """Body for POST /api/endpoints."""
    path: str = Field(..., min_length=1, description="Route path, e.g. /api/users")
    method: str = Field(..., min_length=1, description="HTTP verb")
    status: str = Field("Healthy", description="Caller-supplied health label")
    requests_per_min: int = Field(0, ge=0)
    avg_response_time: int = Field(0, ge=0, description="Average response time in milliseconds")


class ApiEndpointUpdate(ConsoleModel):
    path: Optional[str] = Field(None, min_length=1)
    method: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = None
    requests_per_min: Optional[int] = Field(None, ge=0)
    avg_response_time: Optional[int] = Field(None, ge=0)


class ApiEndpoint(ConsoleModel):
    id: int
    path: str
    method: str
    status: str
    requests_per_min: int = 0
    avg_response_time: int = 0


class EndpointTestRequest(ConsoleModel):
    """
    Body for POST /api/endpoints/test.

    `headers` and `body` are accepted as-is and never sent anywhere.
    """
    method: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    headers: Optional[Dict[str, Any]] = None
    body: Any = None


class EndpointTestResult(ConsoleModel):
    """
    Simulated test outcome.

    `response_time` is drawn from a random source on every call; callers must
    not expect it to repeat.
    """
    status: int = Field(..., description="Simulated HTTP status")
    response_time: int = Field(..., ge=0, description="Simulated latency in milliseconds")
    response: Dict[str, Any] = Field(default_factory=dict)
