# cloud_console/api/routes/endpoints.py
"""
/api/endpoints

POST /api/endpoints/test is a simulation: no request leaves the process. The
response time comes from the app's EndpointSimulator and differs per call.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from cloud_console.api.deps import get_simulator, get_store
from cloud_console.core.errors import NotFoundError
from cloud_console.schemas.endpoints import (
    ApiEndpoint,
    ApiEndpointCreate,
    ApiEndpointUpdate,
    EndpointTestRequest,
    EndpointTestResult,
)
from cloud_console.services.simulator import EndpointSimulator
from cloud_console.services.store import ResourceStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/endpoints", response_model=List[ApiEndpoint])
async def list_endpoints(store: ResourceStore = Depends(get_store)):
    return store.list_endpoints()


@router.post("/endpoints", response_model=ApiEndpoint)
async def create_endpoint(payload: ApiEndpointCreate, store: ResourceStore = Depends(get_store)):
    return store.create_endpoint(payload.model_dump())


@router.put("/endpoints/{endpoint_id}", response_model=ApiEndpoint)
async def update_endpoint(
    endpoint_id: int,
    payload: ApiEndpointUpdate,
    store: ResourceStore = Depends(get_store),
):
    endpoint = store.update_endpoint(endpoint_id, payload.supplied_fields())
    if endpoint is None:
        raise NotFoundError("Endpoint not found")
    return endpoint


@router.post("/endpoints/test", response_model=EndpointTestResult)
async def test_endpoint(
    payload: EndpointTestRequest,
    store: ResourceStore = Depends(get_store),
    simulator: EndpointSimulator = Depends(get_simulator),
):
    """
    Simulate calling an endpoint.

    Example response:
      {"status": 200, "responseTime": 347, "response": {"success": true, "message": "API test successful"}}
    """
    result = simulator.run(payload)
    logger.info("Simulated %s %s in %dms", payload.method, payload.url, result.response_time)
    store.hooks.emit("endpoint.tested", method=payload.method, url=payload.url, result=result)
    return result
