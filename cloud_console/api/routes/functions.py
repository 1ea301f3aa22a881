# cloud_console/api/routes/functions.py
"""
/api/functions

"Deploying" a function stores it with status Active; nothing runs. Deploy,
update and delete each leave a line in the console log (via store hooks).
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from cloud_console.api.deps import get_store
from cloud_console.core.errors import NotFoundError
from cloud_console.schemas.common import SuccessResponse
from cloud_console.schemas.functions import CloudFunction, CloudFunctionCreate, CloudFunctionUpdate
from cloud_console.services.store import ResourceStore

router = APIRouter()


@router.get("/functions", response_model=List[CloudFunction])
async def list_functions(store: ResourceStore = Depends(get_store)):
    return store.list_functions()


@router.get("/functions/{function_id}", response_model=CloudFunction)
async def get_function(function_id: int, store: ResourceStore = Depends(get_store)):
    func = store.get_function(function_id)
    if func is None:
        raise NotFoundError("Function not found")
    return func


@router.post("/functions", response_model=CloudFunction)
async def deploy_function(payload: CloudFunctionCreate, store: ResourceStore = Depends(get_store)):
    return store.create_function(payload.model_dump())


@router.put("/functions/{function_id}", response_model=CloudFunction)
async def update_function(
    function_id: int,
    payload: CloudFunctionUpdate,
    store: ResourceStore = Depends(get_store),
):
    func = store.update_function(function_id, payload.supplied_fields())
    if func is None:
        raise NotFoundError("Function not found")
    return func


@router.delete("/functions/{function_id}", response_model=SuccessResponse)
async def delete_function(function_id: int, store: ResourceStore = Depends(get_store)):
    if not store.delete_function(function_id):
        raise NotFoundError("Function not found")
    return SuccessResponse()
