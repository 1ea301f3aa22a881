# cloud_console/api/routes/iam.py
"""
/api/iam

Identity records only: no route here (or anywhere) checks credentials or
roles. Emails are unique case-insensitively; service account names are unique
as typed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from cloud_console.api.deps import get_store
from cloud_console.core.errors import NotFoundError
from cloud_console.schemas.common import SuccessResponse
from cloud_console.schemas.iam import (
    IamUser,
    IamUserCreate,
    IamUserUpdate,
    ServiceAccount,
    ServiceAccountCreate,
    ServiceAccountUpdate,
)
from cloud_console.services.store import ResourceStore

router = APIRouter(prefix="/iam")


# -----------------------
# Users
# -----------------------
@router.get("/users", response_model=List[IamUser])
async def list_users(store: ResourceStore = Depends(get_store)):
    return store.list_iam_users()


@router.post("/users", response_model=IamUser)
async def create_user(payload: IamUserCreate, store: ResourceStore = Depends(get_store)):
    return store.create_iam_user(payload.model_dump())


@router.put("/users/{user_id}", response_model=IamUser)
async def update_user(user_id: int, payload: IamUserUpdate, store: ResourceStore = Depends(get_store)):
    user = store.update_iam_user(user_id, payload.supplied_fields())
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(user_id: int, store: ResourceStore = Depends(get_store)):
    if not store.delete_iam_user(user_id):
        raise NotFoundError("User not found")
    return SuccessResponse()


# -----------------------
# Service accounts
# -----------------------
@router.get("/service-accounts", response_model=List[ServiceAccount])
async def list_service_accounts(store: ResourceStore = Depends(get_store)):
    return store.list_service_accounts()


@router.post("/service-accounts", response_model=ServiceAccount)
async def create_service_account(payload: ServiceAccountCreate, store: ResourceStore = Depends(get_store)):
    return store.create_service_account(payload.model_dump())


@router.put("/service-accounts/{account_id}", response_model=ServiceAccount)
async def update_service_account(
    account_id: int,
    payload: ServiceAccountUpdate,
    store: ResourceStore = Depends(get_store),
):
    account = store.update_service_account(account_id, payload.supplied_fields())
    if account is None:
        raise NotFoundError("Service account not found")
    return account


@router.delete("/service-accounts/{account_id}", response_model=SuccessResponse)
async def delete_service_account(account_id: int, store: ResourceStore = Depends(get_store)):
    if not store.delete_service_account(account_id):
        raise NotFoundError("Service account not found")
    return SuccessResponse()


# -----------------------
# Security policies
# -----------------------
@router.post("/security-policies", response_model=SuccessResponse)
async def update_security_policies(
    policies: Optional[Dict[str, Any]] = Body(default=None),
    store: ResourceStore = Depends(get_store),
):
    # Nothing is enforced; the submitted settings are only acknowledged and logged.
    store.hooks.emit("security_policies.updated", policies=policies or {})
    return SuccessResponse()
