# cloud_console/schemas/iam.py
"""
Schemas for /api/iam (users, service accounts, security policies).

Roles are plain labels; nothing checks them.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from cloud_console.schemas.common import ConsoleModel


def _dedupe_roles(roles: List[str]) -> List[str]:
    seen: List[str] = []
    for role in roles:
        r = role.strip()
        if r and r not in seen:
            seen.append(r)
    return seen


class IamUserCreate(ConsoleModel):
    email: str = Field(..., min_length=3, description="User email (unique, case-insensitive)")
    role: str = Field(..., min_length=1, description="Role label, e.g. 'Owner'")

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class IamUserUpdate(ConsoleModel):
    email: Optional[str] = Field(None, min_length=3)
    role: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = Field(None, min_length=1)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "@" not in v:
            raise ValueError("email must contain '@'")
        return v.strip() if v is not None else v


class IamUser(ConsoleModel):
    id: int
    email: str
    role: str
    status: str = "Active"
    created_at: datetime


class ServiceAccountCreate(ConsoleModel):
    name: str = Field(..., min_length=1, description="Account name (unique)")
    email: str = Field(..., min_length=3, description="Account email (unique, case-insensitive)")
    roles: List[str] = Field(..., description="Granted role labels")

    @field_validator("roles")
    @classmethod
    def _normalize_roles(cls, v: List[str]) -> List[str]:
        return _dedupe_roles(v)


class ServiceAccountUpdate(ConsoleModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    roles: Optional[List[str]] = None

    @field_validator("roles")
    @classmethod
    def _normalize_roles(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _dedupe_roles(v) if v is not None else v


class ServiceAccount(ConsoleModel):
    id: int
    name: str
    email: str
    roles: List[str] = Field(default_factory=list)
    created_at: datetime
