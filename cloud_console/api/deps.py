# cloud_console/api/deps.py
"""
FastAPI dependencies.

The store and simulator are built once per application by `create_app()` and
parked on `app.state`; handlers receive them through `Depends(...)` instead of
importing a module-level global, so every test can run against a fresh store.

Usage:
    @router.get(...)
    async def handler(store: ResourceStore = Depends(get_store)):
        ...
"""

from __future__ import annotations

from fastapi import Request

from cloud_console.core.config import Settings
from cloud_console.services.simulator import EndpointSimulator
from cloud_console.services.store import ResourceStore


def get_store(request: Request) -> ResourceStore:
    return request.app.state.store


def get_simulator(request: Request) -> EndpointSimulator:
    return request.app.state.simulator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
