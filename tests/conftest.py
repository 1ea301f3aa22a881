"""
Shared fixtures: every test gets its own store and app (no shared state).
"""
import random
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from cloud_console.core.config import Settings
from cloud_console.main import create_app
from cloud_console.services.activity import install_activity_log
from cloud_console.services.simulator import EndpointSimulator
from cloud_console.services.store import ResourceStore


class TickingClock:
    """Deterministic clock: each call moves forward by `step`."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.now = self.now + self.step
        return self.now


def client_for(app, raise_app_exceptions=True):
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def bare_store(clock):
    """Store without activity hooks."""
    return ResourceStore(clock=clock)


@pytest.fixture
def store(bare_store):
    """Store wired like the running app (activity log hooks installed)."""
    install_activity_log(bare_store)
    return bare_store


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        ENV="test",
        LOG_LEVEL="WARNING",
        SEED_SAMPLE_DATA=False,
        ENDPOINT_TEST_SEED=1234,
    )


@pytest.fixture
def app(test_settings, store):
    return create_app(
        settings=test_settings,
        store=store,
        simulator=EndpointSimulator(rng=random.Random(1234)),
    )


@pytest.fixture
def sample_function_payload():
    return {
        "name": "thumbnail-generator",
        "runtime": "Python 3.11",
        "trigger": "Cloud Storage",
        "code": "def main(event, context): pass",
    }
