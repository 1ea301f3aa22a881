# cloud_console/services/simulator.py
"""
Endpoint test simulation.

POST /api/endpoints/test never performs a network call. The result is
synthesized: status 200 and a response time drawn uniformly from
[min_ms, max_ms). The random source is injected so tests can pass a seeded
`random.Random`; with the default source, response times are not reproducible.
"""

from __future__ import annotations

import random
from typing import Optional

from cloud_console.schemas.endpoints import EndpointTestRequest, EndpointTestResult


class EndpointSimulator:
    def __init__(self, rng: Optional[random.Random] = None, min_ms: int = 100, max_ms: int = 600) -> None:
        if min_ms >= max_ms:
            raise ValueError("min_ms must be lower than max_ms")
        self._rng = rng or random.Random()
        self.min_ms = min_ms
        self.max_ms = max_ms

    def run(self, request: EndpointTestRequest) -> EndpointTestResult:
        return EndpointTestResult(
            status=200,
            response_time=self._rng.randrange(self.min_ms, self.max_ms),
            response={"success": True, "message": "API test successful"},
        )
