# cloud_console/services/hooks.py
"""
Post-commit hooks.

Side effects that piggyback on a mutation (today: writing a console LogEntry)
are registered here instead of being called inline from every route. A hook
runs after the mutation is committed, and a failing hook is logged and
dropped: it can never turn a successful response into an error.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

Hook = Callable[..., Any]


class HookRegistry:
    """Maps event names (e.g. "document.created") to ordered hook lists."""

    def __init__(self) -> None:
        self._hooks: DefaultDict[str, List[Hook]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event: str, hook: Hook) -> None:
        with self._lock:
            self._hooks[event].append(hook)

    def hooks_for(self, event: str) -> List[Hook]:
        with self._lock:
            return list(self._hooks.get(event, ()))

    def emit(self, event: str, **payload: Any) -> int:
        """
        Run every hook subscribed to `event`.

        Returns the number of hooks that failed (mostly useful to tests).
        """
        failures = 0
        for hook in self.hooks_for(event):
            try:
                hook(**payload)
            except Exception:
                failures += 1
                logger.exception("Post-commit hook failed for event=%s hook=%r", event, hook)
        return failures
