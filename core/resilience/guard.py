"""
Crewdesk Core Resilience: Exclusive Run Guard
===============================================
At most one run per key at a time within the process. A second
caller does not wait: it gets RunInProgress immediately, so an
overlapping scheduler tick cannot double-process the same items.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Set


class RunInProgress(Exception):
    """Another run holding the same key is still active."""

    code = "RUN_IN_PROGRESS"

    def __init__(self, key: str):
        self.key = key
        self.message = f"A '{key}' run is already in progress."
        super().__init__(self.message)


class ExclusiveRunGuard:
    def __init__(self) -> None:
        self._active: Set[str] = set()
        self._lock = threading.Lock()

    def is_running(self, key: str) -> bool:
        with self._lock:
            return key in self._active

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._lock:
            if key in self._active:
                raise RunInProgress(key)
            self._active.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(key)
