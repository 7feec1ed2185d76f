"""
Crewdesk Core Store: Errors
=============================
Error types raised by Store implementations and by components
that read through a Store.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class StoreError(Exception):
    """Underlying persistence failure."""

    code = "STORE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(StoreError):
    """Requested entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, record_id: Any, message: Optional[str] = None):
        self.entity = entity
        self.record_id = record_id
        super().__init__(message or f"{entity} '{record_id}' not found.")


class InactiveUser(NotFound):
    """User exists but is not active; treated as not found for assignment."""

    def __init__(self, user_id: Any):
        super().__init__("users", user_id, f"User '{user_id}' not found or inactive.")


class ConcurrencyConflict(StoreError):
    """Compare-and-swap precondition on an update did not hold."""

    code = "CONCURRENCY_CONFLICT"

    def __init__(self, entity: str, record_id: Any, expected: Mapping[str, Any]):
        self.entity = entity
        self.record_id = record_id
        self.expected = dict(expected)
        fields = ", ".join(sorted(self.expected))
        super().__init__(
            f"{entity} '{record_id}' changed concurrently (expected {fields})."
        )
