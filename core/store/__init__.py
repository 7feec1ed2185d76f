"""
Crewdesk Core Store: Public API
=================================
Keyed entity storage port consumed by the rules engine.
"""

from core.store.errors import (
    ConcurrencyConflict,
    InactiveUser,
    NotFound,
    StoreError,
)
from core.store.memory import InMemoryStore
from core.store.protocol import (
    DEPARTMENTS,
    ENTITY_TYPES,
    REMINDERS,
    TASKS,
    USERS,
    Predicate,
    Store,
)

__all__ = [
    # ── Errors ────────────────────────────────────────────────
    "StoreError",
    "NotFound",
    "InactiveUser",
    "ConcurrencyConflict",
    # ── Port ──────────────────────────────────────────────────
    "Store",
    "Predicate",
    "TASKS",
    "USERS",
    "DEPARTMENTS",
    "REMINDERS",
    "ENTITY_TYPES",
    # ── Implementations ───────────────────────────────────────
    "InMemoryStore",
]
