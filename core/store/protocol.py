"""
Crewdesk Core Store: Store Port
=================================
The rules engine never talks to a database directly. It consumes
this protocol; records are JSON-shaped dicts keyed by entity name.

Optimistic concurrency: `update(..., expected={...})` applies the
patch only if every expected field still holds its expected value,
otherwise ConcurrencyConflict is raised. Implementations bump the
record's `version` on every successful update.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol


TASKS = "tasks"
USERS = "users"
DEPARTMENTS = "departments"
REMINDERS = "reminders"

ENTITY_TYPES = frozenset({TASKS, USERS, DEPARTMENTS, REMINDERS})

Predicate = Callable[[Mapping[str, Any]], bool]


class Store(Protocol):
    """Keyed entity storage."""

    def get(self, entity: str, record_id: str) -> dict:
        """Fetch a record by id. Raises NotFound."""
        ...  # pragma: no cover

    def filter(self, entity: str, predicate: Predicate) -> list[dict]:
        """Return all records of `entity` matching `predicate`."""
        ...  # pragma: no cover

    def insert(self, entity: str, record: Mapping[str, Any]) -> dict:
        """Insert a record, returning the stored copy (with id and version)."""
        ...  # pragma: no cover

    def update(
        self,
        entity: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> dict:
        """
        Merge `patch` into a record, returning the stored copy.

        Raises NotFound, or ConcurrencyConflict when `expected` does not match.
        """
        ...  # pragma: no cover
