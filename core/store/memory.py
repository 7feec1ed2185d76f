"""
Crewdesk Core Store: In-Memory Store
======================================
Thread-safe dict-backed Store used by tests and by the development
adapter wiring. The compare-and-swap check and the write happen
under the same lock.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from typing import Any, Dict, Mapping, Optional

from core.store.errors import ConcurrencyConflict, NotFound, StoreError
from core.store.protocol import ENTITY_TYPES, Predicate

logger = logging.getLogger("crewdesk.store")


class InMemoryStore:
    """
    Dict-of-dicts store keyed by entity name then record id.

    Records are deep-copied on the way in and out so callers
    can never mutate stored state behind the store's back.
    """

    def __init__(self, entity_types=ENTITY_TYPES) -> None:
        self._tables: Dict[str, Dict[str, dict]] = {
            name: {} for name in entity_types
        }
        self._lock = threading.Lock()

    def _table(self, entity: str) -> Dict[str, dict]:
        table = self._tables.get(entity)
        if table is None:
            raise StoreError(f"Unknown entity type '{entity}'.")
        return table

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get(self, entity: str, record_id: str) -> dict:
        with self._lock:
            record = self._table(entity).get(record_id)
            if record is None:
                raise NotFound(entity, record_id)
            return copy.deepcopy(record)

    def filter(self, entity: str, predicate: Predicate) -> list[dict]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._table(entity).values()]
        return [r for r in rows if predicate(r)]

    def count(self, entity: str) -> int:
        with self._lock:
            return len(self._table(entity))

    # ══════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════

    def insert(self, entity: str, record: Mapping[str, Any]) -> dict:
        stored = copy.deepcopy(dict(record))
        stored.setdefault("id", str(uuid.uuid4()))
        stored["version"] = 1
        with self._lock:
            table = self._table(entity)
            if stored["id"] in table:
                raise StoreError(f"{entity} '{stored['id']}' already exists.")
            table[stored["id"]] = stored
        logger.debug(f"Inserted {entity} id={stored['id']}")
        return copy.deepcopy(stored)

    def update(
        self,
        entity: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> dict:
        with self._lock:
            table = self._table(entity)
            current = table.get(record_id)
            if current is None:
                raise NotFound(entity, record_id)

            if expected:
                for field_name, value in expected.items():
                    if current.get(field_name) != value:
                        raise ConcurrencyConflict(entity, record_id, expected)

            updated = dict(current)
            updated.update(copy.deepcopy(dict(patch)))
            updated["id"] = record_id
            updated["version"] = int(current.get("version", 0)) + 1
            table[record_id] = updated
            result = copy.deepcopy(updated)

        logger.debug(
            f"Updated {entity} id={record_id} fields={sorted(patch)} "
            f"version={result['version']}"
        )
        return result

    def truncate(self) -> None:
        with self._lock:
            for table in self._tables.values():
                table.clear()
