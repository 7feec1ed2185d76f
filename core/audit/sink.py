"""
Crewdesk Core Audit: Sinks
============================
AuditSink is the port the engine writes to. Contract: durable,
append-only, and never allowed to fail the caller (see
core.audit.functions.record_audit).
"""

from __future__ import annotations

import logging
import threading
from typing import List, Protocol

from core.audit.models import AuditEntry


class AuditSink(Protocol):
    """Append-only destination for audit entries."""

    def record(self, entry: AuditEntry) -> None:
        ...  # pragma: no cover


class InMemoryAuditLog:
    """
    Append-only in-memory log.

    Used by tests and the development wiring. No updates, no deletes.
    """

    def __init__(self) -> None:
        self._entries: List[AuditEntry] = []
        self._lock = threading.Lock()

    def record(self, entry: AuditEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def query_by_record(self, entity: str, record_id: str) -> List[AuditEntry]:
        with self._lock:
            return [
                e for e in self._entries
                if e.entity == entity and e.record_id == record_id
            ]

    def query_by_action(self, action: str) -> List[AuditEntry]:
        with self._lock:
            return [e for e in self._entries if e.action == action]

    @property
    def entries(self) -> List[AuditEntry]:
        """Read-only snapshot of all entries."""
        with self._lock:
            return list(self._entries)


class LoggingAuditSink:
    """Writes each entry as a structured log line on 'crewdesk.audit'."""

    def __init__(self, logger_name: str = "crewdesk.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def record(self, entry: AuditEntry) -> None:
        self._logger.info(
            f"{entry.entity} {entry.record_id} {entry.action} by {entry.actor_id}",
            extra={"audit": entry.to_dict()},
        )
