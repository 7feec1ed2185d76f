"""
Crewdesk Core Audit: Audit Entry
==================================
Immutable record of one mutation (or one analysis run) performed
by the rules engine. Once created, never modified.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class AuditEntry:
    """
    Fields:
        entry_id:    Unique id of this audit record.
        entity:      Entity name ('tasks', 'reminders', 'analytics', ...).
        record_id:   Id of the affected record, or a batch label.
        action:      What happened ('complete', 'unlock', 'escalate', ...).
        before:      Relevant field values before the change.
        after:       Relevant field values after the change.
        actor_id:    Who caused it ('system' for scheduled runs).
        occurred_at: When it happened.
    """

    entry_id: uuid.UUID
    entity: str
    record_id: str
    action: str
    actor_id: str
    occurred_at: datetime
    before: Dict[str, Any] = field(default_factory=dict)
    after: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.entity or not isinstance(self.entity, str):
            raise ValueError("entity must be a non-empty string.")
        if not self.action or not isinstance(self.action, str):
            raise ValueError("action must be a non-empty string.")
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "entry_id": str(self.entry_id),
            "entity": self.entity,
            "id": self.record_id,
            "action": self.action,
            "before": _jsonable(self.before),
            "after": _jsonable(self.after),
            "actor": self.actor_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


def _jsonable(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: v.isoformat() if isinstance(v, datetime) else v
        for k, v in values.items()
    }
