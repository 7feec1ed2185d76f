"""
Crewdesk Task Rules Engine: Service Base
==========================================
Shared wiring for every rules service: Store, AuditSink, Clock and
RulesConfig are injected; nothing is cached between calls.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.audit.functions import create_audit_entry, record_audit
from core.config.rules import RulesConfig
from core.store.errors import NotFound
from core.store.protocol import TASKS, USERS, Predicate, Store
from core.time.clock import Clock, SystemClock
from engines.task_rules.models import Task, User

logger = logging.getLogger("crewdesk.rules")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class RulesService:
    def __init__(
        self,
        *,
        store: Store,
        audit_sink: Any = None,
        clock: Optional[Clock] = None,
        rules: Optional[RulesConfig] = None,
    ):
        self._store = store
        self._audit_sink = audit_sink
        self._clock = clock or SystemClock()
        self._rules = rules or RulesConfig()

    # ── reads ─────────────────────────────────────────────────

    def _tasks(self, predicate: Predicate) -> List[Task]:
        return [Task.from_record(r) for r in self._store.filter(TASKS, predicate)]

    def _users(self, predicate: Predicate) -> List[User]:
        return [User.from_record(r) for r in self._store.filter(USERS, predicate)]

    def _user_name(self, user_id: Optional[str], cache: Dict[str, str]) -> str:
        """Display name for a user id; unknown ids fall back to the id."""
        if not user_id:
            return "Unassigned"
        if user_id not in cache:
            try:
                cache[user_id] = User.from_record(
                    self._store.get(USERS, user_id)
                ).display_name
            except NotFound:
                cache[user_id] = user_id
        return cache[user_id]

    # ── audit ─────────────────────────────────────────────────

    def _audit(
        self,
        *,
        entity: str,
        record_id: str,
        action: str,
        actor_id: str,
        occurred_at: datetime,
        before: Optional[dict] = None,
        after: Optional[dict] = None,
    ) -> None:
        record_audit(
            self._audit_sink,
            create_audit_entry(
                entity=entity,
                record_id=record_id,
                action=action,
                actor_id=actor_id,
                occurred_at=occurred_at,
                before=before,
                after=after,
            ),
        )


def creation_order(task: Task):
    """Sort key: oldest first, undated last, id as tie-break."""
    return (task.created_at is None, task.created_at or _EPOCH, task.id)
