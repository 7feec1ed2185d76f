"""
Crewdesk Core Audit: Functions
================================
Factory for audit entries and the swallow-and-log recording helper.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from core.audit.models import AuditEntry

logger = logging.getLogger("crewdesk.audit")


def create_audit_entry(
    *,
    entity: str,
    record_id: str,
    action: str,
    actor_id: str,
    occurred_at: datetime,
    before: Optional[dict[str, Any]] = None,
    after: Optional[dict[str, Any]] = None,
) -> AuditEntry:
    """Create an immutable audit entry."""
    return AuditEntry(
        entry_id=uuid.uuid4(),
        entity=entity,
        record_id=str(record_id),
        action=action,
        actor_id=actor_id,
        occurred_at=occurred_at,
        before=dict(before or {}),
        after=dict(after or {}),
    )


def record_audit(sink: Any, entry: AuditEntry) -> bool:
    """
    Hand an entry to the sink. Never raises.

    Returns True if the sink accepted the entry. Sink failures are
    logged with traceback and otherwise ignored: auditing must not
    block or fail a business operation.
    """
    if sink is None:
        return False
    try:
        sink.record(entry)
    except Exception:
        logger.exception(
            f"Audit sink failed for {entry.entity} '{entry.record_id}' "
            f"action={entry.action}"
        )
        return False
    return True
