"""
Crewdesk Core Audit: Public API
=================================
Append-only mutation log and the best-effort recording helper.
"""

from core.audit.functions import create_audit_entry, record_audit
from core.audit.models import AuditEntry
from core.audit.sink import AuditSink, InMemoryAuditLog, LoggingAuditSink

__all__ = [
    "AuditEntry",
    "AuditSink",
    "InMemoryAuditLog",
    "LoggingAuditSink",
    "create_audit_entry",
    "record_audit",
]
