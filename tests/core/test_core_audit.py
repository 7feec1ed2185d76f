"""
Tests for core.audit: entries, sinks and best-effort recording.
"""

import logging
import uuid
from datetime import datetime, timezone

import pytest

from core.audit import (
    AuditEntry,
    InMemoryAuditLog,
    LoggingAuditSink,
    create_audit_entry,
    record_audit,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _entry(**overrides):
    values = dict(
        entity="tasks",
        record_id="t-1",
        action="complete",
        actor_id="u-1",
        occurred_at=T0,
        before={"status": "in_progress"},
        after={"status": "completed", "completed_at": T0},
    )
    values.update(overrides)
    return create_audit_entry(**values)


class _ExplodingSink:
    def record(self, entry):
        raise RuntimeError("disk full")


class TestAuditEntry:
    def test_factory_assigns_id(self):
        entry = _entry()
        assert isinstance(entry.entry_id, uuid.UUID)
        assert entry.record_id == "t-1"

    def test_is_frozen(self):
        entry = _entry()
        with pytest.raises(Exception):
            entry.action = "unlock"

    @pytest.mark.parametrize("field_name", ["entity", "action", "actor_id"])
    def test_required_strings(self, field_name):
        values = dict(
            entry_id=uuid.uuid4(), entity="tasks", record_id="t-1",
            action="complete", actor_id="u-1", occurred_at=T0,
        )
        values[field_name] = ""
        with pytest.raises(ValueError):
            AuditEntry(**values)

    def test_to_dict_serializes_datetimes(self):
        body = _entry().to_dict()
        assert body["id"] == "t-1"
        assert body["actor"] == "u-1"
        assert body["occurred_at"] == T0.isoformat()
        assert body["after"]["completed_at"] == T0.isoformat()
        assert body["before"] == {"status": "in_progress"}


class TestInMemoryAuditLog:
    def test_append_and_query(self):
        log = InMemoryAuditLog()
        log.record(_entry())
        log.record(_entry(record_id="t-2", action="unlock"))

        assert len(log.entries) == 2
        assert [e.record_id for e in log.query_by_action("unlock")] == ["t-2"]
        assert len(log.query_by_record("tasks", "t-1")) == 1
        assert log.query_by_record("reminders", "t-1") == []

    def test_entries_is_a_snapshot(self):
        log = InMemoryAuditLog()
        log.record(_entry())
        snapshot = log.entries
        snapshot.clear()
        assert len(log.entries) == 1


class TestLoggingAuditSink:
    def test_logs_on_audit_logger(self, caplog):
        sink = LoggingAuditSink()
        with caplog.at_level(logging.INFO, logger="crewdesk.audit"):
            sink.record(_entry())
        assert "tasks t-1 complete by u-1" in caplog.text


class TestRecordAudit:
    def test_accepted(self):
        log = InMemoryAuditLog()
        assert record_audit(log, _entry()) is True
        assert len(log.entries) == 1

    def test_none_sink(self):
        assert record_audit(None, _entry()) is False

    def test_failing_sink_is_swallowed(self, caplog):
        with caplog.at_level(logging.ERROR, logger="crewdesk.audit"):
            assert record_audit(_ExplodingSink(), _entry()) is False
        assert "Audit sink failed" in caplog.text
