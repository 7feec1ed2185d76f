"""
Tests for batch reminder creation.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.commands.validator import OperationValidationError
from core.store.errors import NotFound, StoreError
from core.store.memory import InMemoryStore
from core.store.protocol import REMINDERS, TASKS, USERS
from engines.task_rules.services import BatchReminderCreator

SEND_AT = datetime(2026, 3, 3, 8, 0, tzinfo=timezone.utc)
DUE = datetime(2026, 3, 5, 17, 0, tzinfo=timezone.utc)


@pytest.fixture
def creator(deps):
    return BatchReminderCreator(**deps)


@pytest.fixture
def assigned(make_user, make_task):
    make_user("u-1", first_name="Ana", last_name="Reyes")
    make_task("t-1", title="Restock minibar", assignee_id="u-1", status="assigned", due_date=DUE)
    make_task("t-2", title="Fix lamp", assignee_id="u-1", status="in_progress")
    make_task("t-free", title="Unassigned", status="ready")


class TestBatchReminders:
    def test_creates_pending_reminder_per_assigned_task(self, creator, assigned, store):
        result = creator.create_reminders(["t-1", "t-2", "t-free"], "deadline", SEND_AT, "mgr")

        assert result["created_reminders"] == 2
        assert result["reminder_type"] == "deadline"
        assert result["scheduled_for"] == SEND_AT
        assert [r["task_id"] for r in result["tasks_with_reminders"]] == ["t-1", "t-2"]
        assert result["failures"] == []

        reminders = store.filter(REMINDERS, lambda r: True)
        assert len(reminders) == 2
        for reminder in reminders:
            assert reminder["user_id"] == "u-1"
            assert reminder["status"] == "pending"
            assert reminder["type"] == "deadline"
            assert reminder["scheduled_for"] == SEND_AT
            assert reminder["created_by"] == "mgr"

    @pytest.mark.parametrize(
        "reminder_type, expected",
        [
            ("deadline", 'Reminder: Task "Restock minibar" is due on 2026-03-05.'),
            ("overdue", 'OVERDUE: Task "Restock minibar" was due on 2026-03-05. '
                        "Please complete as soon as possible."),
            ("follow_up", "Follow-up: Please provide an update on the status of task "
                          '"Restock minibar".'),
        ],
    )
    def test_messages(self, creator, assigned, reminder_type, expected):
        result = creator.create_reminders(["t-1"], reminder_type, SEND_AT, "mgr")
        [item] = result["tasks_with_reminders"]
        assert item["reminder_message"] == expected
        assert item["assigned_to"] == "Ana Reyes"
        assert item["task_title"] == "Restock minibar"

    def test_undated_task_message(self, creator, assigned):
        result = creator.create_reminders(["t-2"], "deadline", SEND_AT, "mgr")
        assert "no due date" in result["tasks_with_reminders"][0]["reminder_message"]

    def test_no_assigned_tasks(self, creator, assigned, store):
        with pytest.raises(NotFound, match="No valid tasks"):
            creator.create_reminders(["t-free", "ghost"], "deadline", SEND_AT, "mgr")
        assert store.count(REMINDERS) == 0

    def test_single_batch_audit(self, creator, assigned, audit_log):
        creator.create_reminders(["t-1", "t-2"], "follow_up", SEND_AT, "mgr")

        [entry] = audit_log.entries
        assert entry.entity == "reminders"
        assert entry.record_id == "batch_creation"
        assert entry.action == "create_reminders"
        assert entry.after["reminders_created"] == 2
        assert entry.after["task_ids"] == ["t-1", "t-2"]

    def test_insert_failure_collected(self, audit_log, clock):
        class _Flaky(InMemoryStore):
            def insert(self, entity, record):
                if entity == REMINDERS and record.get("task_id") == "t-1":
                    raise StoreError("write failed")
                return super().insert(entity, record)

        store = _Flaky()
        store.insert(USERS, {"id": "u-1", "active": True})
        store.insert(TASKS, {"id": "t-1", "title": "a", "assignee_id": "u-1"})
        store.insert(TASKS, {"id": "t-2", "title": "b", "assignee_id": "u-1"})
        creator = BatchReminderCreator(store=store, audit_sink=audit_log, clock=clock)

        result = creator.create_reminders(["t-1", "t-2"], "follow_up", SEND_AT, "mgr")

        assert result["created_reminders"] == 1
        assert result["failures"] == [
            {"task_id": "t-1", "code": "STORE_ERROR", "message": "write failed"}
        ]

    def test_execute_validates_type(self, creator, assigned):
        with pytest.raises(OperationValidationError):
            creator.execute({
                "task_ids": ["t-1"],
                "reminder_type": "escalation",
                "scheduled_for": SEND_AT.isoformat(),
                "created_by": "mgr",
            })

    def test_execute_message(self, creator, assigned):
        result = creator.execute({
            "task_ids": ["t-1"],
            "reminder_type": "overdue",
            "scheduled_for": "2026-03-03T08:00:00Z",
            "created_by": "mgr",
        })
        assert result["scheduled_for"] == SEND_AT
        assert result["message"] == "Successfully created 1 overdue reminders"
