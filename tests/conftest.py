"""
Shared fixtures for the Crewdesk test suite.

Every engine test runs against a fresh InMemoryStore, an
InMemoryAuditLog and a FixedClock pinned to NOW.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.audit.sink import InMemoryAuditLog
from core.store.memory import InMemoryStore
from core.store.protocol import DEPARTMENTS, TASKS, USERS
from core.time.clock import FixedClock

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def audit_log():
    return InMemoryAuditLog()


@pytest.fixture
def deps(store, audit_log, clock):
    return {"store": store, "audit_sink": audit_log, "clock": clock}


@pytest.fixture
def make_department(store):
    def _make(department_id="housekeeping", name="Housekeeping"):
        return store.insert(DEPARTMENTS, {"id": department_id, "name": name})
    return _make


@pytest.fixture
def make_user(store):
    def _make(
        user_id,
        *,
        department_id="housekeeping",
        role="user",
        active=True,
        first_name="",
        last_name="",
    ):
        return store.insert(USERS, {
            "id": user_id,
            "department_id": department_id,
            "role": role,
            "active": active,
            "first_name": first_name,
            "last_name": last_name,
        })
    return _make


@pytest.fixture
def make_task(store):
    def _make(task_id, **fields):
        record = {
            "id": task_id,
            "title": fields.pop("title", f"Task {task_id}"),
            "status": "pending",
            "priority": "medium",
            "assignee_id": None,
            "department_id": "housekeeping",
            "due_date": None,
            "dependencies": [],
            "created_at": NOW,
        }
        record.update(fields)
        return store.insert(TASKS, record)
    return _make
