"""
Crewdesk Task Rules Engine: Entity Views
==========================================
Frozen, typed views over Store records. Services read records
through these classes and write plain dict patches back.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from core.time.clock import ensure_aware
from engines.task_rules.events import (
    PRIORITY_MEDIUM, REMINDER_PENDING, STATUS_PENDING,
)


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.fromisoformat(str(value)))


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    status: str = STATUS_PENDING
    priority: str = PRIORITY_MEDIUM
    assignee_id: Optional[str] = None
    department_id: Optional[str] = None
    due_date: Optional[datetime] = None
    dependencies: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    version: int = 0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Task":
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or ""),
            status=record.get("status") or STATUS_PENDING,
            priority=record.get("priority") or PRIORITY_MEDIUM,
            assignee_id=record.get("assignee_id"),
            department_id=record.get("department_id"),
            due_date=_as_datetime(record.get("due_date")),
            dependencies=tuple(record.get("dependencies") or ()),
            created_at=_as_datetime(record.get("created_at")),
            completed_at=_as_datetime(record.get("completed_at")),
            version=int(record.get("version") or 0),
        )

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now

    def summary(self) -> dict:
        return {"id": self.id, "title": self.title, "priority": self.priority}


@dataclass(frozen=True)
class User:
    id: str
    department_id: Optional[str] = None
    active: bool = True
    role: str = "user"
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        return cls(
            id=str(record["id"]),
            department_id=record.get("department_id"),
            active=bool(record.get("active", False)),
            role=str(record.get("role") or "user"),
            first_name=str(record.get("first_name") or ""),
            last_name=str(record.get("last_name") or ""),
        )

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.id


@dataclass(frozen=True)
class Department:
    id: str
    name: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Department":
        return cls(id=str(record["id"]), name=str(record.get("name") or ""))


@dataclass(frozen=True)
class Reminder:
    user_id: str
    type: str
    message: str
    scheduled_for: datetime
    task_id: Optional[str] = None
    status: str = REMINDER_PENDING
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    id: Optional[str] = None

    def to_record(self) -> dict:
        record = {
            "user_id": self.user_id,
            "task_id": self.task_id,
            "type": self.type,
            "message": self.message,
            "scheduled_for": self.scheduled_for,
            "status": self.status,
            "created_at": self.created_at,
            "created_by": self.created_by,
        }
        if self.id is not None:
            record["id"] = self.id
        return record


@dataclass(frozen=True)
class WorkloadSnapshot:
    """Derived per-user load metric. Never persisted."""

    user_id: str
    name: str
    task_count: int
    high_priority_count: int
    overdue_count: int
    score: int
    classification: str

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "current_tasks": self.task_count,
            "high_priority_tasks": self.high_priority_count,
            "overdue_tasks": self.overdue_count,
            "workload_score": self.score,
            "status": self.classification,
        }
