"""
Crewdesk Task Rules Engine: Department Performance
====================================================
Read-only report over a department's active users: tasks completed
in a period, tasks currently overdue, completion rate and average
completion time. Nothing is written, nothing is audited.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.store.protocol import DEPARTMENTS
from engines.task_rules.commands import DepartmentPerformanceAnalysisRequest
from engines.task_rules.events import OPEN_TASK_STATUSES, STATUS_COMPLETED
from engines.task_rules.models import Department, Task
from engines.task_rules.services.base import RulesService

logger = logging.getLogger("crewdesk.rules")

_SECONDS_PER_DAY = 86400


def completion_rate(completed: int, overdue: int) -> float:
    """Percentage of completed over completed + overdue, 1 decimal."""
    total = completed + overdue
    if total == 0:
        return 0.0
    return round(completed / total * 100, 1)


def average_completion_days(tasks: List[Task]) -> float:
    durations = [
        (t.completed_at - t.created_at).total_seconds()
        for t in tasks
        if t.completed_at is not None and t.created_at is not None
    ]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations) / _SECONDS_PER_DAY, 1)


class DepartmentPerformanceAnalyzer(RulesService):

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = DepartmentPerformanceAnalysisRequest.from_params(params)
        analysis = self.analyze(
            request.department_id, request.start_date, request.end_date
        )
        return {
            "analysis": analysis,
            "message": f"Performance analysed for department {request.department_id}",
        }

    def analyze(
        self,
        department_id: str,
        start_date: datetime,
        end_date: datetime,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        department = Department.from_record(
            self._store.get(DEPARTMENTS, department_id)
        )
        now = now or self._clock.now_utc()

        users = sorted(
            self._users(
                lambda r: r.get("department_id") == department_id and r.get("active")
            ),
            key=lambda u: u.id,
        )
        user_ids = {u.id for u in users}

        completed = [
            t for t in self._tasks(
                lambda r: r.get("assignee_id") in user_ids
                and r.get("status") == STATUS_COMPLETED
            )
            if t.completed_at is not None and start_date <= t.completed_at <= end_date
        ]
        overdue = [
            t for t in self._tasks(
                lambda r: r.get("assignee_id") in user_ids
                and r.get("status") in OPEN_TASK_STATUSES
            )
            if t.is_overdue(now)
        ]

        user_performance = []
        for user in users:
            done = sum(1 for t in completed if t.assignee_id == user.id)
            late = sum(1 for t in overdue if t.assignee_id == user.id)
            user_performance.append({
                "user_id": user.id,
                "name": user.display_name,
                "completed_tasks": done,
                "overdue_tasks": late,
                "completion_rate": completion_rate(done, late),
            })

        logger.info(
            f"Department {department_id} analysed: "
            f"{len(completed)} completed, {len(overdue)} overdue"
        )
        return {
            "department_id": department.id,
            "department_name": department.name,
            "period": {"start_date": start_date, "end_date": end_date},
            "metrics": {
                "total_completed_tasks": len(completed),
                "total_overdue_tasks": len(overdue),
                "completion_rate": completion_rate(len(completed), len(overdue)),
                "avg_completion_time_days": average_completion_days(completed),
                "active_users": len(users),
            },
            "user_performance": user_performance,
            "generated_at": now,
        }
