"""
Crewdesk Task Rules Engine: Escalation Scanner
================================================
Finds tasks that have been overdue for longer than a threshold,
raises their priority one step on the ladder and hands each one to
a department manager through an escalation reminder.

One scan per process at a time (ExclusiveRunGuard). A scan stops
early, with `truncated: True`, once the execution budget is spent.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from core.resilience.budget import BudgetTracker
from core.resilience.guard import ExclusiveRunGuard
from core.store.errors import StoreError
from core.store.protocol import REMINDERS, TASKS
from core.time.clock import hours_between
from engines.task_rules.commands import AutomatedTaskEscalationRequest
from engines.task_rules.events import (
    AUDIT_TASK_ESCALATED, OPEN_TASK_STATUSES, REMINDER_ESCALATION,
)
from engines.task_rules.models import Reminder, Task, User
from engines.task_rules.policies import (
    escalation_message, next_escalation_priority, select_manager,
)
from engines.task_rules.services.base import RulesService

logger = logging.getLogger("crewdesk.rules")

RUN_KEY = "automated_task_escalation"


def _due_order(task: Task):
    return (task.due_date, task.id)


class EscalationScanner(RulesService):

    def __init__(self, *, guard: Optional[ExclusiveRunGuard] = None, **deps):
        super().__init__(**deps)
        self._guard = guard or ExclusiveRunGuard()

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = AutomatedTaskEscalationRequest.from_params(params)
        result = self.escalate(request.overdue_hours, request.department_id)
        if result["escalated_tasks"]:
            result["message"] = (
                f"Successfully escalated {result['escalated_tasks']} overdue tasks"
            )
        else:
            result["message"] = "No overdue tasks found for escalation"
        return result

    def escalate(
        self,
        overdue_hours: float,
        department_id: Optional[str] = None,
        *,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Dict[str, Any]:
        with self._guard.hold(RUN_KEY):
            return self._scan(overdue_hours, department_id, should_cancel)

    # ══════════════════════════════════════════════════════════
    # SCAN
    # ══════════════════════════════════════════════════════════

    def _scan(
        self,
        overdue_hours: float,
        department_id: Optional[str],
        should_cancel: Optional[Callable[[], bool]],
    ) -> Dict[str, Any]:
        now = self._clock.now_utc()
        cutoff = now - timedelta(hours=overdue_hours)

        overdue = sorted(
            (
                t for t in self._tasks(
                    lambda r: r.get("status") in OPEN_TASK_STATUSES
                    and (department_id is None or r.get("department_id") == department_id)
                )
                if t.due_date is not None and t.due_date < cutoff
            ),
            key=_due_order,
        )

        result: Dict[str, Any] = {
            "escalated_tasks": 0,
            "tasks": [],
            "skipped": [],
            "failures": [],
            "truncated": False,
        }
        if not overdue:
            return result

        manager_roles = self._rules.escalation.manager_roles
        managers = self._users(
            lambda r: r.get("active") and r.get("role") in manager_roles
        )
        names: Dict[str, str] = {}
        tracker = BudgetTracker(
            self._rules.budget,
            self._clock,
            label="escalation",
            should_cancel=should_cancel,
        )

        for task in overdue:
            if tracker.exhausted():
                break
            tracker.consume()

            manager = select_manager(
                managers, task.department_id, manager_roles
            )
            if manager is None:
                logger.warning(f"No manager found for task {task.id}; not escalated")
                result["skipped"].append(
                    {"task_id": task.id, "reason": "no_manager"}
                )
                continue

            try:
                result["tasks"].append(
                    self._escalate_task(task, manager, now, names)
                )
            except StoreError as exc:
                logger.error(f"Escalation of task {task.id} failed: {exc.message}")
                result["failures"].append(
                    {"task_id": task.id, "code": exc.code, "message": exc.message}
                )

        result["escalated_tasks"] = len(result["tasks"])
        result["truncated"] = tracker.truncated
        return result

    def _escalate_task(
        self, task: Task, manager: User, now: datetime, names: Dict[str, str]
    ) -> Dict[str, Any]:
        new_priority = next_escalation_priority(task.priority)
        if new_priority != task.priority:
            self._store.update(
                TASKS,
                task.id,
                {"priority": new_priority, "updated_at": now},
                expected={"version": task.version},
            )

        actor_id = self._rules.escalation.system_actor_id
        self._audit(
            entity=TASKS,
            record_id=task.id,
            action=AUDIT_TASK_ESCALATED,
            actor_id=actor_id,
            occurred_at=now,
            before={"status": task.status, "priority": task.priority},
            after={
                "escalated_to": manager.id,
                "escalated_at": now,
                "priority": new_priority,
            },
        )

        hours_overdue = hours_between(task.due_date, now)
        assignee_name = self._user_name(task.assignee_id, names)
        reminder = self._store.insert(
            REMINDERS,
            Reminder(
                user_id=manager.id,
                task_id=task.id,
                type=REMINDER_ESCALATION,
                message=escalation_message(task, assignee_name, hours_overdue),
                scheduled_for=now,
                created_at=now,
                created_by=actor_id,
            ).to_record(),
        )
        logger.info(
            f"Task {task.id} escalated to {manager.id}: "
            f"{task.priority} -> {new_priority}"
        )

        return {
            "task_id": task.id,
            "task_title": task.title,
            "previous_assignee": task.assignee_id,
            "previous_assignee_name": assignee_name,
            "escalated_to_manager_id": manager.id,
            "escalated_to_manager_name": manager.display_name,
            "hours_overdue": hours_overdue,
            "previous_priority": task.priority,
            "new_priority": new_priority,
            "reminder_id": reminder["id"],
        }
