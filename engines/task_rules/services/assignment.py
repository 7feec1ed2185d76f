"""
Crewdesk Task Rules Engine: Bulk Assignment
=============================================
Assigns a list of tasks to one active user. The user is checked
before any task is touched; each task is then written with a
version compare-and-swap and audited on its own.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from core.store.errors import ConcurrencyConflict, InactiveUser, NotFound
from core.store.protocol import TASKS, USERS
from engines.task_rules.commands import BulkTaskAssignmentRequest
from engines.task_rules.events import AUDIT_TASK_ASSIGNED, STATUS_ASSIGNED
from engines.task_rules.models import Task, User
from engines.task_rules.services.base import RulesService

logger = logging.getLogger("crewdesk.rules")


class BulkAssigner(RulesService):

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = BulkTaskAssignmentRequest.from_params(params)
        result = self.assign_many(
            request.task_ids, request.user_id, request.assigned_by
        )
        result["message"] = f"Successfully assigned {result['assigned_tasks']} tasks"
        return result

    def assign_many(
        self, task_ids, user_id: str, actor_id: str
    ) -> Dict[str, Any]:
        try:
            user = User.from_record(self._store.get(USERS, user_id))
        except NotFound:
            raise InactiveUser(user_id) from None
        if not user.active:
            raise InactiveUser(user_id)

        now = self._clock.now_utc()
        assigned: List[str] = []
        missing: List[str] = []
        failures: List[dict] = []

        for task_id in dict.fromkeys(task_ids):
            try:
                task = Task.from_record(self._store.get(TASKS, task_id))
            except NotFound:
                missing.append(task_id)
                continue

            try:
                self._store.update(
                    TASKS,
                    task.id,
                    {
                        "assignee_id": user.id,
                        "status": STATUS_ASSIGNED,
                        "completed_at": None,
                        "updated_at": now,
                    },
                    expected={"version": task.version},
                )
            except ConcurrencyConflict as exc:
                logger.warning(f"Task {task.id} changed concurrently; not assigned")
                failures.append(
                    {"task_id": task.id, "code": exc.code, "message": exc.message}
                )
                continue

            self._audit(
                entity=TASKS,
                record_id=task.id,
                action=AUDIT_TASK_ASSIGNED,
                actor_id=actor_id,
                occurred_at=now,
                before={"assignee_id": task.assignee_id, "status": task.status},
                after={
                    "assignee_id": user.id,
                    "status": STATUS_ASSIGNED,
                    "completed_at": None,
                },
            )
            assigned.append(task.id)

        if missing:
            logger.info(f"Bulk assignment skipped missing tasks: {missing}")
        logger.info(f"Assigned {len(assigned)} tasks to {user.id} by {actor_id}")

        return {
            "assigned_tasks": len(assigned),
            "user_id": user.id,
            "task_ids": assigned,
            "missing_task_ids": missing,
            "failures": failures,
        }
