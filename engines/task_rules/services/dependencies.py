"""
Crewdesk Task Rules Engine: Dependency Resolver
=================================================
Completes a task and cascades the unlock to its dependents.

A pending dependent becomes `ready` when every entry of its
dependency list references a completed task (see
policies.dependencies_satisfied). Only this service performs the
pending -> ready transition for tasks with dependencies.

No cycle detection: tasks in a dependency cycle never unlock.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List

from core.store.errors import ConcurrencyConflict, StoreError
from core.store.protocol import TASKS
from engines.task_rules.commands import CascadeTaskCompletionRequest
from engines.task_rules.events import (
    AUDIT_TASK_COMPLETED, AUDIT_TASK_UNLOCKED,
    STATUS_COMPLETED, STATUS_PENDING, STATUS_READY,
)
from engines.task_rules.models import Task
from engines.task_rules.policies import dependencies_satisfied
from engines.task_rules.services.base import RulesService, creation_order

logger = logging.getLogger("crewdesk.rules")


class DependencyResolver(RulesService):

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = CascadeTaskCompletionRequest.from_params(params)
        result = self.complete_task(request.task_id, request.completed_by)
        result["message"] = (
            f"Task completed and {len(result['unlocked_tasks'])} "
            f"dependent tasks unlocked"
        )
        return result

    def complete_task(self, task_id: str, actor_id: str) -> Dict[str, Any]:
        now = self._clock.now_utc()
        task = Task.from_record(self._store.get(TASKS, task_id))

        if task.status == STATUS_COMPLETED:
            logger.info(f"Task {task.id} already completed; cascade skipped")
            return {
                "completed_task": task.id,
                "unlocked_tasks": [],
                "already_completed": True,
            }

        self._store.update(
            TASKS,
            task.id,
            {"status": STATUS_COMPLETED, "completed_at": now, "updated_at": now},
            expected={"status": task.status},
        )
        self._audit(
            entity=TASKS,
            record_id=task.id,
            action=AUDIT_TASK_COMPLETED,
            actor_id=actor_id,
            occurred_at=now,
            before={"status": task.status},
            after={"status": STATUS_COMPLETED, "completed_at": now},
        )
        logger.info(f"Task {task.id} completed by {actor_id}")

        unlocked, failures = self._cascade(task.id, actor_id, now)
        result: Dict[str, Any] = {
            "completed_task": task.id,
            "unlocked_tasks": unlocked,
            "already_completed": False,
        }
        if failures:
            result["failures"] = failures
        return result

    # ══════════════════════════════════════════════════════════
    # CASCADE
    # ══════════════════════════════════════════════════════════

    def _cascade(self, task_id: str, actor_id: str, now: datetime):
        candidates = sorted(
            self._tasks(
                lambda r: r.get("status") == STATUS_PENDING
                and task_id in (r.get("dependencies") or ())
            ),
            key=creation_order,
        )

        unlocked: List[str] = []
        failures: List[dict] = []
        for dependent in candidates:
            try:
                if self._unlock_if_satisfied(dependent, actor_id, now):
                    unlocked.append(dependent.id)
            except StoreError as exc:
                logger.error(f"Unlock check failed for task {dependent.id}: {exc.message}")
                failures.append(
                    {"task_id": dependent.id, "code": exc.code, "message": exc.message}
                )
        return unlocked, failures

    def _unlock_if_satisfied(self, dependent: Task, actor_id: str, now: datetime) -> bool:
        wanted = set(dependent.dependencies)
        completed_ids = [
            t.id for t in self._tasks(
                lambda r: r.get("id") in wanted and r.get("status") == STATUS_COMPLETED
            )
        ]
        if not dependencies_satisfied(dependent.dependencies, completed_ids):
            return False

        try:
            self._store.update(
                TASKS,
                dependent.id,
                {"status": STATUS_READY, "updated_at": now},
                expected={"status": STATUS_PENDING},
            )
        except ConcurrencyConflict:
            # Another completion already moved it out of pending.
            logger.info(f"Task {dependent.id} left pending concurrently; not unlocked here")
            return False

        self._audit(
            entity=TASKS,
            record_id=dependent.id,
            action=AUDIT_TASK_UNLOCKED,
            actor_id=actor_id,
            occurred_at=now,
            before={"status": STATUS_PENDING},
            after={"status": STATUS_READY},
        )
        logger.info(f"Task {dependent.id} unlocked")
        return True
