"""
Crewdesk Task Rules Engine: Batch Reminders
=============================================
Creates one pending reminder per assigned task, addressed to the
task's assignee. Unassigned or unknown tasks are ignored; a batch
with no assigned task at all is NotFound.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List

from core.store.errors import NotFound, StoreError
from core.store.protocol import REMINDERS, TASKS
from engines.task_rules.commands import BatchReminderCreationRequest
from engines.task_rules.events import AUDIT_REMINDERS_CREATED
from engines.task_rules.models import Reminder
from engines.task_rules.policies import reminder_message
from engines.task_rules.services.base import RulesService

logger = logging.getLogger("crewdesk.rules")

BATCH_RECORD_ID = "batch_creation"


class BatchReminderCreator(RulesService):

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = BatchReminderCreationRequest.from_params(params)
        result = self.create_reminders(
            request.task_ids,
            request.reminder_type,
            request.scheduled_for,
            request.created_by,
        )
        result["message"] = (
            f"Successfully created {result['created_reminders']} "
            f"{request.reminder_type} reminders"
        )
        return result

    def create_reminders(
        self,
        task_ids,
        reminder_type: str,
        scheduled_for: datetime,
        created_by: str,
    ) -> Dict[str, Any]:
        wanted = list(dict.fromkeys(task_ids))
        by_id = {
            t.id: t for t in self._tasks(
                lambda r: r.get("id") in wanted and r.get("assignee_id")
            )
        }
        tasks = [by_id[task_id] for task_id in wanted if task_id in by_id]
        if not tasks:
            raise NotFound(
                TASKS, ",".join(wanted), "No valid tasks found with assigned users."
            )

        now = self._clock.now_utc()
        names: Dict[str, str] = {}
        created: List[dict] = []
        reminder_ids: List[str] = []
        failures: List[dict] = []

        for task in tasks:
            message = reminder_message(reminder_type, task)
            try:
                stored = self._store.insert(
                    REMINDERS,
                    Reminder(
                        user_id=task.assignee_id,
                        task_id=task.id,
                        type=reminder_type,
                        message=message,
                        scheduled_for=scheduled_for,
                        created_at=now,
                        created_by=created_by,
                    ).to_record(),
                )
            except StoreError as exc:
                logger.error(f"Reminder for task {task.id} not created: {exc.message}")
                failures.append(
                    {"task_id": task.id, "code": exc.code, "message": exc.message}
                )
                continue

            reminder_ids.append(stored["id"])
            created.append({
                "task_id": task.id,
                "task_title": task.title,
                "assigned_to": self._user_name(task.assignee_id, names),
                "reminder_message": message,
            })

        self._audit(
            entity=REMINDERS,
            record_id=BATCH_RECORD_ID,
            action=AUDIT_REMINDERS_CREATED,
            actor_id=created_by,
            occurred_at=now,
            after={
                "reminder_type": reminder_type,
                "reminders_created": len(created),
                "task_ids": [c["task_id"] for c in created],
                "reminder_ids": reminder_ids,
            },
        )
        logger.info(f"Created {len(created)} {reminder_type} reminders by {created_by}")

        return {
            "created_reminders": len(created),
            "reminder_type": reminder_type,
            "scheduled_for": scheduled_for,
            "tasks_with_reminders": created,
            "failures": failures,
        }
