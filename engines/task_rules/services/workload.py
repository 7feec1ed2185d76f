"""
Crewdesk Task Rules Engine: Workload Scoring and Rebalancing
==============================================================
WorkloadScorer turns a user's open tasks into a WorkloadSnapshot.
Rebalancer compares the snapshots of a department and produces
advisory recommendations. It never mutates a task: applying a
recommendation is a separate bulk_task_assignment call.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.resilience.budget import BudgetTracker
from core.store.errors import NotFound
from core.store.protocol import DEPARTMENTS
from engines.task_rules.commands import UserWorkloadBalancingRequest
from engines.task_rules.events import (
    ANALYTICS_ENTITY, AUDIT_WORKLOAD_ANALYSIS, BALANCED, OPEN_TASK_STATUSES,
    OVERLOADED, PRIORITY_HIGH, PRIORITY_LOW, RECOMMEND_ASSIGN_UNASSIGNED,
    RECOMMEND_REDISTRIBUTE, STATUS_ASSIGNED, STATUS_READY, UNDERLOADED,
)
from engines.task_rules.models import User, WorkloadSnapshot
from engines.task_rules.policies import (
    classify_workload, compute_workload_score,
    sort_for_assignment, sort_least_urgent_first,
)
from engines.task_rules.services.base import RulesService

logger = logging.getLogger("crewdesk.rules")


# ══════════════════════════════════════════════════════════════
# SCORER
# ══════════════════════════════════════════════════════════════

class WorkloadScorer(RulesService):

    def compute(self, user: User, now: Optional[datetime] = None) -> WorkloadSnapshot:
        now = now or self._clock.now_utc()
        open_tasks = self._tasks(
            lambda r: r.get("assignee_id") == user.id
            and r.get("status") in OPEN_TASK_STATUSES
        )

        task_count = len(open_tasks)
        high_priority_count = sum(1 for t in open_tasks if t.priority == PRIORITY_HIGH)
        overdue_count = sum(1 for t in open_tasks if t.is_overdue(now))

        rules = self._rules.workload
        score = compute_workload_score(task_count, high_priority_count, overdue_count, rules)
        return WorkloadSnapshot(
            user_id=user.id,
            name=user.display_name,
            task_count=task_count,
            high_priority_count=high_priority_count,
            overdue_count=overdue_count,
            score=score,
            classification=classify_workload(score, rules),
        )


# ══════════════════════════════════════════════════════════════
# REBALANCER
# ══════════════════════════════════════════════════════════════

class Rebalancer(RulesService):

    def __init__(self, *, scorer: Optional[WorkloadScorer] = None, **deps):
        super().__init__(**deps)
        self._scorer = scorer or WorkloadScorer(**deps)

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = UserWorkloadBalancingRequest.from_params(params)
        result = self.recommend(request.department_id, request.requested_by)
        result["message"] = (
            f"Workload analysed for {result['summary']['total_users']} users; "
            f"{len(result['recommendations'])} recommendations"
        )
        return result

    def recommend(
        self,
        department_id: str,
        requested_by: str,
        *,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Dict[str, Any]:
        now = self._clock.now_utc()

        users = sorted(
            self._users(
                lambda r: r.get("department_id") == department_id and r.get("active")
            ),
            key=lambda u: u.id,
        )
        if not users:
            raise NotFound(
                DEPARTMENTS,
                department_id,
                f"No active users found in department '{department_id}'.",
            )

        tracker = BudgetTracker(
            self._rules.budget,
            self._clock,
            label="workload_balancing",
            should_cancel=should_cancel,
        )
        snapshots: List[WorkloadSnapshot] = []
        for user in users:
            if tracker.exhausted():
                break
            snapshots.append(self._scorer.compute(user, now=now))
            tracker.consume()
        snapshots.sort(key=lambda s: (s.score, s.user_id))

        underloaded = [s for s in snapshots if s.classification == UNDERLOADED]
        overloaded = [s for s in snapshots if s.classification == OVERLOADED]

        recommendations = self._assign_unassigned(department_id, underloaded)
        if underloaded and overloaded:
            recommendations.extend(self._redistribute(overloaded, snapshots[0]))

        logger.info(
            f"Workload analysis for {department_id}: {len(snapshots)} users, "
            f"{len(recommendations)} recommendations"
        )
        self._audit(
            entity=ANALYTICS_ENTITY,
            record_id=department_id,
            action=AUDIT_WORKLOAD_ANALYSIS,
            actor_id=requested_by,
            occurred_at=now,
            after={"workload_analysis": [s.to_dict() for s in snapshots]},
        )

        return {
            "department_id": department_id,
            "user_workloads": [s.to_dict() for s in snapshots],
            "recommendations": recommendations,
            "summary": {
                "total_users": len(snapshots),
                "underloaded_users": len(underloaded),
                "overloaded_users": len(overloaded),
                "balanced_users": sum(1 for s in snapshots if s.classification == BALANCED),
            },
            "truncated": tracker.truncated,
        }

    # ── recommendation builders ───────────────────────────────

    def _assign_unassigned(
        self, department_id: str, underloaded: List[WorkloadSnapshot]
    ) -> List[dict]:
        if not underloaded:
            return []

        rules = self._rules.workload
        pool = sort_for_assignment(
            self._tasks(
                lambda r: r.get("department_id") == department_id
                and not r.get("assignee_id")
                and r.get("status") == STATUS_READY
            )
        )[: rules.unassigned_pool_limit]

        recommendations: List[dict] = []
        index = 0
        for snapshot in underloaded:
            if index >= len(pool):
                break
            batch = pool[index: index + rules.tasks_per_recommendation]
            recommendations.append({
                "type": RECOMMEND_ASSIGN_UNASSIGNED,
                "user_id": snapshot.user_id,
                "user_name": snapshot.name,
                "current_workload": snapshot.score,
                "recommended_tasks": [t.summary() for t in batch],
            })
            index += len(batch)
        return recommendations

    def _redistribute(
        self, overloaded: List[WorkloadSnapshot], target: WorkloadSnapshot
    ) -> List[dict]:
        rules = self._rules.workload
        most_loaded = sorted(overloaded, key=lambda s: (-s.score, s.user_id))
        recommendations: List[dict] = []
        for snapshot in most_loaded[: rules.overloaded_users_considered]:
            movable = sort_least_urgent_first(
                self._tasks(
                    lambda r, uid=snapshot.user_id: r.get("assignee_id") == uid
                    and r.get("status") == STATUS_ASSIGNED
                    and r.get("priority") == PRIORITY_LOW
                )
            )[: rules.tasks_per_recommendation]
            if not movable:
                continue
            recommendations.append({
                "type": RECOMMEND_REDISTRIBUTE,
                "from_user_id": snapshot.user_id,
                "from_user_name": snapshot.name,
                "to_user_id": target.user_id,
                "to_user_name": target.name,
                "tasks_to_move": [t.summary() for t in movable],
            })
        return recommendations
