"""
Crewdesk Task Rules Engine: Policies
======================================
Pure decision functions. No Store access, no clock access:
every input is passed explicitly so each rule can be tested
at its exact boundaries.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from core.config.rules import WorkloadRules
from engines.task_rules.events import (
    BALANCED, OVERLOADED, PRIORITY_CRITICAL, PRIORITY_HIGH, PRIORITY_RANK,
    REMINDER_DEADLINE, REMINDER_FOLLOW_UP, REMINDER_OVERDUE, UNDERLOADED,
)
from engines.task_rules.models import Task, User


# ══════════════════════════════════════════════════════════════
# DEPENDENCY UNLOCK RULE
# ══════════════════════════════════════════════════════════════

def completed_dependency_count(
    dependencies: Sequence[str], completed_ids: Iterable[str]
) -> int:
    """Entries of the dependency list that point at a completed task."""
    done = set(completed_ids)
    return sum(1 for dep_id in dependencies if dep_id in done)


def dependencies_satisfied(
    dependencies: Sequence[str], completed_ids: Iterable[str]
) -> bool:
    """
    Unlock rule: completed count equals the dependency list length.

    The count runs over list entries, duplicates included, so
    deps=[A, A] with A completed counts 2 of 2 and unlocks. Counting
    distinct completed task rows instead would give 1 of 2 and leave
    such a task pending forever.
    """
    return completed_dependency_count(dependencies, completed_ids) == len(dependencies)


# ══════════════════════════════════════════════════════════════
# WORKLOAD SCORE
# ══════════════════════════════════════════════════════════════

def compute_workload_score(
    task_count: int,
    high_priority_count: int,
    overdue_count: int,
    rules: WorkloadRules,
) -> int:
    return (
        rules.task_weight * task_count
        + rules.high_priority_weight * high_priority_count
        + rules.overdue_weight * overdue_count
    )


def classify_workload(score: int, rules: WorkloadRules) -> str:
    if score < rules.underloaded_below:
        return UNDERLOADED
    if score > rules.overloaded_above:
        return OVERLOADED
    return BALANCED


# ══════════════════════════════════════════════════════════════
# ORDERING
# ══════════════════════════════════════════════════════════════

def sort_for_assignment(tasks: Iterable[Task]) -> List[Task]:
    """Priority descending, then due date ascending (undated last), then id."""
    return sorted(
        tasks,
        key=lambda t: (
            -PRIORITY_RANK.get(t.priority, 0),
            t.due_date is None,
            t.due_date.timestamp() if t.due_date else 0.0,
            t.id,
        ),
    )


def sort_least_urgent_first(tasks: Iterable[Task]) -> List[Task]:
    """Due date descending with undated tasks first, then id."""
    return sorted(
        tasks,
        key=lambda t: (
            t.due_date is not None,
            -t.due_date.timestamp() if t.due_date else 0.0,
            t.id,
        ),
    )


# ══════════════════════════════════════════════════════════════
# ESCALATION
# ══════════════════════════════════════════════════════════════

def next_escalation_priority(priority: str) -> str:
    """
    high -> critical, critical -> critical, anything else -> high.

    Never lowers a priority.
    """
    if priority in (PRIORITY_HIGH, PRIORITY_CRITICAL):
        return PRIORITY_CRITICAL
    return PRIORITY_HIGH


def select_manager(
    users: Iterable[User],
    department_id: Optional[str],
    manager_roles: Sequence[str],
) -> Optional[User]:
    """Active manager/admin of the department with the lowest id."""
    if not department_id:
        return None
    roles = set(manager_roles)
    candidates = [
        u for u in users
        if u.active and u.department_id == department_id and u.role in roles
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda u: u.id)


def escalation_message(task: Task, assignee_name: str, hours_overdue: int) -> str:
    return (
        f'Task "{task.title}" has been escalated due to being overdue by '
        f"{hours_overdue} hours. Originally assigned to {assignee_name}."
    )


# ══════════════════════════════════════════════════════════════
# REMINDER MESSAGES
# ══════════════════════════════════════════════════════════════

def _due_label(task: Task) -> str:
    return task.due_date.date().isoformat() if task.due_date else "no due date"


def reminder_message(reminder_type: str, task: Task) -> str:
    if reminder_type == REMINDER_DEADLINE:
        return f'Reminder: Task "{task.title}" is due on {_due_label(task)}.'
    if reminder_type == REMINDER_OVERDUE:
        return (
            f'OVERDUE: Task "{task.title}" was due on {_due_label(task)}. '
            f"Please complete as soon as possible."
        )
    if reminder_type == REMINDER_FOLLOW_UP:
        return (
            f"Follow-up: Please provide an update on the status of task "
            f'"{task.title}".'
        )
    raise ValueError(f"Unsupported reminder type: {reminder_type}")
