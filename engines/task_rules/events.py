"""
Crewdesk Task Rules Engine: Names and Vocabularies
====================================================
Engine: task_rules
Scope:  Cross-entity rules over tasks: cascade completion,
        workload scoring/rebalancing, overdue escalation,
        bulk assignment, batch reminders, department performance.
"""
from __future__ import annotations

# ── Operations (request discriminator values) ────────────────
OP_BULK_TASK_ASSIGNMENT            = "bulk_task_assignment"
OP_CASCADE_TASK_COMPLETION         = "cascade_task_completion"
OP_USER_WORKLOAD_BALANCING         = "user_workload_balancing"
OP_AUTOMATED_TASK_ESCALATION       = "automated_task_escalation"
OP_BATCH_REMINDER_CREATION         = "batch_reminder_creation"
OP_DEPARTMENT_PERFORMANCE_ANALYSIS = "department_performance_analysis"

TASK_RULES_OPERATIONS = frozenset({
    OP_BULK_TASK_ASSIGNMENT, OP_CASCADE_TASK_COMPLETION,
    OP_USER_WORKLOAD_BALANCING, OP_AUTOMATED_TASK_ESCALATION,
    OP_BATCH_REMINDER_CREATION, OP_DEPARTMENT_PERFORMANCE_ANALYSIS,
})

# ── Audit actions ────────────────────────────────────────────
AUDIT_TASK_COMPLETED       = "complete"
AUDIT_TASK_UNLOCKED        = "unlock"
AUDIT_TASK_ASSIGNED        = "assign"
AUDIT_TASK_ESCALATED       = "escalate"
AUDIT_REMINDERS_CREATED    = "create_reminders"
AUDIT_WORKLOAD_ANALYSIS    = "workload_analysis"

ANALYTICS_ENTITY = "analytics"

# ── Task vocabulary ──────────────────────────────────────────
STATUS_PENDING     = "pending"
STATUS_READY       = "ready"
STATUS_ASSIGNED    = "assigned"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED   = "completed"
STATUS_CANCELLED   = "cancelled"

VALID_TASK_STATUSES = frozenset({
    STATUS_PENDING, STATUS_READY, STATUS_ASSIGNED,
    STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED,
})
OPEN_TASK_STATUSES = frozenset({STATUS_ASSIGNED, STATUS_IN_PROGRESS})

PRIORITY_LOW      = "low"
PRIORITY_MEDIUM   = "medium"
PRIORITY_HIGH     = "high"
PRIORITY_CRITICAL = "critical"

VALID_TASK_PRIORITIES = frozenset({
    PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_CRITICAL,
})
PRIORITY_RANK = {
    PRIORITY_LOW: 0, PRIORITY_MEDIUM: 1, PRIORITY_HIGH: 2, PRIORITY_CRITICAL: 3,
}

# ── Workload classification ──────────────────────────────────
UNDERLOADED = "underloaded"
BALANCED    = "balanced"
OVERLOADED  = "overloaded"

# ── Recommendation types ─────────────────────────────────────
RECOMMEND_ASSIGN_UNASSIGNED = "assign_unassigned"
RECOMMEND_REDISTRIBUTE      = "redistribute"

# ── Reminder vocabulary ──────────────────────────────────────
REMINDER_ESCALATION = "escalation"
REMINDER_DEADLINE   = "deadline"
REMINDER_OVERDUE    = "overdue"
REMINDER_FOLLOW_UP  = "follow_up"

VALID_REMINDER_TYPES = frozenset({
    REMINDER_ESCALATION, REMINDER_DEADLINE, REMINDER_OVERDUE, REMINDER_FOLLOW_UP,
})
BATCH_REMINDER_TYPES = frozenset({
    REMINDER_DEADLINE, REMINDER_OVERDUE, REMINDER_FOLLOW_UP,
})

REMINDER_PENDING   = "pending"
REMINDER_SENT      = "sent"
REMINDER_CANCELLED = "cancelled"
