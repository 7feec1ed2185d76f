"""
Crewdesk Django Adapter Wiring
================================
Builds the task rules dispatcher for local/staging runs.

Adapter-only glue: in-memory Store, audit entries written to the
`crewdesk.audit` logger, system clock, rules read from the Django
setting CREWDESK_RULES.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from django.conf import settings

from core.audit.sink import LoggingAuditSink
from core.commands.dispatcher import OperationDispatcher
from core.config.rules import RulesConfig, load_rules
from core.resilience.guard import ExclusiveRunGuard
from core.store.memory import InMemoryStore
from core.time.clock import SystemClock
from engines.task_rules.services import build_task_rules_dispatcher


_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: "AdapterDependencies | None" = None


@dataclass(frozen=True)
class AdapterDependencies:
    store: InMemoryStore
    audit_sink: LoggingAuditSink
    rules: RulesConfig
    guard: ExclusiveRunGuard
    dispatcher: OperationDispatcher


def _create_dependencies() -> AdapterDependencies:
    store = InMemoryStore()
    audit_sink = LoggingAuditSink()
    rules = load_rules(getattr(settings, "CREWDESK_RULES", None))
    guard = ExclusiveRunGuard()
    dispatcher = build_task_rules_dispatcher(
        store,
        audit_sink=audit_sink,
        clock=SystemClock(),
        rules=rules,
        guard=guard,
    )
    return AdapterDependencies(
        store=store,
        audit_sink=audit_sink,
        rules=rules,
        guard=guard,
        dispatcher=dispatcher,
    )


def build_dependencies() -> AdapterDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the singleton; the next request rebuilds it."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
