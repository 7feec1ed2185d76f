"""
Crewdesk Operation Layer
==========================
Every request names one operation.
Every request produces exactly one OperationResult.
FAILED results are first-class: they always carry a reason.
"""

from core.commands.base import OperationRequest
from core.commands.dispatcher import OperationDispatcher, OperationHandler
from core.commands.outcomes import OperationResult, OperationStatus
from core.commands.rejection import ErrorReason, ReasonCode
from core.commands.validator import (
    OperationValidationError,
    optional_str,
    require_choice,
    require_datetime,
    require_number,
    require_str,
    require_str_list,
)

__all__ = [
    # ── Request ───────────────────────────────────────────────
    "OperationRequest",
    # ── Results ───────────────────────────────────────────────
    "OperationResult",
    "OperationStatus",
    "ErrorReason",
    "ReasonCode",
    # ── Validation ────────────────────────────────────────────
    "OperationValidationError",
    "optional_str",
    "require_choice",
    "require_datetime",
    "require_number",
    "require_str",
    "require_str_list",
    # ── Dispatcher ────────────────────────────────────────────
    "OperationDispatcher",
    "OperationHandler",
]
