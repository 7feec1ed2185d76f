"""
Crewdesk Operation Layer: Error Reasons
=========================================
Structured explanation attached to every FAILED operation result.

Every error reason must be:
- Machine-readable (code)
- Human-readable (message)
- Attributable (operation that produced it)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ErrorReason:
    """
    Fields:
        code:      Machine-readable code (see ReasonCode).
        message:   Human-readable explanation.
        operation: Operation name the error belongs to ('' if unknown).
        details:   Extra machine-readable context.
    """

    code: str
    message: str
    operation: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


# ══════════════════════════════════════════════════════════════
# STANDARD ERROR CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known error codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Request ───────────────────────────────────────────────
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"

    # ── Store ─────────────────────────────────────────────────
    NOT_FOUND = "NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"

    # ── Execution ─────────────────────────────────────────────
    RUN_IN_PROGRESS = "RUN_IN_PROGRESS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
