"""
Crewdesk Operation Layer: Dispatcher
======================================
Accept raw request -> route by operation name -> run handler ->
produce OperationResult.

The Dispatcher is pure routing. It holds no business rules and
never lets an exception escape: every call returns a structured
result or a structured error.

Handlers are registered per operation name and must expose
`execute(params: dict) -> dict`. The returned dict becomes the
result data; a non-empty "failures" list marks the result PARTIAL
and an optional "message" key becomes the result message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from core.commands.base import OperationRequest
from core.commands.outcomes import OperationResult, OperationStatus
from core.commands.rejection import ErrorReason, ReasonCode
from core.commands.validator import OperationValidationError
from core.resilience.guard import RunInProgress
from core.store.errors import ConcurrencyConflict, NotFound, StoreError
from core.time.clock import Clock, SystemClock

logger = logging.getLogger("crewdesk.commands")


class OperationHandler(Protocol):
    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ...  # pragma: no cover


class OperationDispatcher:
    """
    Usage:
        dispatcher = OperationDispatcher(clock=SystemClock())
        dispatcher.register_handler("cascade_task_completion", resolver)

        result = dispatcher.dispatch({"operation": "cascade_task_completion", ...})
        body = result.to_dict()
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._handlers: Dict[str, OperationHandler] = {}

    # ══════════════════════════════════════════════════════════
    # HANDLER REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register_handler(self, operation: str, handler: OperationHandler) -> None:
        if not operation or not isinstance(operation, str):
            raise ValueError("operation must be a non-empty string.")

        if not hasattr(handler, "execute") or not callable(handler.execute):
            raise TypeError("Handler must have callable .execute() method.")

        if operation in self._handlers:
            raise ValueError(f"Handler already registered for '{operation}'.")

        self._handlers[operation] = handler
        logger.debug(f"Handler registered: {operation}")

    @property
    def operations(self) -> frozenset:
        return frozenset(self._handlers)

    # ══════════════════════════════════════════════════════════
    # DISPATCH
    # ══════════════════════════════════════════════════════════

    def dispatch(self, payload: Any) -> OperationResult:
        """
        Flow:
        1. Parse discriminator -> missing/unknown operation is FAILED
        2. Run handler -> known errors map to their codes
        3. Handler output -> SUCCEEDED, or PARTIAL if it reports failures
        """
        try:
            request = OperationRequest.from_payload(payload)
        except OperationValidationError as exc:
            operation = payload.get("operation") if isinstance(payload, dict) else None
            return self._failed(str(operation or ""), exc.code, exc.message)

        handler = self._handlers.get(request.operation)
        if handler is None:
            logger.info(f"Unknown operation requested: {request.operation}")
            return self._failed(
                request.operation,
                ReasonCode.UNKNOWN_OPERATION,
                f"Unknown operation: {request.operation}",
            )

        try:
            data = handler.execute(request.params)
        except OperationValidationError as exc:
            logger.info(f"{request.operation} rejected: [{exc.code}] {exc.message}")
            details = {"field": exc.field} if exc.field else {}
            return self._failed(request.operation, exc.code, exc.message, details)
        except NotFound as exc:
            logger.info(f"{request.operation} failed: {exc.message}")
            return self._failed(
                request.operation,
                ReasonCode.NOT_FOUND,
                exc.message,
                {"entity": exc.entity, "id": str(exc.record_id)},
            )
        except ConcurrencyConflict as exc:
            logger.warning(f"{request.operation} conflict: {exc.message}")
            return self._failed(
                request.operation,
                ReasonCode.CONCURRENCY_CONFLICT,
                exc.message,
                {"entity": exc.entity, "id": str(exc.record_id)},
            )
        except StoreError as exc:
            logger.error(f"{request.operation} store failure: {exc.message}")
            return self._failed(request.operation, ReasonCode.STORE_ERROR, exc.message)
        except RunInProgress as exc:
            logger.info(f"{request.operation} skipped: {exc.message}")
            return self._failed(request.operation, ReasonCode.RUN_IN_PROGRESS, exc.message)
        except Exception:
            logger.exception(f"{request.operation} crashed")
            return self._failed(
                request.operation,
                ReasonCode.INTERNAL_ERROR,
                "Unexpected error while executing operation.",
            )

        data = dict(data or {})
        message = str(data.pop("message", ""))
        status = (
            OperationStatus.PARTIAL if data.get("failures") else OperationStatus.SUCCEEDED
        )
        logger.info(f"{request.operation} {status.value}")
        return OperationResult(
            operation=request.operation,
            status=status,
            occurred_at=self._clock.now_utc(),
            data=data,
            message=message,
        )

    def _failed(
        self,
        operation: str,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> OperationResult:
        return OperationResult(
            operation=operation,
            status=OperationStatus.FAILED,
            occurred_at=self._clock.now_utc(),
            error=ErrorReason(
                code=code,
                message=message,
                operation=operation,
                details=details or {},
            ),
        )
