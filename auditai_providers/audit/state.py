"""Per-call state machine.

Every orchestrator call walks::

    idle -> building -> sent -> streaming -> completed
                             -> awaiting_response -> completed
    (building | sent | streaming | awaiting_response) -> failed

``CallTracker`` rejects any other move with ``RuntimeError`` (a programming
error, not a provider failure) and logs each transition as a normalized
event so one call's lifecycle can be followed through its ``call_id``.
A parse failure after the response arrived is recorded as
``awaiting_response -> failed``; ``completed`` is only entered once the
result is ready to return.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from ..base.errors import ErrorCode
from ..base.logging import LogContext, get_logger, normalized_log_event


class CallPhase(str, Enum):
    IDLE = "idle"
    BUILDING = "building"
    SENT = "sent"
    STREAMING = "streaming"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED: Dict[CallPhase, FrozenSet[CallPhase]] = {
    CallPhase.IDLE: frozenset({CallPhase.BUILDING}),
    CallPhase.BUILDING: frozenset({CallPhase.SENT, CallPhase.FAILED}),
    CallPhase.SENT: frozenset({CallPhase.STREAMING, CallPhase.AWAITING_RESPONSE, CallPhase.FAILED}),
    CallPhase.STREAMING: frozenset({CallPhase.COMPLETED, CallPhase.FAILED}),
    CallPhase.AWAITING_RESPONSE: frozenset({CallPhase.COMPLETED, CallPhase.FAILED}),
    CallPhase.COMPLETED: frozenset(),
    CallPhase.FAILED: frozenset(),
}

_logger = get_logger("audit.state")


class CallTracker:
    """Tracks and logs the phase of one orchestrator call."""

    def __init__(self, operation: str, provider: str, model: Optional[str] = None) -> None:
        self.ctx = LogContext(
            provider=provider,
            model=model,
            operation=operation,
            call_id=uuid.uuid4().hex[:12],
        )
        self.phase = CallPhase.IDLE
        self.history: List[CallPhase] = [CallPhase.IDLE]

    @property
    def terminal(self) -> bool:
        return self.phase in (CallPhase.COMPLETED, CallPhase.FAILED)

    def advance(self, target: CallPhase, **fields) -> None:
        if target not in _ALLOWED[self.phase]:
            raise RuntimeError(f"illegal call transition {self.phase.value} -> {target.value}")
        self.phase = target
        self.history.append(target)
        normalized_log_event(
            _logger,
            "call.transition",
            self.ctx,
            phase=target.value,
            attempt=1,
            **fields,
        )

    def fail(self, code: ErrorCode | str) -> None:
        """Move to ``failed`` unless already terminal."""
        if self.terminal:
            return
        value = code.value if isinstance(code, ErrorCode) else code
        self.phase = CallPhase.FAILED
        self.history.append(CallPhase.FAILED)
        normalized_log_event(
            _logger,
            "call.transition",
            self.ctx,
            phase=CallPhase.FAILED.value,
            attempt=1,
            error_code=value,
            level=logging.WARNING,
        )


__all__ = ["CallPhase", "CallTracker"]
