"""Correlation fields shared by every event of one orchestrator call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Who is being called and on behalf of which operation.

    ``operation`` is ``audit.structured``, ``audit.document`` or ``chat``;
    ``call_id`` ties the transport, stream and state-transition events of a
    single call together. Unset fields are left out of the log line.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    call_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        fields = (
            ("provider", self.provider),
            ("model", self.model),
            ("operation", self.operation),
            ("call_id", self.call_id),
        )
        return {k: v for k, v in fields if v is not None}


__all__ = ["LogContext"]
