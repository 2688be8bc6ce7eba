"""Cooperative cancellation for streaming chat calls.

A chat caller (an HTTP handler noticing a disconnect, a CLI interrupt) holds
the token; ``StreamAccumulator`` polls it before consuming each chunk and
closes the response once it is set. Only the first ``cancel`` records a
reason.
"""

from __future__ import annotations

import threading
from typing import Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """One-shot flag shared by the caller and the stream reader."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Request cancellation; ``False`` when it was already requested."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            return True

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError(self._reason or "stream cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
