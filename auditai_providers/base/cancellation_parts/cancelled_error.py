"""Cancellation error type.

Defines the public ``CancelledError`` raised when a chat stream observes a
cancellation request. Kept in its own module so the token and the error can be
imported independently.
"""

from __future__ import annotations

from ..errors_parts.error_code import ErrorCode


class CancelledError(RuntimeError):
    """Raised when a streaming call is cancelled cooperatively.

    Distinct from ``asyncio.CancelledError``: this one means the caller asked
    the stream to stop through a ``CancellationToken`` and the partial text
    already delivered to the sink remains valid.
    """

    code = ErrorCode.CANCELLED


__all__ = ["CancelledError"]
