"""Public import location for ``CancellationToken`` and ``CancelledError``.

A chat caller passes a token to ``send_chat_message``; once cancelled, the
stream is closed before the next chunk and ``CancelledError`` propagates.
Text already handed to the sink stays valid.
"""

from .cancellation_parts.cancellation_token import CancellationToken
from .cancellation_parts.cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
