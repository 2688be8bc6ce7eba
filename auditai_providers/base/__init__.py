"""
Providers Base Package

Exports provider-agnostic contracts, value types and helpers for use within
the provider layer and by the audit orchestrator:

- Models: provider identity/config, conversation turns, attachments
- Errors: normalized taxonomy and response classification
- Families: one wire dialect per family, looked up by provider id
- Transport helpers: timeouts, cancellation and incremental stream decoding
"""

from .models import (
    Attachment,
    AuditScenario,
    AuthScheme,
    ChatTurn,
    Conversation,
    Language,
    OutboundRequest,
    OutputSchema,
    ProviderConfig,
    ProviderId,
)
from .errors import (
    ConfigurationError,
    CredentialRevokedError,
    ErrorCode,
    ModelUnreachableError,
    ParseError,
    ProviderError,
    TransportError,
)
from .interfaces import ProviderFamily
from .factory import get_family
from .timeouts import TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .streaming import StreamAccumulator, StreamMetrics

__all__ = [
    # Models
    "Attachment",
    "AuditScenario",
    "AuthScheme",
    "ChatTurn",
    "Conversation",
    "Language",
    "OutboundRequest",
    "OutputSchema",
    "ProviderConfig",
    "ProviderId",
    # Errors
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "TransportError",
    "ParseError",
    "CredentialRevokedError",
    "ModelUnreachableError",
    # Families
    "ProviderFamily",
    "get_family",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
    # Streaming
    "StreamAccumulator",
    "StreamMetrics",
]
