"""auditai_providers package

AI provider layer for financial auditing: structured audits of transaction
data, forensic analysis of receipt images and documents, and a streaming
consultant chat, over Gemini and the OpenAI-compatible DeepSeek, GPT and Qwen
endpoints.

Public API (re-exported):
    - Version: ``__version__``
    - Operations: :func:`analyze_structured_data`, :func:`analyze_document`,
      :func:`send_chat_message` and :class:`AuditOrchestrator`
    - Registry: :class:`ProviderRegistry`, :func:`get_registry`
    - Values: :class:`ProviderId`, :class:`ChatTurn`, :class:`Attachment`,
      :class:`AuditScenario`, :class:`Language`,
      :class:`StructuredAuditResult`, :class:`CancellationToken`
    - Exceptions: :class:`ProviderError` and its subclasses,
      :class:`CancelledError`, :class:`ErrorCode`
"""

__version__ = "0.1.0"

from .base.errors import (
    ConfigurationError,
    CredentialRevokedError,
    ErrorCode,
    ModelUnreachableError,
    ParseError,
    ProviderError,
    TransportError,
)
from .base.cancellation import CancellationToken, CancelledError
from .base.dto import StructuredAuditResult
from .base.models import Attachment, AuditScenario, ChatTurn, Language, ProviderId
from .registry import ProviderRegistry, get_registry
from .audit import (
    AuditOrchestrator,
    analyze_document,
    analyze_structured_data,
    get_orchestrator,
    send_chat_message,
)

__all__ = [
    # Version
    "__version__",
    # Operations
    "AuditOrchestrator",
    "get_orchestrator",
    "analyze_structured_data",
    "analyze_document",
    "send_chat_message",
    # Registry
    "ProviderRegistry",
    "get_registry",
    # Values
    "ProviderId",
    "ChatTurn",
    "Attachment",
    "AuditScenario",
    "Language",
    "StructuredAuditResult",
    "CancellationToken",
    # Exceptions
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "TransportError",
    "ParseError",
    "CredentialRevokedError",
    "ModelUnreachableError",
    "CancelledError",
]
