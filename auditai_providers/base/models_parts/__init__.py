"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`auditai_providers.base.models_parts` if needed, while `auditai_providers.base.models`
remains the primary stable import path.
"""

from .provider_id import AuthScheme, ProviderId
from .provider_config import ProviderConfig, StreamMode
from .attachment import Attachment
from .chat_turn import ChatTurn, Conversation, Role
from .audit_options import AuditScenario, Language
from .output_schema import OutputSchema
from .outbound_request import OutboundRequest

__all__ = [
    "AuthScheme",
    "ProviderId",
    "ProviderConfig",
    "StreamMode",
    "Attachment",
    "ChatTurn",
    "Conversation",
    "Role",
    "AuditScenario",
    "Language",
    "OutputSchema",
    "OutboundRequest",
]
