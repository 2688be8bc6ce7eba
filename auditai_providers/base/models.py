"""
Provider-agnostic domain models public surface.

This module re-exports the one-class-per-file implementations under
``auditai_providers.base.models_parts``: provider identity and configuration,
conversation values, audit selectors and the transport-ready request.
"""

from .models_parts.provider_id import AuthScheme, ProviderId
from .models_parts.provider_config import ProviderConfig, StreamMode
from .models_parts.attachment import Attachment
from .models_parts.chat_turn import ChatTurn, Conversation, Role
from .models_parts.audit_options import AuditScenario, Language
from .models_parts.output_schema import OutputSchema
from .models_parts.outbound_request import OutboundRequest

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
