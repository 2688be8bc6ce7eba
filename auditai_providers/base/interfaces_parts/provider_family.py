"""ProviderFamily interface (single-class module).

One implementation exists per wire family (Gemini's ``generateContent`` and
the OpenAI-compatible chat-completions shape). The family for a provider id is
picked once through the lookup table in ``base.factory``; nothing else
branches on provider ids.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from ..models import ChatTurn, Conversation, OutboundRequest, OutputSchema, ProviderConfig
from ..streaming.frames import FrameDecoder


class ProviderFamily(ABC):
    """Capability set every provider family implements.

    ``build_request`` receives already-validated input: the credential is
    present and vision support was checked by ``base.payloads.build_request``.
    A ``conversation`` of ``None`` means a single-shot call; a sequence (even
    an empty one) means chat.
    """

    name: str = ""

    def supports_vision(self, config: ProviderConfig) -> bool:
        return config.supports_vision

    def supports_structured_output(self, config: ProviderConfig) -> bool:
        return config.supports_structured_output

    @abstractmethod
    def build_request(
        self,
        config: ProviderConfig,
        conversation: Optional[Conversation],
        message: ChatTurn,
        *,
        system_instruction: Optional[str] = None,
        output_schema: Optional[OutputSchema] = None,
        stream: bool = False,
    ) -> OutboundRequest:
        """Produce the transport-ready request for one call."""

    @abstractmethod
    def extract_text(self, frame: Mapping[str, Any]) -> Optional[str]:
        """Text increment carried by one decoded stream frame (or ``None``)."""

    @abstractmethod
    def extract_response_text(self, body: Mapping[str, Any]) -> str:
        """Full reply text of a single-shot response body ("" when absent)."""

    @abstractmethod
    def stream_decoder(self, config: ProviderConfig) -> FrameDecoder:
        """Fresh frame decoder for one streaming response."""

    def extract_usage(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Optional[int]]]:
        """Canonical token usage found in ``payload``; ``None`` by default."""
        return None


__all__ = ["ProviderFamily"]
