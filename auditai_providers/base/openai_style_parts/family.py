"""
OpenAI-compatible provider family (DeepSeek, OpenAI, Qwen).

All three speak the chat-completions dialect at a full endpoint URL with a
bearer token. Differences between them are configuration only (endpoint,
model, vision model, capability flags), so a single family instance serves
every OpenAI-style provider id.

Wire shape::

    POST {endpoint}
    Authorization: Bearer {key}
    {"model", "messages", "stream", "temperature": 0.1,
     "response_format"?: {"type": "json_object"}}

Streaming uses SSE ``data:`` lines whose text lives at
``choices[0].delta.content``; single-shot replies carry it at
``choices[0].message.content``.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ...config.defaults import OPENAI_STYLE_TEMPERATURE
from ..interfaces import ProviderFamily
from ..models import ChatTurn, Conversation, OutboundRequest, OutputSchema, ProviderConfig
from ..payloads import apply_auth, dig, with_schema_prompt
from ..streaming import FrameDecoder, SseLineDecoder
from ..tokens import extract_openai_token_usage
from .payload import build_messages


class OpenAIStyleFamily(ProviderFamily):
    """Chat-completions request builder and response reader."""

    name = "openai_style"

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
        text = message.text
        if output_schema is not None:
            # Only generic JSON mode here; the structure travels in the prompt.
            text = with_schema_prompt(text, output_schema)
        body: Dict[str, Any] = {
            "model": config.model_for(vision=message.has_attachments),
            "messages": build_messages(
                conversation,
                message,
                system_instruction=system_instruction,
                message_text=text,
            ),
            "stream": stream,
            "temperature": OPENAI_STYLE_TEMPERATURE,
        }
        if output_schema is not None:
            body["response_format"] = {"type": "json_object"}
        headers = {"Content-Type": "application/json"}
        params: Dict[str, str] = {}
        apply_auth(config, headers, params)
        return OutboundRequest(
            method="POST",
            url=config.endpoint,
            params=params,
            headers=headers,
            json_body=body,
            stream=stream,
        )

    def extract_text(self, frame: Mapping[str, Any]) -> Optional[str]:
        delta = dig(frame, "choices", 0, "delta", "content")
        return delta if isinstance(delta, str) else None

    def extract_response_text(self, body: Mapping[str, Any]) -> str:
        content = dig(body, "choices", 0, "message", "content")
        return content if isinstance(content, str) else ""

    def stream_decoder(self, config: ProviderConfig) -> FrameDecoder:
        return SseLineDecoder()

    def extract_usage(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Optional[int]]]:
        return extract_openai_token_usage(payload)


__all__ = ["OpenAIStyleFamily"]
