"""Gemini provider family (primary multimodal provider).

Talks to the ``generateContent`` REST surface directly over HTTP; the key
travels as the ``key`` query parameter.

Request shapes
--------------
* Single-shot (structured audit, document analysis)::

    POST {base}/v1beta/models/{model}:generateContent?key=...
    {"contents": [{"parts": [{"text": ...}, {"inlineData": {...}}]}],
     "systemInstruction"?: {"parts": [{"text": ...}]},
     "generationConfig"?: {"responseMimeType": "application/json",
                           "responseSchema": {...}}}

* Chat: ``contents`` is the whole conversation with ``user``/``model`` roles
  followed by the new user turn.

Streaming uses ``:streamGenerateContent``. In ``sse`` mode ``alt=sse`` is added
and frames arrive as ``data:`` lines; in ``json_array`` mode the server writes
a single JSON array incrementally and frames are cut out by brace balancing.
Either way the text increment is ``candidates[0].content.parts[0].text``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.interfaces import ProviderFamily
from ..base.models import ChatTurn, Conversation, OutboundRequest, OutputSchema, ProviderConfig
from ..base.payloads import apply_auth, dig, with_schema_prompt
from ..base.streaming import BraceObjectDecoder, FrameDecoder, SseLineDecoder
from ..base.tokens import extract_gemini_token_usage
from ..config.defaults import GEMINI_API_VERSION

_TEXT_PATH = ("candidates", 0, "content", "parts", 0, "text")


def _parts(turn: ChatTurn, text: Optional[str] = None) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = [{"text": turn.text if text is None else text}]
    parts.extend(
        {"inlineData": {"mimeType": att.mime_type, "data": att.base64()}} for att in turn.attachments
    )
    return parts


def model_url(config: ProviderConfig, model: str, stream: bool) -> str:
    method = "streamGenerateContent" if stream else "generateContent"
    return f"{config.endpoint}/{GEMINI_API_VERSION}/models/{model}:{method}"


class GeminiFamily(ProviderFamily):
    """``generateContent`` request builder and response reader."""

    name = "gemini"

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
        native_schema = output_schema is not None and self.supports_structured_output(config)
        text = message.text
        if output_schema is not None and not native_schema:
            text = with_schema_prompt(text, output_schema)

        if conversation is None:
            contents: List[Dict[str, Any]] = [{"parts": _parts(message, text)}]
        else:
            contents = [{"role": turn.role, "parts": _parts(turn)} for turn in conversation]
            contents.append({"role": "user", "parts": _parts(message, text)})

        body: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if native_schema:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": dict(output_schema.schema),  # type: ignore[union-attr]
            }
        elif output_schema is not None:
            body["generationConfig"] = {"responseMimeType": "application/json"}

        params: Dict[str, str] = {}
        headers = {"Content-Type": "application/json"}
        apply_auth(config, headers, params)
        if stream and config.stream_mode == "sse":
            params["alt"] = "sse"
        return OutboundRequest(
            method="POST",
            url=model_url(config, config.model_for(vision=message.has_attachments), stream),
            params=params,
            headers=headers,
            json_body=body,
            stream=stream,
        )

    def extract_text(self, frame: Mapping[str, Any]) -> Optional[str]:
        text = dig(frame, *_TEXT_PATH)
        return text if isinstance(text, str) else None

    def extract_response_text(self, body: Mapping[str, Any]) -> str:
        return self.extract_text(body) or ""

    def stream_decoder(self, config: ProviderConfig) -> FrameDecoder:
        if config.stream_mode == "json_array":
            return BraceObjectDecoder()
        return SseLineDecoder()

    def extract_usage(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Optional[int]]]:
        return extract_gemini_token_usage(payload)


__all__ = ["GeminiFamily", "model_url"]
