"""Request building entry point shared by every provider family.

``build_request`` is the only public way to turn a provider-agnostic call
into an ``OutboundRequest``. It enforces the two fail-fast rules before any
family code runs:

* an empty credential raises ``ConfigurationError("<Display> API Key is missing.")``;
* attachments sent to a provider without vision support raise
  ``ConfigurationError``.

Both checks happen before the transport is touched, so no network call is
ever attempted for a request that cannot succeed.

The module also hosts the small helpers the families share: credential
placement by ``AuthScheme``, schema-as-prompt rendering for providers without
native structured output, and safe nested lookups into decoded JSON.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from .errors import ConfigurationError
from .models import AuthScheme, ChatTurn, Conversation, OutboundRequest, OutputSchema, ProviderConfig

JSON_STRUCTURE_HEADER = "JSON Structure:"


def apply_auth(config: ProviderConfig, headers: Dict[str, str], params: Dict[str, str]) -> None:
    """Place the credential according to ``config.auth_scheme`` (in place)."""
    if config.auth_scheme is AuthScheme.QUERY_KEY:
        params["key"] = config.api_key
    else:
        headers["Authorization"] = f"Bearer {config.api_key}"


def with_schema_prompt(text: str, schema: OutputSchema) -> str:
    """Append the schema skeleton to a prompt for JSON-mode-only providers."""
    return f"{text.rstrip()}\n\n{JSON_STRUCTURE_HEADER}\n{schema.render_skeleton()}"


def dig(payload: Any, *path: Union[str, int]) -> Any:
    """Follow ``path`` through nested dicts/lists; ``None`` on any miss."""
    node = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
            node = node[key]
        else:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
    return node


def _has_attachments(conversation: Optional[Conversation], message: ChatTurn) -> bool:
    if message.has_attachments:
        return True
    return any(turn.has_attachments for turn in conversation or ())


def build_request(
    config: ProviderConfig,
    conversation: Optional[Conversation],
    message: Union[str, ChatTurn],
    *,
    system_instruction: Optional[str] = None,
    output_schema: Optional[OutputSchema] = None,
    stream: bool = False,
) -> OutboundRequest:
    """Build the outbound request for ``config``'s provider family.

    Parameters:
        config: Provider configuration (from the registry).
        conversation: Prior turns for chat, ``None`` for single-shot calls.
        message: The new user message; a plain string or a ``ChatTurn``
            carrying attachments.
        system_instruction: Optional system prompt.
        output_schema: Request structured JSON output matching this schema.
        stream: Build a streaming request.

    Raises:
        ConfigurationError: Missing credential or unsupported vision input.
    """
    from .factory import get_family

    turn = message if isinstance(message, ChatTurn) else ChatTurn.user(message)
    provider = config.identifier.value
    if not config.has_credential:
        raise ConfigurationError(f"{config.display_name} API Key is missing.", provider, config.model)
    family = get_family(config.identifier)
    if _has_attachments(conversation, turn) and not family.supports_vision(config):
        raise ConfigurationError(
            f"{config.display_name} does not support image or document input.",
            provider,
            config.model,
        )
    return family.build_request(
        config,
        conversation,
        turn,
        system_instruction=system_instruction,
        output_schema=output_schema,
        stream=stream,
    )


__all__ = [
    "JSON_STRUCTURE_HEADER",
    "apply_auth",
    "with_schema_prompt",
    "dig",
    "build_request",
]
