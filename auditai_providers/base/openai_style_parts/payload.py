"""
Message and body helpers for OpenAI-compatible chat-completions providers.

Purpose:
- Translate ``ChatTurn`` values into chat-completions ``messages``.
- Keep the family class short; no network I/O happens here.

Role mapping: ``model`` turns become ``assistant``. A turn with attachments
is sent as a content-part list (one ``text`` part followed by one
``image_url`` part per attachment, each a ``data:`` URL); a plain turn is
sent as a string.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..models import ChatTurn, Conversation

_ROLE_MAP = {"user": "user", "model": "assistant"}


def turn_content(turn: ChatTurn, text: Optional[str] = None) -> Union[str, List[Dict[str, Any]]]:
    """Content for one message; ``text`` overrides the turn's own text."""
    body = turn.text if text is None else text
    if not turn.has_attachments:
        return body
    parts: List[Dict[str, Any]] = [{"type": "text", "text": body}]
    parts.extend(
        {"type": "image_url", "image_url": {"url": att.data_url()}} for att in turn.attachments
    )
    return parts


def build_messages(
    conversation: Optional[Conversation],
    message: ChatTurn,
    *,
    system_instruction: Optional[str] = None,
    message_text: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Assemble ``[system?, ...history, new]`` in chronological order."""
    messages: List[Dict[str, Any]] = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    for turn in conversation or ():
        messages.append({"role": _ROLE_MAP[turn.role], "content": turn_content(turn)})
    messages.append({"role": "user", "content": turn_content(message, message_text)})
    return messages


__all__ = ["build_messages", "turn_content"]
