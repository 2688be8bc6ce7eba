"""
Conversation turn DTO.

A conversation is an ordered sequence of ``ChatTurn`` values in chronological
order; builders never reorder it. ``Role`` follows the multimodal provider's
vocabulary (``user`` / ``model``); OpenAI-compatible builders map ``model``
to ``assistant``. An ``assistant`` role is accepted on input and stored as
``model``; any other role raises ``ValueError``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Sequence, Tuple

from .attachment import Attachment

Role = Literal["user", "model"]

# OpenAI-style histories say "assistant" for the model side.
_ROLE_ALIASES = {"user": "user", "model": "model", "assistant": "model"}


@dataclass(frozen=True)
class ChatTurn:
    """One immutable message in a conversation.

    Attributes:
        role: ``"user"`` or ``"model"``.
        text: Plain text content (may be empty when only attachments are sent).
        attachments: Ordered attachments; empty for plain text turns.
    """

    role: Role
    text: str
    attachments: Tuple[Attachment, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        role = _ROLE_ALIASES.get(str(self.role).strip().lower())
        if role is None:
            raise ValueError(f"unsupported chat role: {self.role!r}")
        object.__setattr__(self, "role", role)
        object.__setattr__(self, "attachments", tuple(self.attachments))

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)

    @classmethod
    def user(cls, text: str, attachments: Sequence[Attachment] = ()) -> "ChatTurn":
        return cls(role="user", text=text, attachments=tuple(attachments))

    @classmethod
    def model(cls, text: str) -> "ChatTurn":
        return cls(role="model", text=text)


Conversation = Sequence[ChatTurn]


__all__ = [
    "ChatTurn",
    "Conversation",
    "Role",
]
