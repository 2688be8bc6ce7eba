"""
Pydantic DTOs for inbound service requests.

Purpose
-------
Validate HTTP/CLI payloads at the edge before they reach the orchestrator.
Validation either succeeds or raises ``pydantic.ValidationError``; the FastAPI
layer turns that into a 422 response.

Design
------
- Keep DTOs minimal and framework-agnostic.
- Map to the frozen dataclasses in ``auditai_providers.base.models`` via
  ``to_turn`` / ``to_attachment`` helpers.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import Attachment, AuditScenario, ChatTurn, Language


class AttachmentDTO(BaseModel):
    """Base64 encoded attachment (bare base64 or a ``data:`` URL)."""

    mime_type: str = Field(min_length=1)
    content: str = Field(min_length=1)

    def to_attachment(self) -> Attachment:
        return Attachment.from_base64(self.mime_type, self.content)


class ChatTurnDTO(BaseModel):
    role: Literal["user", "model", "assistant"]
    text: str = ""
    attachments: List[AttachmentDTO] = Field(default_factory=list)

    def to_turn(self) -> ChatTurn:
        return ChatTurn(
            role=self.role,
            text=self.text,
            attachments=tuple(a.to_attachment() for a in self.attachments),
        )


class AuditRequestDTO(BaseModel):
    """Body of ``POST /api/audit``."""

    data: str
    provider: str = "gemini"
    language: Language = Language.EN
    scenario: AuditScenario = AuditScenario.GENERAL

    @field_validator("data")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("data must be non-empty")
        return v


class DocumentRequestDTO(AttachmentDTO):
    """Body of ``POST /api/documents``."""

    provider: str = "gemini"
    language: Language = Language.EN
    scenario: AuditScenario = AuditScenario.GENERAL


class ChatRequestDTO(BaseModel):
    """Body of ``POST /api/chat``.

    ``history`` is in chronological order; ``stream`` switches the response to
    ``text/event-stream``.
    """

    history: List[ChatTurnDTO] = Field(default_factory=list)
    message: str
    provider: str = "gemini"
    language: Language = Language.EN
    stream: bool = False
    attachments: Optional[List[AttachmentDTO]] = None

    @field_validator("message")
    @classmethod
    def _message_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must be non-empty")
        return v

    def conversation(self) -> List[ChatTurn]:
        return [t.to_turn() for t in self.history]


__all__ = [
    "AttachmentDTO",
    "ChatTurnDTO",
    "AuditRequestDTO",
    "DocumentRequestDTO",
    "ChatRequestDTO",
]
