"""
Binary attachment carried by a chat turn (receipt image, scanned PDF).

The payload is kept as raw bytes; each provider family picks its own wire
encoding (bare base64 for inline data, a ``data:`` URL for image content
parts).
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass


@dataclass(frozen=True)
class Attachment:
    """Mime type plus raw bytes."""

    mime_type: str
    data: bytes

    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64()}"

    @classmethod
    def from_base64(cls, mime_type: str, encoded: str) -> "Attachment":
        """Decode base64 (or a full data URL) into an attachment.

        Raises ``ValueError`` on malformed input.
        """
        payload = encoded.strip()
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("attachment content is not valid base64") from exc
        return cls(mime_type=mime_type, data=raw)


__all__ = ["Attachment"]
