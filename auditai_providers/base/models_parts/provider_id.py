"""
Closed provider identifier and authentication scheme enums.

``ProviderId`` is the one place the set of supported backends is spelled out;
everything else (defaults, family lookup, registry) is keyed by it.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ProviderId(str, Enum):
    """Supported LLM backends."""

    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    GPT = "gpt"
    QWEN = "qwen"

    @classmethod
    def parse(cls, value: "str | ProviderId | None") -> Optional["ProviderId"]:
        """Return the matching member, or ``None`` for unknown/empty input.

        Matching is case-insensitive and ignores surrounding whitespace.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class AuthScheme(str, Enum):
    """How the credential is attached to an outbound request."""

    BEARER = "bearer"  # Authorization: Bearer <key>
    QUERY_KEY = "query_key"  # ?key=<key>


__all__ = [
    "ProviderId",
    "AuthScheme",
]
