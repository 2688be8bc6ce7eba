"""Credential environment variables for the four audit providers.

Each provider has one canonical variable and, for Gemini, two aliases kept for
deployments that predate the canonical name::

    gemini    API_KEY, GEMINI_API_KEY, GOOGLE_API_KEY
    deepseek  DEEPSEEK_API_KEY
    gpt       OPENAI_API_KEY
    qwen      DASHSCOPE_API_KEY

Nothing here raises. An unset credential resolves to ``(None, None)``; the
provider still gets a config and fails when a request is built for it.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# Canonical name first.
CREDENTIAL_ENV: Dict[str, Tuple[str, ...]] = {
    "gemini": ("API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "deepseek": ("DEEPSEEK_API_KEY",),
    "gpt": ("OPENAI_API_KEY",),
    "qwen": ("DASHSCOPE_API_KEY",),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example", "your-key", "your_api_key")


def credential_env_names(provider: str) -> Tuple[str, ...]:
    """Variable names consulted for ``provider``'s key, canonical first."""
    return CREDENTIAL_ENV.get((provider or "").strip().lower(), ())


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """``(value, variable)`` for the first non-empty candidate, else ``(None, None)``."""
    for name in credential_env_names(provider):
        value = os.environ.get(name, "").strip()
        if value:
            return value, name
    return None, None


def is_placeholder(val: Optional[str]) -> bool:
    """True for values copied from a template rather than a real key.

    Matches the markers in ``_PLACEHOLDER_MARKERS`` or a ``test_`` prefix,
    case-insensitively.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return v.startswith("test_") or any(marker in v for marker in _PLACEHOLDER_MARKERS)


def mask_key(value: Optional[str]) -> str:
    if not value:
        return "MISSING"
    if len(value) <= 10:
        return "SHORT_KEY"
    return f"{value[:4]}...{value[-4:]}"


__all__ = [
    "CREDENTIAL_ENV",
    "credential_env_names",
    "resolve_provider_key",
    "is_placeholder",
    "mask_key",
]
