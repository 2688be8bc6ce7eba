"""Token usage extraction helpers.

This module centralizes *best-effort* extraction of token accounting
information from decoded provider JSON payloads (single-shot bodies or
individual stream frames). It converts provider-specific usage field names
into a canonical mapping used throughout the provider layer and structured
logging:

    {"prompt": <int|None>, "completion": <int|None>, "total": <int|None>}

Design Principles
-----------------
1. Non-Intrusive: a payload without usage data yields ``None`` so callers can
   keep a previously seen value (usage usually arrives on the last frame).
2. Coercion: invalid or negative values downgrade to ``None``.
3. Derived Total: if ``total`` is missing but both components are present the
   total is their sum.

Supported Shapes
----------------
OpenAI-compatible:
    ``{"usage": {"prompt_tokens", "completion_tokens", "total_tokens"}}``
Gemini:
    ``{"usageMetadata": {"promptTokenCount", "candidatesTokenCount", "totalTokenCount"}}``
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

CanonicalUsage = Dict[str, Optional[int]]


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce a value to a non-negative ``int`` or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _finalize_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int]) -> Optional[CanonicalUsage]:
    if prompt is None and completion is None and total is None:
        return None
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": total}


def extract_openai_token_usage(payload: Any) -> Optional[CanonicalUsage]:
    """Map an OpenAI-style ``usage`` block; ``None`` when absent."""
    if not isinstance(payload, Mapping):
        return None
    usage = payload.get("usage")
    if not isinstance(usage, Mapping):
        return None
    return _finalize_usage(
        _coerce_int(usage.get("prompt_tokens")),
        _coerce_int(usage.get("completion_tokens")),
        _coerce_int(usage.get("total_tokens")),
    )


def extract_gemini_token_usage(payload: Any) -> Optional[CanonicalUsage]:
    """Map a Gemini ``usageMetadata`` block; ``None`` when absent."""
    if not isinstance(payload, Mapping):
        return None
    usage = payload.get("usageMetadata")
    if not isinstance(usage, Mapping):
        return None
    return _finalize_usage(
        _coerce_int(usage.get("promptTokenCount")),
        _coerce_int(usage.get("candidatesTokenCount")),
        _coerce_int(usage.get("totalTokenCount")),
    )


__all__ = [
    "CanonicalUsage",
    "extract_openai_token_usage",
    "extract_gemini_token_usage",
]
