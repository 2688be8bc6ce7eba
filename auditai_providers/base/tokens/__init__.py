"""Token usage helpers package."""

from .extraction import (
    CanonicalUsage,
    extract_gemini_token_usage,
    extract_openai_token_usage,
)

__all__ = [
    "CanonicalUsage",
    "extract_gemini_token_usage",
    "extract_openai_token_usage",
]
