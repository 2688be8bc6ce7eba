"""
Structured provider error exception types.

Wraps every failure the provider layer surfaces with a normalized `ErrorCode`
for consistent handling and structured logging. Subclasses exist per failure
category so callers can ``except`` on the kind they care about while generic
handlers still catch :class:`ProviderError`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message suitable for showing to the user.
        provider: Provider id where the error originated (e.g., ``"qwen"``).
        model: Optional model name associated with the failure.
        status: HTTP status when the failure came from a provider response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class ConfigurationError(ProviderError):
    """Missing credential or unsupported capability; raised before any I/O."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION, message=message, provider=provider, model=model)


class TransportError(ProviderError):
    """Network failure (connect/read/reset) or timeout talking to a provider."""


class ParseError(ProviderError):
    """Provider reply is empty, not JSON, or does not match the expected schema."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.PARSE, message=message, provider=provider, model=model, raw=raw)


class CredentialRevokedError(ProviderError):
    """Provider rejected the key as invalid or leaked."""


class ModelUnreachableError(ProviderError):
    """Provider returned 404 for the model endpoint (often a network/region block)."""


__all__ = [
    "ProviderError",
    "ConfigurationError",
    "TransportError",
    "ParseError",
    "CredentialRevokedError",
    "ModelUnreachableError",
]
