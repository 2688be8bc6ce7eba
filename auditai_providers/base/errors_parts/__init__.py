"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `auditai_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
    ConfigurationError,
    CredentialRevokedError,
    ModelUnreachableError,
    ParseError,
    ProviderError,
    TransportError,
)
from .classification import ClassifiedError, classify_exception, classify_response

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "TransportError",
    "ParseError",
    "CredentialRevokedError",
    "ModelUnreachableError",
    "ClassifiedError",
    "classify_exception",
    "classify_response",
]
