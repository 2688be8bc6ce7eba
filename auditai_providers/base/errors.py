"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``auditai_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    ConfigurationError,
    CredentialRevokedError,
    ModelUnreachableError,
    ParseError,
    ProviderError,
    TransportError,
)
from .errors_parts.classification import ClassifiedError, classify_exception, classify_response

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
