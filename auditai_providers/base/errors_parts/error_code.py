"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration used across provider families, the
orchestrator, and the HTTP service. Values are lowercase snake_case and are
considered a stable public contract for logging and API responses.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    PARSE = "parse"
    CREDENTIAL_REVOKED = "credential_revoked"
    MODEL_UNREACHABLE = "model_unreachable"
    PROVIDER_ERROR = "provider_error"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
