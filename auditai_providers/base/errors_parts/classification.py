"""
Error classification helpers.

Two entry points:

``classify_response``
    Inspects a failed provider HTTP response (status + raw body text) and
    produces a :class:`ClassifiedError` carrying a user-facing message. It
    distinguishes revoked/invalid credentials, unreachable models (404) and
    generic provider failures. Classification never triggers retries.

``classify_exception``
    Maps arbitrary exceptions raised around provider calls to a normalized
    :class:`ErrorCode` (ProviderError passthrough, timeouts, httpx transport
    failures, HTTP status attributes, then message heuristics).
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Dict, Optional, Type

import httpx

from .error_code import ErrorCode
from .provider_error import (
    CredentialRevokedError,
    ModelUnreachableError,
    ProviderError,
)

# Raw bodies shorter than this are surfaced verbatim as the error detail.
_SHORT_BODY_LIMIT = 100

_REVOKED_STATUSES = (400, 403)
_API_KEY_NOT_VALID = "API key not valid"


@dataclass(frozen=True)
class ClassifiedError:
    """Typed outcome of classifying a failed provider response.

    Attributes:
        code: One of ``CREDENTIAL_REVOKED``, ``MODEL_UNREACHABLE`` or ``PROVIDER_ERROR``.
        message: Message suitable for surfacing in the UI as-is.
        status: HTTP status code of the failed response.
        detail: Detail text extracted from the body.
    """

    code: ErrorCode
    message: str
    status: int
    detail: str

    def to_exception(self, provider: str, model: Optional[str] = None) -> ProviderError:
        """Build the exception instance matching this classification."""
        klass: Type[ProviderError] = _EXCEPTION_TYPES.get(self.code, ProviderError)
        return klass(
            code=self.code,
            message=self.message,
            provider=provider,
            model=model,
            status=self.status,
        )


_EXCEPTION_TYPES: Dict[ErrorCode, Type[ProviderError]] = {
    ErrorCode.CREDENTIAL_REVOKED: CredentialRevokedError,
    ErrorCode.MODEL_UNREACHABLE: ModelUnreachableError,
}


def _extract_detail(status: int, body: str) -> str:
    """Pull the most useful detail text out of an error body.

    Google and OpenAI both use ``{"error": {"message": ...}}``; some
    OpenAI-compatible gateways use ``{"error": "..."}``.
    """
    try:
        parsed = json.loads(body)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    if body and len(body) < _SHORT_BODY_LIMIT:
        return body
    return f"Error ({status})"


def classify_response(status: int, body: str, provider_display_name: str) -> ClassifiedError:
    """Classify a non-2xx provider response into a :class:`ClassifiedError`.

    Parameters:
        status: HTTP status code.
        body: Raw response body text (may be empty or non-JSON).
        provider_display_name: Human-facing provider name used in messages.
    """
    detail = _extract_detail(status, body or "")
    if status in _REVOKED_STATUSES and ("leaked" in detail.lower() or _API_KEY_NOT_VALID in detail):
        return ClassifiedError(
            code=ErrorCode.CREDENTIAL_REVOKED,
            message=(
                f"{provider_display_name} API key is invalid or has been revoked. "
                "Update the credential and restart the service."
            ),
            status=status,
            detail=detail,
        )
    if status == 404:
        return ClassifiedError(
            code=ErrorCode.MODEL_UNREACHABLE,
            message=(
                "Model unreachable (404). The provider may be blocked on this network "
                "or region; check VPN or proxy settings."
            ),
            status=status,
            detail=detail,
        )
    return ClassifiedError(
        code=ErrorCode.PROVIDER_ERROR,
        message=f"{provider_display_name} API Error: {detail}",
        status=status,
        detail=detail,
    )


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    401: ErrorCode.CREDENTIAL_REVOKED,
    404: ErrorCode.MODEL_UNREACHABLE,
    408: ErrorCode.TIMEOUT,
    504: ErrorCode.TIMEOUT,
}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic mapping for exceptions without structure."""
    PATTERN_GROUPS = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.CREDENTIAL_REVOKED, ("api key not valid", "leaked")),
        (ErrorCode.CONFIGURATION, ("missing", "not supported", "unsupported")),
        (ErrorCode.PARSE, ("json", "malformed")),
        (ErrorCode.TRANSPORT, ("connection", "reset", "unreachable")),
    )
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. An ``ErrorCode`` carried on the exception (``ProviderError``,
           ``CancelledError``).
        2. Timeout exceptions (asyncio/builtin/httpx).
        3. httpx transport failures.
        4. HTTP status mapping (anything else with a status -> PROVIDER_ERROR).
        5. Message heuristics.
        6. ``UNKNOWN`` fallback.
    """
    carried = getattr(exc, "code", None)
    if isinstance(carried, ErrorCode):
        return carried
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSPORT
    status = _extract_status(exc)
    if status is not None:
        return _HTTP_STATUS_MAP.get(status, ErrorCode.PROVIDER_ERROR)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "ClassifiedError",
    "classify_response",
    "classify_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
