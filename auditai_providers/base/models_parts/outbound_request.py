"""
Transport-ready request produced by the payload builders.

Keeping the credential-bearing query string separate from ``url`` lets the
transport log ``url`` without leaking a key.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal


@dataclass(frozen=True)
class OutboundRequest:
    """One HTTP request to a provider.

    Attributes:
        method: HTTP method (always ``POST`` for current providers).
        url: Endpoint without query string.
        params: Query parameters (may include ``key`` and ``alt``).
        headers: Request headers (may include ``Authorization``).
        json_body: JSON-serializable body.
        stream: Whether the response is consumed incrementally.
    """

    method: Literal["GET", "POST"]
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Dict[str, Any] = field(default_factory=dict)
    stream: bool = False


__all__ = ["OutboundRequest"]
