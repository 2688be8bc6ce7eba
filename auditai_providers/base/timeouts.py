"""Unified timeout settings for provider HTTP calls.

This module centralizes the timeout values used by the transport layer so no
call site carries ad-hoc numeric literals. Values are read from the
environment once and cached; the cache refreshes automatically when the
relevant variables change (tests adjust them at runtime).

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values.

get_timeout_config()
    Returns a process-cached configuration. Supported environment variables
    (all optional, positive floats, seconds):
        AUDITAI_TIMEOUT_CONNECT_SECONDS
        AUDITAI_TIMEOUT_READ_SECONDS
        AUDITAI_TIMEOUT_STREAM_SECONDS
        AUDITAI_TIMEOUT_OVERALL_SECONDS

to_httpx_timeout(cfg, stream)
    Converts a ``TimeoutConfig`` into an ``httpx.Timeout`` for either a
    single-shot or a streaming request.

Failure Modes
-------------
Timeouts surface as ``httpx.TimeoutException`` inside the transport, which
maps them to a ``TransportError`` carrying ``ErrorCode.TIMEOUT``. Nothing here
retries.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

import httpx

_ENV_NAMES = (
    "AUDITAI_TIMEOUT_CONNECT_SECONDS",
    "AUDITAI_TIMEOUT_READ_SECONDS",
    "AUDITAI_TIMEOUT_STREAM_SECONDS",
    "AUDITAI_TIMEOUT_OVERALL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish the TCP/TLS
            connection to the provider.
        read_timeout_seconds: Read timeout for single-shot (non-streaming)
            requests; generation of a full audit can take a while.
        stream_timeout_seconds: Idle timeout between two chunks of a
            streaming response.
        overall_timeout_seconds: Optional absolute cap for one call,
            enforced by the orchestrator with ``asyncio.wait_for``.
    """

    connect_timeout_seconds: float = 30.0
    read_timeout_seconds: float = 60.0
    stream_timeout_seconds: float = 60.0
    overall_timeout_seconds: Optional[float] = None


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig`` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=float(
            _parse_env_float("AUDITAI_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds)
        ),
        read_timeout_seconds=float(
            _parse_env_float("AUDITAI_TIMEOUT_READ_SECONDS", defaults.read_timeout_seconds)
        ),
        stream_timeout_seconds=float(
            _parse_env_float("AUDITAI_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds)
        ),
        overall_timeout_seconds=_parse_env_float("AUDITAI_TIMEOUT_OVERALL_SECONDS", None),
    )
    _ENV_GUARD = guard
    return _CACHED


def to_httpx_timeout(cfg: TimeoutConfig, *, stream: bool = False) -> httpx.Timeout:
    """Build the ``httpx.Timeout`` used for one request.

    Streaming requests use the idle stream timeout as their read timeout so a
    stalled server is detected between chunks rather than at the end.
    """
    read = cfg.stream_timeout_seconds if stream else cfg.read_timeout_seconds
    return httpx.Timeout(read, connect=cfg.connect_timeout_seconds)


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "to_httpx_timeout",
]
