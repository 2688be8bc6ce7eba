"""Streaming metrics data structures.

Isolated within the streaming package to keep the accumulator loop small.
One ``StreamMetrics`` instance lives for one streaming call and is logged
once at stream end.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single streaming call.

    Attributes:
        emitted: Number of non-empty text increments delivered to the sink.
        skipped: Frames that failed to decode and were skipped.
        frames: Frames decoded successfully (with or without text).
        bytes_received: Raw body bytes read from the transport.
        time_to_first_token_ms: Latency from stream start to the first increment.
        total_duration_ms: Latency from stream start to completion or failure.
        tokens: Canonical usage mapping when the provider reported one.
    """

    emitted: int = 0
    skipped: int = 0
    frames: int = 0
    bytes_received: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    tokens: Optional[Dict[str, Any]] = None

    def log_fields(self) -> Dict[str, Any]:
        """Fields merged into the ``stream.end`` event (``emitted``/``tokens`` go separately)."""
        return {
            "skipped": self.skipped,
            "frames": self.frames,
            "bytes": self.bytes_received,
            "ttft_ms": self.time_to_first_token_ms,
            "duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
