"""Typed frame results produced by the incremental stream decoders.

A malformed frame is a value (``SkippedFrame``), not an exception: decoding
continues with the next frame and the accumulator counts and logs the skip.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Union


@dataclass(frozen=True)
class DecodedFrame:
    """One complete JSON object taken off the wire."""

    payload: Dict[str, Any]


@dataclass(frozen=True)
class SkippedFrame:
    """A frame that could not be decoded.

    Attributes:
        raw: The offending text (as received).
        reason: Short machine-readable reason, e.g. ``"invalid_json"``.
    """

    raw: str
    reason: str


Frame = Union[DecodedFrame, SkippedFrame]


class FrameDecoder(Protocol):
    """Incremental decoder interface shared by both framings."""

    def feed(self, text: str) -> List[Frame]:
        ...

    def finish(self) -> List[Frame]:
        ...


__all__ = ["DecodedFrame", "SkippedFrame", "Frame", "FrameDecoder"]
