"""Streaming package for provider layer.

Exposes the incremental frame decoders (SSE lines and brace-balanced JSON
objects), the typed frame results, the accumulator that turns a byte stream
into growing text, and its metrics under a single namespace.
"""

from .frames import DecodedFrame, Frame, FrameDecoder, SkippedFrame
from .sse_decoder import SseLineDecoder
from .brace_decoder import BraceObjectDecoder
from .streaming_metrics import StreamMetrics
from .accumulator import EMPTY_STREAM_RESULT, Sink, StreamAccumulator

__all__ = [
    "DecodedFrame",
    "Frame",
    "FrameDecoder",
    "SkippedFrame",
    "SseLineDecoder",
    "BraceObjectDecoder",
    "StreamMetrics",
    "StreamAccumulator",
    "Sink",
    "EMPTY_STREAM_RESULT",
]
