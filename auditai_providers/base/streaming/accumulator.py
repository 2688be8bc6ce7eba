"""Stream accumulator: bytes in, growing text out.

``StreamAccumulator.run`` drives raw body chunks through an incremental UTF-8
decoder and a frame decoder, pulls the text increment out of each decoded
frame with the provider family's extractor, and calls the sink with the *full*
text accumulated so far after every non-empty increment. Callers render by
replacing, never appending.

Failure semantics
-----------------
* A frame that fails to decode is skipped (counted and logged at debug).
* A transport failure mid-stream propagates; text already delivered stays
  delivered.
* A cancelled ``CancellationToken`` is observed before each chunk: the chunk
  source is closed and ``CancelledError`` is raised with no further sink
  calls.

The result of a stream that produced no text is a single space so callers can
tell "finished, nothing said" from "not finished".
"""
from __future__ import annotations

import codecs
import inspect
import logging
import time
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from ..cancellation import CancellationToken, CancelledError
from ..errors import ProviderError
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from .frames import DecodedFrame, Frame, FrameDecoder
from .streaming_metrics import StreamMetrics

Sink = Callable[[str], Union[None, Awaitable[None]]]
TextExtractor = Callable[[Mapping[str, Any]], Optional[str]]
UsageExtractor = Callable[[Mapping[str, Any]], Optional[Dict[str, Optional[int]]]]

EMPTY_STREAM_RESULT = " "
_RAW_LOG_LIMIT = 200

_logger = get_logger("stream")


class StreamAccumulator:
    """Owns the per-request stream state: decoder, text buffer and metrics."""

    def __init__(
        self,
        decoder: FrameDecoder,
        extract_text: TextExtractor,
        *,
        extract_usage: Optional[UsageExtractor] = None,
        cancel_token: Optional[CancellationToken] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._decoder = decoder
        self._extract_text = extract_text
        self._extract_usage = extract_usage
        self._cancel_token = cancel_token
        self._ctx = ctx
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._parts: List[str] = []
        self._text = ""
        self._start = 0.0
        self.metrics = StreamMetrics()

    @property
    def text(self) -> str:
        return self._text

    async def run(self, chunks: AsyncIterator[bytes], sink: Optional[Sink] = None) -> str:
        """Consume ``chunks`` to completion and return the final text."""
        self._start = time.perf_counter()
        try:
            async for chunk in chunks:
                if self._cancel_token is not None:
                    self._cancel_token.raise_if_cancelled()
                self.metrics.bytes_received += len(chunk)
                await self._apply(self._decoder.feed(self._utf8.decode(chunk)), sink)
            await self._apply(self._decoder.feed(self._utf8.decode(b"", final=True)), sink)
            await self._apply(self._decoder.finish(), sink)
        except CancelledError:
            self._log_end("stream.cancelled", phase="failed", error_code="cancelled")
            raise
        except ProviderError as exc:
            self._log_end("stream.error", phase="failed", error_code=exc.code.value, level=logging.ERROR)
            raise
        finally:
            await _close(chunks)
        self._log_end("stream.end", phase="completed")
        return self._text or EMPTY_STREAM_RESULT

    async def _apply(self, frames: List[Frame], sink: Optional[Sink]) -> None:
        for frame in frames:
            if not isinstance(frame, DecodedFrame):
                self.metrics.skipped += 1
                log_event(
                    _logger,
                    "stream.frame_skipped",
                    self._ctx,
                    level=logging.DEBUG,
                    reason=frame.reason,
                    raw=frame.raw[:_RAW_LOG_LIMIT],
                )
                continue
            self.metrics.frames += 1
            if self._extract_usage is not None:
                usage = self._extract_usage(frame.payload)
                if usage is not None:
                    self.metrics.tokens = usage
            increment = self._extract_text(frame.payload)
            if not increment:
                continue
            self._parts.append(increment)
            self._text = "".join(self._parts)
            self.metrics.emitted += 1
            if self.metrics.time_to_first_token_ms is None:
                self.metrics.time_to_first_token_ms = _elapsed_ms(self._start)
            if sink is not None:
                result = sink(self._text)
                if inspect.isawaitable(result):
                    await result

    def _log_end(self, event: str, *, phase: str, error_code: Optional[str] = None, level: int = logging.INFO) -> None:
        self.metrics.total_duration_ms = _elapsed_ms(self._start)
        normalized_log_event(
            _logger,
            event,
            self._ctx,
            phase=phase,
            attempt=1,
            error_code=error_code,
            emitted=self.metrics.emitted,
            tokens=self.metrics.tokens,
            level=level,
            **self.metrics.log_fields(),
        )


async def _close(chunks: AsyncIterator[bytes]) -> None:
    aclose = getattr(chunks, "aclose", None)
    if aclose is not None:
        await aclose()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


__all__ = ["StreamAccumulator", "Sink", "TextExtractor", "UsageExtractor", "EMPTY_STREAM_RESULT"]
