"""Line-oriented Server-Sent Events decoder.

Used by the OpenAI-compatible providers and by Gemini's ``alt=sse`` mode.
Chunks may split a line anywhere, so the trailing partial line is held back
until the next ``feed`` (or ``finish``). Only ``data:`` lines carry payloads;
comments, ``event:``/``id:`` fields and blank separators are ignored, as is
the literal ``data: [DONE]`` terminator.
"""
from __future__ import annotations

import json
from typing import List, Optional

from .frames import DecodedFrame, Frame, SkippedFrame

DATA_PREFIX = "data:"
DONE_MARKER = "[DONE]"


class SseLineDecoder:
    """Incremental SSE ``data:`` line parser."""

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> List[Frame]:
        """Consume a decoded text chunk and return the frames it completed."""
        if not text:
            return []
        lines = (self._pending + text).split("\n")
        self._pending = lines.pop()
        frames: List[Frame] = []
        for line in lines:
            frame = self._decode_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def finish(self) -> List[Frame]:
        """Flush a final line that arrived without a trailing newline."""
        tail, self._pending = self._pending, ""
        frame = self._decode_line(tail)
        return [frame] if frame is not None else []

    def _decode_line(self, line: str) -> Optional[Frame]:
        stripped = line.strip()
        if not stripped.startswith(DATA_PREFIX):
            return None
        data = stripped[len(DATA_PREFIX):].strip()
        if not data:
            return None
        if data == DONE_MARKER:
            return None
        try:
            payload = json.loads(data)
        except ValueError:
            return SkippedFrame(raw=stripped, reason="invalid_json")
        if not isinstance(payload, dict):
            return SkippedFrame(raw=stripped, reason="not_an_object")
        return DecodedFrame(payload)


__all__ = ["SseLineDecoder", "DATA_PREFIX", "DONE_MARKER"]
