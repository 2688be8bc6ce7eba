"""Brace-balanced JSON object decoder.

Gemini's ``streamGenerateContent`` without ``alt=sse`` returns one JSON array
written incrementally: ``[{...},\\r\\n{...}]``. Objects may be split across
chunks at any byte. The decoder scans only the characters it has not seen
yet, tracks ``{``/``}`` nesting (braces inside string literals do not count),
and emits each top-level object as soon as its closing brace arrives. The
consumed prefix is dropped so nothing is parsed twice. Array brackets, commas
and whitespace between objects are skipped.
"""
from __future__ import annotations

import json
from typing import List, Optional

from .frames import DecodedFrame, Frame, SkippedFrame


class BraceObjectDecoder:
    """Incremental top-level JSON object extractor.

    State (lifetime of one stream): the unconsumed buffer, the scan offset
    into it, the nesting depth, the start of the open object and the string
    literal flags.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._buffer = ""
        self._scan = 0
        self._depth = 0
        self._start: Optional[int] = None
        self._in_string = False
        self._escaped = False

    @property
    def depth(self) -> int:
        return self._depth

    def feed(self, text: str) -> List[Frame]:
        """Append ``text`` and return every object completed by it."""
        self._buffer += text
        buf = self._buffer
        frames: List[Frame] = []
        for i in range(self._scan, len(buf)):
            ch = buf[i]
            if self._in_string:
                if self._escaped:
                    self._escaped = False
                elif ch == "\\":
                    self._escaped = True
                elif ch == '"':
                    self._in_string = False
            elif ch == '"':
                # Quotes between objects are noise; only track strings inside one.
                self._in_string = self._depth > 0
            elif ch == "{":
                if self._depth == 0:
                    self._start = i
                self._depth += 1
            elif ch == "}" and self._depth > 0:
                self._depth -= 1
                if self._depth == 0 and self._start is not None:
                    frames.append(self._parse(buf[self._start:i + 1]))
                    self._start = None
        self._trim()
        return frames

    def finish(self) -> List[Frame]:
        """Report an object left open at end of stream, then reset."""
        leftover = self._buffer if self._depth > 0 else ""
        self._reset()
        if leftover.strip():
            return [SkippedFrame(raw=leftover, reason="incomplete_object")]
        return []

    def _trim(self) -> None:
        if self._start is None:
            self._buffer = ""
            self._scan = 0
            return
        self._buffer = self._buffer[self._start:]
        self._start = 0
        self._scan = len(self._buffer)

    @staticmethod
    def _parse(raw: str) -> Frame:
        try:
            payload = json.loads(raw)
        except ValueError:
            return SkippedFrame(raw=raw, reason="invalid_json")
        if not isinstance(payload, dict):
            return SkippedFrame(raw=raw, reason="not_an_object")
        return DecodedFrame(payload)


__all__ = ["BraceObjectDecoder"]
