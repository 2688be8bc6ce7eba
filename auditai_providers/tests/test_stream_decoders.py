"""Unit tests for the incremental frame decoders.

Covers:
- SSE: partial lines across chunks, [DONE], non-data lines, malformed JSON skip
- Brace balancing: objects split at arbitrary offsets, braces inside strings,
  incomplete trailing object
"""
from __future__ import annotations

import json

from auditai_providers.base.streaming import (
    BraceObjectDecoder,
    DecodedFrame,
    SkippedFrame,
    SseLineDecoder,
)

_GEMINI_ARRAY = (
    '[{"candidates":[{"content":{"parts":[{"text":"A"}]}}]},'
    '{"candidates":[{"content":{"parts":[{"text":"B"}]}}]}]'
)


def _texts(frames):
    return [f.payload for f in frames if isinstance(f, DecodedFrame)]


def test_sse_decodes_complete_lines_and_done_marker():
    dec = SseLineDecoder()
    frames = dec.feed('data: {"a": 1}\n\ndata: {"a": 2}\ndata: [DONE]\n')
    assert _texts(frames) == [{"a": 1}, {"a": 2}]  # nosec B101
    assert len(frames) == 2  # nosec B101


def test_sse_buffers_partial_line_between_chunks():
    dec = SseLineDecoder()
    assert dec.feed('data: {"choices":[{"delta":') == []  # nosec B101
    frames = dec.feed('{"content":"Hel"}}]}\n')
    assert _texts(frames) == [{"choices": [{"delta": {"content": "Hel"}}]}]  # nosec B101


def test_sse_flushes_unterminated_last_line_on_finish():
    dec = SseLineDecoder()
    assert dec.feed('data: {"tail": true}') == []  # nosec B101
    assert _texts(dec.finish()) == [{"tail": True}]  # nosec B101
    assert dec.finish() == []  # nosec B101


def test_sse_ignores_comments_and_event_fields():
    dec = SseLineDecoder()
    frames = dec.feed(': keep-alive\nevent: message\nid: 7\r\ndata: {"ok": 1}\r\n\r\n')
    assert _texts(frames) == [{"ok": 1}]  # nosec B101


def test_sse_malformed_line_is_skipped_not_fatal():
    dec = SseLineDecoder()
    frames = dec.feed('data: {"n": 1}\ndata: {broken\ndata: [1, 2]\ndata: {"n": 2}\n')
    assert _texts(frames) == [{"n": 1}, {"n": 2}]  # nosec B101
    skipped = [f for f in frames if isinstance(f, SkippedFrame)]
    assert [s.reason for s in skipped] == ["invalid_json", "not_an_object"]  # nosec B101
    assert skipped[0].raw == "data: {broken"  # nosec B101


def test_brace_decoder_emits_each_object_of_array():
    frames = BraceObjectDecoder().feed(_GEMINI_ARRAY)
    texts = [p["candidates"][0]["content"]["parts"][0]["text"] for p in _texts(frames)]
    assert texts == ["A", "B"]  # nosec B101


def test_brace_decoder_handles_every_split_offset():
    for cut in range(1, len(_GEMINI_ARRAY)):
        dec = BraceObjectDecoder()
        frames = dec.feed(_GEMINI_ARRAY[:cut]) + dec.feed(_GEMINI_ARRAY[cut:])
        texts = [p["candidates"][0]["content"]["parts"][0]["text"] for p in _texts(frames)]
        assert texts == ["A", "B"], cut  # nosec B101
        assert dec.finish() == []  # nosec B101


def test_brace_decoder_ignores_braces_and_quotes_inside_strings():
    payload = {"text": 'say "{hi}" and \\ then }'}
    raw = "[" + json.dumps(payload) + ",\r\n" + json.dumps({"n": 2}) + "]"
    dec = BraceObjectDecoder()
    frames = []
    for ch in raw:
        frames.extend(dec.feed(ch))
    assert _texts(frames) == [payload, {"n": 2}]  # nosec B101


def test_brace_decoder_reports_incomplete_object_on_finish():
    dec = BraceObjectDecoder()
    assert dec.feed('[{"a": {"b": 1}') == []  # nosec B101
    assert dec.depth == 1  # nosec B101
    leftover = dec.finish()
    assert len(leftover) == 1 and isinstance(leftover[0], SkippedFrame)  # nosec B101
    assert leftover[0].reason == "incomplete_object"  # nosec B101
    assert dec.depth == 0  # nosec B101
