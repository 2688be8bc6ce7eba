from __future__ import annotations

import json

import pytest

from auditai_providers.audit.state import CallPhase, CallTracker
from auditai_providers.base.errors import ErrorCode
from auditai_providers.base.logging import REQUIRED_NORMALIZED_KEYS


def test_streaming_path_reaches_completed():
    t = CallTracker("chat", "gemini", "m")
    for phase in (CallPhase.BUILDING, CallPhase.SENT, CallPhase.STREAMING, CallPhase.COMPLETED):
        t.advance(phase)
    assert t.terminal  # nosec B101
    assert t.history[0] is CallPhase.IDLE and t.history[-1] is CallPhase.COMPLETED  # nosec B101


def test_illegal_transition_raises_runtime_error():
    t = CallTracker("chat", "gemini")
    with pytest.raises(RuntimeError):
        t.advance(CallPhase.SENT)
    t.advance(CallPhase.BUILDING)
    t.advance(CallPhase.SENT)
    with pytest.raises(RuntimeError):
        t.advance(CallPhase.COMPLETED)


def test_fail_is_idempotent_and_ignored_after_completion():
    t = CallTracker("audit.structured", "qwen")
    t.advance(CallPhase.BUILDING)
    t.fail(ErrorCode.CONFIGURATION)
    t.fail("timeout")
    assert t.history.count(CallPhase.FAILED) == 1  # nosec B101

    done = CallTracker("audit.structured", "qwen")
    for phase in (CallPhase.BUILDING, CallPhase.SENT, CallPhase.AWAITING_RESPONSE, CallPhase.COMPLETED):
        done.advance(phase)
    done.fail(ErrorCode.PARSE)
    assert done.phase is CallPhase.COMPLETED  # nosec B101


def test_transitions_log_normalized_events(captured_logs):
    t = CallTracker("chat", "deepseek", "deepseek-chat")
    t.advance(CallPhase.BUILDING)
    t.fail(ErrorCode.TRANSPORT)
    events = [json.loads(m) for m in captured_logs if '"call.transition"' in m]
    assert [e["phase"] for e in events] == ["building", "failed"]  # nosec B101
    for e in events:
        assert e["call_id"] == t.ctx.call_id  # nosec B101
        assert e["provider"] == "deepseek"  # nosec B101
        for key in REQUIRED_NORMALIZED_KEYS:
            if key != "error_code":
                assert key in e  # nosec B101
    assert events[-1]["error_code"] == "transport"  # nosec B101
