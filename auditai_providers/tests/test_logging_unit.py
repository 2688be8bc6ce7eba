from __future__ import annotations

import json
import logging

from auditai_providers.base.log_support import JsonFormatter
from auditai_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def test_log_event_drops_none_fields(captured_logs):
    log_event(get_logger("test"), "unit.event", LogContext(provider="gemini"), kept=1, dropped=None)
    payload = json.loads(captured_logs[-1])
    assert payload == {"event": "unit.event", "provider": "gemini", "kept": 1}  # nosec B101


def test_normalized_event_always_has_canonical_keys(captured_logs):
    ctx = LogContext(provider="qwen", model="qwen-max", operation="chat", call_id="abc")
    normalized_log_event(get_logger("test"), "unit.norm", ctx, phase="streaming", tokens={"total": 5})
    payload = json.loads(captured_logs[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        if key == "error_code":
            continue
        assert key in payload  # nosec B101
    assert "error_code" not in payload  # nosec B101
    assert payload["tokens"] == {"total": 5}  # nosec B101
    assert payload["attempt"] is None and payload["call_id"] == "abc"  # nosec B101


def test_extra_fields_never_override_normalized_values(captured_logs):
    normalized_log_event(get_logger("test"), "unit.norm", phase="sent", attempt=1, error_code="timeout")
    payload = json.loads(captured_logs[-1])
    assert payload["phase"] == "sent" and payload["error_code"] == "timeout"  # nosec B101


def test_child_loggers_share_root():
    child = get_logger("transport")
    assert child.name == "auditai.transport"  # nosec B101
    assert child.propagate is True and not child.handlers  # nosec B101
    assert get_logger().propagate is False  # nosec B101


def test_json_formatter_hoists_event_keys():
    record = logging.LogRecord("auditai.x", logging.INFO, __file__, 1, '{"event": "e", "n": 2}', (), None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 2 and out["level"] == "INFO"  # nosec B101
    plain = logging.LogRecord("auditai.x", logging.INFO, __file__, 1, "hello", (), None)
    assert json.loads(JsonFormatter().format(plain))["msg"] == "hello"  # nosec B101


def test_configure_logger_adds_rotating_file_handler(tmp_path):
    target = tmp_path / "logs" / "audit.log"
    logger = configure_logger(level="DEBUG", file_path=str(target))
    try:
        log_event(get_logger("test"), "unit.file")
        for h in logger.handlers:
            h.flush()
        assert '"unit.file"' in target.read_text(encoding="utf-8")  # nosec B101
    finally:
        configure_logger(level="INFO", file_path=None)
    assert not any(getattr(h, "baseFilename", None) for h in logger.handlers)  # nosec B101
