from __future__ import annotations

import json

import httpx

from auditai_providers.base.cancellation import CancelledError
from auditai_providers.service.cli import main
from auditai_providers.service.cli.cli_utils import error_payload

from .helpers import gemini_body, make_orchestrator, openai_body, openai_delta, sse

AUDIT_JSON = '{"summary":"fine","risks":[],"keyMetrics":[]}'


def _stderr_error(err: str) -> dict:
    """The JSON error envelope among stderr lines (log lines may precede it)."""
    for line in err.splitlines():
        try:
            obj = json.loads(line)
        except ValueError:
            continue
        if isinstance(obj, dict) and "error" in obj:
            return obj["error"]
    raise AssertionError(f"no error envelope in stderr: {err!r}")


def _never(request: httpx.Request) -> httpx.Response:
    raise AssertionError("no request expected")


def test_providers_lists_all(capsys):
    orch, _ = make_orchestrator(_never)
    assert main(["providers"], orchestrator=orch) == 0  # nosec B101
    out = json.loads(capsys.readouterr().out)
    assert {p["id"] for p in out["providers"]} == {"gemini", "deepseek", "gpt", "qwen"}  # nosec B101
    assert "gem-key-1234567890" not in json.dumps(out)  # nosec B101


def test_audit_prints_result_json(capsys):
    orch, handler = make_orchestrator(lambda r: httpx.Response(200, json=gemini_body(AUDIT_JSON)))
    code = main(["audit", "--data", "a,b", "--scenario", "tax", "--language", "zh"], orchestrator=orch)
    assert code == 0  # nosec B101
    assert json.loads(capsys.readouterr().out) == {"summary": "fine", "risks": [], "keyMetrics": []}  # nosec B101
    assert handler.calls == 1  # nosec B101


def test_audit_reads_data_from_file(capsys, tmp_path):
    src = tmp_path / "ledger.csv"
    src.write_text("date,amount\n2024-01-01,10\n", encoding="utf-8")
    orch, handler = make_orchestrator(lambda r: httpx.Response(200, json=openai_body(AUDIT_JSON)))
    assert main(["audit", "--data", f"@{src}", "--provider", "gpt"], orchestrator=orch) == 0  # nosec B101
    assert "2024-01-01,10" in handler.body()["messages"][-1]["content"]  # nosec B101


def test_audit_provider_failure_exits_1(capsys):
    orch, _ = make_orchestrator(lambda r: httpx.Response(404, text="not found"))
    assert main(["audit", "--data", "rows"], orchestrator=orch) == 1  # nosec B101
    err = _stderr_error(capsys.readouterr().err)
    assert err["code"] == "model_unreachable"  # nosec B101
    assert err["provider"] == "gemini"  # nosec B101


def test_audit_missing_file_exits_2(capsys, tmp_path):
    orch, _ = make_orchestrator(_never)
    assert main(["audit", "--data", f"@{tmp_path / 'none.csv'}"], orchestrator=orch) == 2  # nosec B101


def test_scan_guesses_mime_and_prints_markdown(capsys, tmp_path):
    receipt = tmp_path / "receipt.png"
    receipt.write_bytes(b"\x89PNG")
    orch, handler = make_orchestrator(lambda r: httpx.Response(200, json=gemini_body("## Looks genuine")))
    assert main(["scan", str(receipt)], orchestrator=orch) == 0  # nosec B101
    assert capsys.readouterr().out.strip() == "## Looks genuine"  # nosec B101
    inline = handler.body()["contents"][0]["parts"][1]["inlineData"]
    assert inline["mimeType"] == "image/png"  # nosec B101


def test_scan_unknown_extension_requires_mime(capsys, tmp_path):
    blob = tmp_path / "blob.unknownext"
    blob.write_bytes(b"x")
    orch, _ = make_orchestrator(_never)
    assert main(["scan", str(blob)], orchestrator=orch) == 2  # nosec B101


def test_chat_stream_prints_incrementally(capsys):
    body = sse(openai_delta("Hello"), openai_delta(", auditor"))
    orch, _ = make_orchestrator(lambda r: httpx.Response(200, content=body))
    assert main(["chat", "hi", "--provider", "deepseek", "--stream"], orchestrator=orch) == 0  # nosec B101
    assert capsys.readouterr().out == "Hello, auditor\n"  # nosec B101


def test_chat_with_history(capsys):
    orch, handler = make_orchestrator(lambda r: httpx.Response(200, json=gemini_body("Yes.")))
    history = json.dumps([{"role": "user", "text": "Q1?"}, {"role": "model", "text": "A1."}])
    assert main(["chat", "Q2?", "--history", history], orchestrator=orch) == 0  # nosec B101
    assert capsys.readouterr().out == "Yes.\n"  # nosec B101
    roles = [c["role"] for c in handler.body()["contents"]]
    assert roles == ["user", "model", "user"]  # nosec B101


def test_chat_bad_history_exits_2(capsys):
    orch, handler = make_orchestrator(_never)
    assert main(["chat", "hi", "--history", "[{\"role\": \"bot\"}]"], orchestrator=orch) == 2  # nosec B101
    assert handler.calls == 0  # nosec B101


def test_unknown_log_level_exits_2(capsys):
    orch, _ = make_orchestrator(_never)
    assert main(["--log-level", "loud", "providers"], orchestrator=orch) == 2  # nosec B101


def test_error_payload_classifies_plain_exceptions():
    assert error_payload(TimeoutError("slow"))["error"]["code"] == "timeout"  # nosec B101
    assert error_payload(CancelledError("stop"))["error"]["code"] == "cancelled"  # nosec B101
    assert error_payload(ValueError("odd"))["error"] == {"code": "unknown", "message": "odd"}  # nosec B101
