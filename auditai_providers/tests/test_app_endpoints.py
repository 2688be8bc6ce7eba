from __future__ import annotations

import base64
import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from auditai_providers.audit import AuditOrchestrator
from auditai_providers.service.app import app
from auditai_providers.service.app_parts.app_core import get_orchestrator_dep

from .helpers import build_registry, gemini_body, make_orchestrator, openai_body, openai_delta, sse

AUDIT_JSON = '{"summary":"ok","risks":[],"keyMetrics":[{"label":"Rows","value":"3"}]}'


@pytest.fixture()
def client_for():
    """Build a TestClient whose orchestrator answers with ``responder``."""

    def _make(responder):
        orch, handler = make_orchestrator(responder)
        app.dependency_overrides[get_orchestrator_dep] = lambda: orch
        return TestClient(app), handler

    yield _make
    app.dependency_overrides.clear()


def _events(text: str) -> List[Tuple[str, Dict[str, Any]]]:
    out = []
    for block in text.strip().split("\n\n"):
        event = "message"
        data = None
        for line in block.splitlines():
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data = json.loads(line[len("data: "):])
        out.append((event, data))
    return out


def test_health_and_providers():
    client = TestClient(app)
    assert client.get("/api/health").json() == {"ok": True}  # nosec B101
    data = client.get("/api/providers").json()
    ids = [p["id"] for p in data["providers"]]
    assert sorted(ids) == ["deepseek", "gemini", "gpt", "qwen"]  # nosec B101
    primary = [p["id"] for p in data["providers"] if p["primary"]]
    assert primary == ["gemini"]  # nosec B101
    assert all("api_key" not in p for p in data["providers"])  # nosec B101


def test_audit_endpoint_returns_result(client_for):
    client, handler = client_for(lambda r: httpx.Response(200, json=gemini_body(AUDIT_JSON)))
    res = client.post("/api/audit", json={"data": "a,b,c", "scenario": "compliance"})
    assert res.status_code == 200  # nosec B101
    assert res.json() == {  # nosec B101
        "ok": True,
        "result": {"summary": "ok", "risks": [], "keyMetrics": [{"label": "Rows", "value": "3"}]},
    }
    assert handler.calls == 1  # nosec B101


def test_audit_endpoint_validation_error(client_for):
    client, handler = client_for(lambda r: httpx.Response(500))
    assert client.post("/api/audit", json={"data": "   "}).status_code == 422  # nosec B101
    assert handler.calls == 0  # nosec B101


def test_documents_endpoint(client_for):
    client, handler = client_for(lambda r: httpx.Response(200, json=gemini_body("Signature mismatch.")))
    payload = {
        "mime_type": "image/jpeg",
        "content": base64.b64encode(b"jpeg-bytes").decode(),
        "provider": "deepseek",
        "language": "zh",
    }
    res = client.post("/api/documents", json=payload)
    assert res.status_code == 200  # nosec B101
    md = res.json()["markdown"]
    assert md.startswith("> **Note:**") and md.endswith("Signature mismatch.")  # nosec B101


def test_documents_bad_base64_is_422(client_for):
    client, handler = client_for(lambda r: httpx.Response(200, json=gemini_body("x")))
    res = client.post("/api/documents", json={"mime_type": "image/png", "content": "%%%"})
    assert res.status_code == 422  # nosec B101
    assert handler.calls == 0  # nosec B101


def test_chat_json_response(client_for):
    client, handler = client_for(lambda r: httpx.Response(200, json=openai_body("Hi, auditor here.")))
    res = client.post(
        "/api/chat",
        json={"message": "hello", "provider": "gpt", "history": [{"role": "user", "text": "earlier"}]},
    )
    assert res.json() == {"ok": True, "text": "Hi, auditor here."}  # nosec B101
    assert len(handler.body()["messages"]) == 3  # nosec B101


def test_chat_stream_emits_cumulative_events(client_for):
    body = sse(openai_delta("Re"), openai_delta("view"))
    client, _ = client_for(lambda r: httpx.Response(200, content=body))
    res = client.post("/api/chat", json={"message": "hello", "provider": "deepseek", "stream": True})
    assert res.status_code == 200  # nosec B101
    assert res.headers["content-type"].startswith("text/event-stream")  # nosec B101
    events = _events(res.text)
    assert [d["text"] for _, d in events] == ["Re", "Review", "Review"]  # nosec B101
    assert events[-1][1]["done"] is True  # nosec B101
    assert all(d["done"] is False for _, d in events[:-1])  # nosec B101


def test_chat_stream_reports_errors_as_event(client_for):
    err = {"error": {"message": "API key not valid"}}
    client, _ = client_for(lambda r: httpx.Response(403, json=err))
    res = client.post("/api/chat", json={"message": "hello", "stream": True})
    events = _events(res.text)
    assert events[-1][0] == "error"  # nosec B101
    assert events[-1][1]["error"]["code"] == "credential_revoked"  # nosec B101


@pytest.mark.parametrize(
    "status, body, expected_status, expected_code",
    [
        (403, {"error": {"message": "API key not valid"}}, 401, "credential_revoked"),
        (404, {"error": {"message": "model not found"}}, 502, "model_unreachable"),
        (500, {"error": {"message": "overloaded"}}, 502, "provider_error"),
        (200, openai_body("not json"), 502, "parse"),
    ],
)
def test_error_status_mapping(client_for, status, body, expected_status, expected_code):
    client, _ = client_for(lambda r: httpx.Response(status, json=body))
    res = client.post("/api/audit", json={"data": "rows", "provider": "qwen"})
    assert res.status_code == expected_status  # nosec B101
    payload = res.json()
    assert payload["ok"] is False  # nosec B101
    assert payload["error"]["code"] == expected_code  # nosec B101
    assert payload["error"]["provider"] == "qwen"  # nosec B101


def test_missing_credential_is_400(client_for):
    orch = AuditOrchestrator(build_registry({"qwen": {"api_key": ""}}))
    app.dependency_overrides[get_orchestrator_dep] = lambda: orch
    res = TestClient(app).post("/api/audit", json={"data": "rows", "provider": "qwen"})
    assert res.status_code == 400  # nosec B101
    assert res.json()["error"]["code"] == "configuration"  # nosec B101


class _FailingOrchestrator:
    """Orchestrator stand-in whose audit call raises ``exc``."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def analyze_structured_data(self, *args: Any, **kwargs: Any) -> Any:
        raise self.exc


@pytest.mark.parametrize(
    "exc,expected_status,expected_code",
    [
        (TimeoutError("deadline"), 504, "timeout"),
        (RuntimeError("boom"), 502, "unknown"),
    ],
)
def test_unexpected_exception_uses_error_envelope(exc, expected_status, expected_code):
    app.dependency_overrides[get_orchestrator_dep] = lambda: _FailingOrchestrator(exc)
    try:
        res = TestClient(app, raise_server_exceptions=False).post("/api/audit", json={"data": "rows"})
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == expected_status  # nosec B101
    assert res.json() == {"ok": False, "error": {"code": expected_code, "message": str(exc)}}  # nosec B101


def test_shutdown_closes_pooled_clients(monkeypatch):
    closed = []

    async def _record_close() -> None:
        closed.append(True)

    monkeypatch.setattr("auditai_providers.service.app.aclose_all_clients", _record_close)
    with TestClient(app) as client:
        assert client.get("/api/health").status_code == 200  # nosec B101
        assert closed == []  # nosec B101
    assert closed == [True]  # nosec B101
