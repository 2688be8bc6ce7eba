"""Shared builders for provider tests.

Everything here is plain functions and small classes; fixtures live in
``conftest.py``.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from ..audit import AuditOrchestrator
from ..base.http import TransportClient
from ..registry import ProviderRegistry

TEST_KEYS: Dict[str, Dict[str, Any]] = {
    "gemini": {"api_key": "gem-key-1234567890"},
    "deepseek": {"api_key": "ds-key-1234567890"},
    "gpt": {"api_key": "gpt-key-1234567890"},
    "qwen": {"api_key": "qwen-key-1234567890"},
}


def build_registry(extra: Optional[Dict[str, Dict[str, Any]]] = None) -> ProviderRegistry:
    """Registry with test credentials for every provider plus ``extra`` overrides."""
    overrides = {pid: dict(values) for pid, values in TEST_KEYS.items()}
    for pid, values in (extra or {}).items():
        overrides.setdefault(pid, {}).update(values)
    return ProviderRegistry.from_config(overrides)


class RecordingHandler:
    """``httpx.MockTransport`` handler that records every request it serves."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> TransportClient:
    return TransportClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def make_orchestrator(
    responder: Callable[[httpx.Request], httpx.Response],
    registry: Optional[ProviderRegistry] = None,
) -> Tuple[AuditOrchestrator, RecordingHandler]:
    handler = RecordingHandler(responder)
    return AuditOrchestrator(registry or build_registry(), mock_transport(handler)), handler


def gemini_body(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def openai_body(text: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def openai_delta(text: str) -> Dict[str, Any]:
    return {"choices": [{"delta": {"content": text}}]}


def sse(*payloads: Any, done: bool = True) -> bytes:
    """Encode payloads as an SSE body, optionally terminated by ``[DONE]``."""
    lines = [f"data: {json.dumps(p)}\n\n" for p in payloads]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


async def chunked(*parts: bytes):
    """Async byte source yielding ``parts`` one by one."""
    for part in parts:
        yield part
