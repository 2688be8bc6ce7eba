from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from fastapi import HTTPException

from auditai_providers.audit import AuditOrchestrator, get_orchestrator
from auditai_providers.base.cancellation import CancellationToken, CancelledError
from auditai_providers.base.dto import ChatRequestDTO
from auditai_providers.base.errors import ErrorCode, ProviderError, classify_exception
from auditai_providers.base.logging import get_logger, log_event
from auditai_providers.base.models import Attachment, ChatTurn

_logger = get_logger("service")

# Status 499 follows the nginx "client closed request" convention.
ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.CONFIGURATION: 400,
    ErrorCode.CREDENTIAL_REVOKED: 401,
    ErrorCode.PARSE: 502,
    ErrorCode.MODEL_UNREACHABLE: 502,
    ErrorCode.PROVIDER_ERROR: 502,
    ErrorCode.TRANSPORT: 502,
    ErrorCode.UNKNOWN: 502,
    ErrorCode.TIMEOUT: 504,
    ErrorCode.CANCELLED: 499,
}


def get_orchestrator_dep() -> AuditOrchestrator:
    """FastAPI dependency returning the process-wide orchestrator."""
    return get_orchestrator()


def status_for(exc: Exception) -> int:
    return ERROR_STATUS.get(classify_exception(exc), 502)


def error_body(exc: Exception) -> Dict[str, Any]:
    """JSON error envelope shared by the HTTP handlers and the SSE stream."""
    if isinstance(exc, ProviderError):
        return {
            "ok": False,
            "error": {
                "code": exc.code.value,
                "message": exc.message,
                "provider": exc.provider,
                "model": exc.model,
            },
        }
    return {"ok": False, "error": {"code": classify_exception(exc).value, "message": str(exc)}}


def decode_chat(body: ChatRequestDTO) -> Tuple[List[ChatTurn], List[Attachment]]:
    """Decode history and attachments, mapping bad base64 to HTTP 422."""
    try:
        return body.conversation(), [item.to_attachment() for item in body.attachments or []]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _sse(payload: Dict[str, Any], event: Optional[str] = None) -> str:
    head = f"event: {event}\n" if event else ""
    return f"{head}data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def stream_chat_events(
    orchestrator: AuditOrchestrator,
    body: ChatRequestDTO,
    conversation: List[ChatTurn],
    attachments: List[Attachment],
) -> AsyncIterator[str]:
    """Run one streaming chat call and yield ``text/event-stream`` frames.

    Every frame carries the full accumulated text. The last frame is either
    ``{"text": ..., "done": true}`` or an ``error`` event with the JSON error
    envelope. When the client disconnects the generator is closed and the
    call is cancelled through its token.
    """
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
    token = CancellationToken()

    def _sink(text: str) -> None:
        queue.put_nowait(text)

    async def _run() -> str:
        try:
            return await orchestrator.send_chat_message(
                conversation,
                body.message,
                body.provider,
                body.language,
                on_increment=_sink,
                cancel_token=token,
                attachments=attachments,
            )
        finally:
            queue.put_nowait(None)

    task = asyncio.ensure_future(_run())
    try:
        while True:
            text = await queue.get()
            if text is None:
                break
            yield _sse({"text": text, "done": False})
        try:
            final = await task
        except (ProviderError, CancelledError) as exc:
            log_event(_logger, "service.chat_stream_error", level=logging.WARNING, error=str(exc))
            yield _sse(error_body(exc), event="error")
            return
        yield _sse({"text": final, "done": True})
    finally:
        if not task.done():
            token.cancel("client disconnected")
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)


__all__ = [
    "ERROR_STATUS",
    "get_orchestrator_dep",
    "status_for",
    "error_body",
    "decode_chat",
    "stream_chat_events",
]
