from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from auditai_providers import __version__
from auditai_providers.audit import AuditOrchestrator
from auditai_providers.base.cancellation import CancelledError
from auditai_providers.base.dto import AuditRequestDTO, ChatRequestDTO, DocumentRequestDTO
from auditai_providers.base.errors import ErrorCode, ProviderError, classify_exception
from auditai_providers.base.http import aclose_all_clients
from auditai_providers.base.logging import get_logger, log_event
from auditai_providers.config.defaults import AUDIT_SERVICE_CORS_DEFAULT_ORIGINS
from auditai_providers.registry import get_registry

from .app_parts.app_core import (
    ERROR_STATUS,
    decode_chat,
    error_body,
    get_orchestrator_dep,
    status_for,
    stream_chat_events,
)

_logger = get_logger("service")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Release pooled provider connections when the server stops."""
    yield
    await aclose_all_clients()


app = FastAPI(title="AuditAI Provider Service", version=__version__, lifespan=lifespan)


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

cors_origins_env = os.getenv(
    "AUDITAI_SERVICE_CORS_ORIGINS", AUDIT_SERVICE_CORS_DEFAULT_ORIGINS
)
allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(ProviderError)
async def _provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Render provider failures as the JSON error envelope.

    The status code follows the error code: configuration problems are the
    caller's (400), a rejected key is 401, upstream failures are 502 and
    timeouts 504.
    """
    log_event(
        _logger,
        "service.provider_error",
        path=request.url.path,
        error_code=exc.code.value,
        provider=exc.provider,
    )
    return JSONResponse(status_code=status_for(exc), content=error_body(exc))


@app.exception_handler(CancelledError)
async def _cancelled_handler(request: Request, exc: CancelledError) -> JSONResponse:
    return JSONResponse(status_code=ERROR_STATUS[ErrorCode.CANCELLED], content=error_body(exc))


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort envelope; timeouts still surface as 504."""
    code = classify_exception(exc)
    log_event(
        _logger,
        "service.unhandled_error",
        level=logging.ERROR,
        path=request.url.path,
        error_code=code.value,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=ERROR_STATUS.get(code, 500), content=error_body(exc))


# ---------------------------------------------------------------------------
# Health and providers
# ---------------------------------------------------------------------------


@app.get("/api/health")
def health() -> Dict[str, Any]:
    """Check the health status of the service."""
    return {"ok": True}


@app.get("/api/providers")
def get_providers() -> Dict[str, Any]:
    """List configured providers with masked credentials.

    The entry flagged ``primary`` is where unknown or missing provider ids
    are routed.
    """
    return {"ok": True, "providers": get_registry().describe()}


# ---------------------------------------------------------------------------
# Audit endpoints
# ---------------------------------------------------------------------------


@app.post("/api/audit")
async def post_audit(
    body: AuditRequestDTO,
    orchestrator: AuditOrchestrator = Depends(get_orchestrator_dep),
) -> Dict[str, Any]:
    """Structured audit of pasted transaction data."""
    result = await orchestrator.analyze_structured_data(
        body.data, body.provider, body.language, body.scenario
    )
    return {"ok": True, "result": result.to_payload()}


@app.post("/api/documents")
async def post_document(
    body: DocumentRequestDTO,
    orchestrator: AuditOrchestrator = Depends(get_orchestrator_dep),
) -> Dict[str, Any]:
    """Forensic analysis of one base64 encoded image or PDF.

    Returns Markdown. When the requested provider has no vision support the
    call is redirected and the Markdown starts with a note saying so.
    """
    try:
        attachment = body.to_attachment()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    markdown = await orchestrator.analyze_document(
        attachment.data, attachment.mime_type, body.provider, body.language, body.scenario
    )
    return {"ok": True, "markdown": markdown}


# ---------------------------------------------------------------------------
# Chat endpoint
# ---------------------------------------------------------------------------


@app.post("/api/chat", response_model=None)
async def post_chat(
    body: ChatRequestDTO,
    orchestrator: AuditOrchestrator = Depends(get_orchestrator_dep),
) -> Any:
    """Consultant chat.

    With ``stream=true`` the response is ``text/event-stream``; every event
    carries the full text so far and the last one has ``done: true`` (or is
    an ``error`` event). Otherwise a single JSON object is returned.
    """
    conversation, attachments = decode_chat(body)
    if body.stream:
        return StreamingResponse(
            stream_chat_events(orchestrator, body, conversation, attachments),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )
    text = await orchestrator.send_chat_message(
        conversation,
        body.message,
        body.provider,
        body.language,
        attachments=attachments,
    )
    return {"ok": True, "text": text}


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def get_app() -> FastAPI:
    """Return the FastAPI application instance."""
    return app
