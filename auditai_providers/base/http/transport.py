"""Async transport for provider calls.

``TransportClient.send`` performs exactly one HTTP request per call and never
retries. A non-2xx response is read in full, closed, classified by
``classify_response`` and raised as the matching ``ProviderError`` subclass.
Network failures surface as ``TransportError`` (``ErrorCode.TIMEOUT`` for
timeouts, ``ErrorCode.TRANSPORT`` otherwise).

Streaming responses are returned open; the caller drains them through
``TransportResponse.iter_bytes()`` and the connection is released when the
iterator finishes, fails, or ``aclose()`` is called.

Only ``OutboundRequest.url`` is logged. Query parameters may carry the
credential and never reach the log.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, AsyncIterator, Optional

import httpx

from ..errors import ErrorCode, ParseError, TransportError, classify_response
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import OutboundRequest, ProviderConfig
from ..timeouts import TimeoutConfig, get_timeout_config, to_httpx_timeout
from .client import get_httpx_client

_logger = get_logger("transport")


def _wrap_httpx_error(exc: httpx.HTTPError, config: ProviderConfig) -> TransportError:
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(
            code=ErrorCode.TIMEOUT,
            message=f"{config.display_name} request timed out.",
            provider=config.identifier.value,
            model=config.model,
            raw=exc,
        )
    return TransportError(
        code=ErrorCode.TRANSPORT,
        message=f"{config.display_name} network error: {exc.__class__.__name__}",
        provider=config.identifier.value,
        model=config.model,
        raw=exc,
    )


class TransportResponse:
    """Successful provider response.

    For single-shot calls ``text`` holds the full body. For streaming calls the
    body is consumed with ``iter_bytes()``; ``text`` is ``None``.
    """

    def __init__(
        self,
        status: int,
        config: ProviderConfig,
        *,
        text: Optional[str] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.status = status
        self.text = text
        self._config = config
        self._response = response

    @property
    def is_stream(self) -> bool:
        return self._response is not None

    def json(self) -> Any:
        """Parse the single-shot body as JSON; ``ParseError`` when it is not."""
        try:
            return json.loads(self.text or "")
        except ValueError as exc:
            raise ParseError(
                f"{self._config.display_name} returned a body that is not valid JSON.",
                provider=self._config.identifier.value,
                model=self._config.model,
                raw=exc,
            ) from exc

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield raw body chunks; the response is closed when iteration ends."""
        if self._response is None:
            if self.text:
                yield self.text.encode("utf-8")
            return
        try:
            async for chunk in self._response.aiter_bytes():
                if chunk:
                    yield chunk
        except httpx.HTTPError as exc:
            raise _wrap_httpx_error(exc, self._config) from exc
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._response is not None and not self._response.is_closed:
            await self._response.aclose()


class TransportClient:
    """Send ``OutboundRequest`` values over ``httpx.AsyncClient``.

    Args:
        client: Client to use as-is (tests pass one built on
            ``httpx.MockTransport``). When omitted a pooled client is taken
            from :func:`get_httpx_client`.
        timeouts: Timeout settings; defaults to :func:`get_timeout_config`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeouts: Optional[TimeoutConfig] = None,
    ) -> None:
        self._client = client
        self._timeouts = timeouts

    def _client_for(self, request: OutboundRequest) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return get_httpx_client(None, "stream" if request.stream else "chat")

    async def send(
        self,
        request: OutboundRequest,
        config: ProviderConfig,
        ctx: Optional[LogContext] = None,
    ) -> TransportResponse:
        """Issue one request and return the successful response.

        Raises:
            CredentialRevokedError, ModelUnreachableError, ProviderError:
                non-2xx status, classified.
            TransportError: connection failure or timeout.
        """
        ctx = ctx or LogContext(provider=config.identifier.value, model=config.model)
        client = self._client_for(request)
        timeout = to_httpx_timeout(self._timeouts or get_timeout_config(), stream=request.stream)
        http_request = client.build_request(
            request.method,
            request.url,
            params=request.params or None,
            headers=request.headers,
            json=request.json_body,
            timeout=timeout,
        )
        normalized_log_event(
            _logger,
            "transport.request",
            ctx,
            phase="sent",
            attempt=1,
            endpoint=request.url,
            stream=request.stream,
        )
        start = time.perf_counter()
        try:
            response = await client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            err = _wrap_httpx_error(exc, config)
            normalized_log_event(
                _logger,
                "transport.error",
                ctx,
                phase="failed",
                attempt=1,
                error_code=err.code.value,
                endpoint=request.url,
                level=logging.ERROR,
            )
            raise err from exc

        if not response.is_success:
            await self._raise_classified(response, config, ctx, request.url)

        if request.stream:
            normalized_log_event(
                _logger,
                "transport.stream_open",
                ctx,
                phase="streaming",
                attempt=1,
                status=response.status_code,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return TransportResponse(response.status_code, config, response=response)

        try:
            body = await response.aread()
        except httpx.HTTPError as exc:
            raise _wrap_httpx_error(exc, config) from exc
        finally:
            await response.aclose()
        normalized_log_event(
            _logger,
            "transport.response",
            ctx,
            phase="awaiting_response",
            attempt=1,
            status=response.status_code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            bytes=len(body),
        )
        return TransportResponse(response.status_code, config, text=body.decode("utf-8", errors="replace"))

    async def _raise_classified(
        self,
        response: httpx.Response,
        config: ProviderConfig,
        ctx: LogContext,
        endpoint: str,
    ) -> None:
        try:
            raw = await response.aread()
        except httpx.HTTPError:
            raw = b""
        finally:
            await response.aclose()
        classified = classify_response(
            response.status_code,
            raw.decode("utf-8", errors="replace"),
            config.display_name,
        )
        normalized_log_event(
            _logger,
            "transport.error",
            ctx,
            phase="failed",
            attempt=1,
            error_code=classified.code.value,
            status=classified.status,
            detail=classified.detail,
            endpoint=endpoint,
            level=logging.ERROR,
        )
        raise classified.to_exception(config.identifier.value, config.model)


__all__ = ["TransportClient", "TransportResponse"]
