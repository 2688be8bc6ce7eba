"""Shared async HTTP client pool for providers.

Purpose:
    Provide a centralized pool of reusable ``httpx.AsyncClient`` instances so
    repeated provider calls share connections instead of paying a TLS
    handshake per request. Timeouts derive exclusively from
    :func:`get_timeout_config`; per-request read timeouts (stream vs.
    single-shot) are applied by the transport on each call.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Lifecycle & cleanup:
    - Clients are cached by a composite key of ``base_url`` and ``purpose``
      string. Purposes allow distinct pools (e.g., "chat" vs "stream").
    - ``httpx.AsyncClient`` is bound to the event loop that first used it, so
      the pool is additionally keyed by the running loop. A client created
      under one ``asyncio.run`` is never handed to another.
    - The service calls :func:`aclose_all_clients` on shutdown; tests may call
      it explicitly. Clients left open at interpreter exit are dropped with
      their loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
import weakref
from typing import Any, Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config, to_httpx_timeout

# Per event loop: (base_url, purpose) -> client. Loops are held weakly.
_CLIENTS: "weakref.WeakKeyDictionary[Any, Dict[Tuple[Optional[str], str], httpx.AsyncClient]]" = (
    weakref.WeakKeyDictionary()
)
_NO_LOOP: Dict[Tuple[Optional[str], str], httpx.AsyncClient] = {}
_LOCK = threading.RLock()


def _pool() -> Dict[Tuple[Optional[str], str], httpx.AsyncClient]:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return _NO_LOOP
    return _CLIENTS.setdefault(loop, {})


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for the given base URL and purpose.

    The first request for a key creates a client configured with the
    single-shot timeouts from :func:`get_timeout_config`. Subsequent requests
    on the same event loop reuse the same instance.

    Parameters:
        base_url: Optional API base URL associated with the client. ``None``
            groups clients under a shared key; callers then send absolute URLs.
        purpose: A short string discriminating separate pools (e.g.,
            "chat", "stream"). Keep stable to maximize reuse.
    """
    key = (base_url, purpose)
    pool = _pool()
    client = pool.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = pool.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = to_httpx_timeout(get_timeout_config())
        client = (
            httpx.AsyncClient(base_url=base_url, timeout=timeout)
            if base_url
            else httpx.AsyncClient(timeout=timeout)
        )
        pool[key] = client
        return client


async def aclose_all_clients() -> None:
    """Close and clear all pooled HTTP clients.

    Useful in service shutdown and test teardown when immediate release of
    network resources is desired. Close failures are ignored.
    """
    with _LOCK:
        clients = [c for pool in list(_CLIENTS.values()) for c in pool.values()]
        clients.extend(_NO_LOOP.values())
        _CLIENTS.clear()
        _NO_LOOP.clear()
    for c in clients:
        with contextlib.suppress(RuntimeError, httpx.HTTPError):
            await c.aclose()


__all__ = ["get_httpx_client", "aclose_all_clients"]
