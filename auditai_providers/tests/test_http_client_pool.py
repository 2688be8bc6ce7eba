from __future__ import annotations

import asyncio

from auditai_providers.base.http import aclose_all_clients, get_httpx_client


def test_same_key_reuses_client_within_loop():
    async def run():
        a = get_httpx_client(None, "chat")
        b = get_httpx_client(None, "chat")
        c = get_httpx_client(None, "stream")
        same, distinct = a is b, a is not c
        await aclose_all_clients()
        return same, distinct, a.is_closed and c.is_closed

    same, distinct, closed = asyncio.run(run())
    assert same and distinct  # nosec B101
    assert closed  # nosec B101


def test_new_loop_gets_new_client():
    async def grab():
        return get_httpx_client("https://api.deepseek.com", "chat")

    first = asyncio.run(grab())
    second = asyncio.run(grab())
    assert first is not second  # nosec B101
    asyncio.run(aclose_all_clients())


def test_closed_client_is_replaced():
    async def run():
        a = get_httpx_client(None, "chat")
        await a.aclose()
        b = get_httpx_client(None, "chat")
        await aclose_all_clients()
        return a is not b

    assert asyncio.run(run())  # nosec B101
