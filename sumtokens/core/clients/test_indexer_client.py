"""Tests for IndexerClient transport, rate limiting and pagination."""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from sumtokens.core.clients.IndexerClient import IndexerClient
from sumtokens.core.utils.rate_limiter import TokenBucketLimiter


def _client(handler, limiter: TokenBucketLimiter) -> IndexerClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IndexerClient("https://indexer.example.invalid/", limiter=limiter, client=http)


@pytest.mark.asyncio
async def test_get_returns_parsed_json_and_passes_params(limiter):
    captured: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler, limiter)
    assert await client.get("/v2/accounts/ABC", {"round": 5}) == {"ok": True}
    assert captured["url"] == "https://indexer.example.invalid/v2/accounts/ABC?round=5"


@pytest.mark.asyncio
async def test_every_request_acquires_a_limiter_token(limiter):
    limiter.acquire = AsyncMock()  # type: ignore[method-assign]
    client = _client(lambda request: httpx.Response(200, json={}), limiter)

    await client.get("/a")
    await client.get("/b")

    assert limiter.acquire.await_count == 2


@pytest.mark.asyncio
async def test_http_errors_propagate_without_retry(limiter):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, json={"message": "busy"})

    client = _client(handler, limiter)
    with pytest.raises(httpx.HTTPStatusError):
        await client.get("/v2/accounts/ABC")
    assert calls == 1


@pytest.mark.asyncio
async def test_timeouts_propagate(limiter):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = _client(handler, limiter)
    with pytest.raises(httpx.TimeoutException):
        await client.get("/v2/accounts/ABC")


@pytest.mark.asyncio
async def test_paginate_follows_next_token_until_exhausted(limiter):
    pages = {
        None: {"accounts": [{"address": "A"}, {"address": "B"}], "next-token": "t1"},
        "t1": {"accounts": [{"address": "C"}], "next-token": "t2"},
        "t2": {"accounts": []},
    }
    seen: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        seen.append(params)
        return httpx.Response(200, json=pages[params.get("next")])

    client = _client(handler, limiter)
    accounts = await client.paginate(
        "/v2/accounts", items_key="accounts", params={"application-id": 7}, limit=2
    )

    assert [a["address"] for a in accounts] == ["A", "B", "C"]
    assert [p.get("next") for p in seen] == [None, "t1", "t2"]
    assert all(p["application-id"] == "7" and p["limit"] == "2" for p in seen)


@pytest.mark.asyncio
async def test_owned_client_is_closed_on_exit():
    async with IndexerClient("https://indexer.example.invalid") as client:
        http = client.client
    assert http.is_closed
