import asyncio
from collections import Counter
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from sumtokens.adapters.algorand_adapter.client import AlgorandIndexerClient
from sumtokens.core.utils.rate_limiter import TokenBucketLimiter

TEST_INDEXER_URL = "https://indexer.example.invalid"


def pytest_configure(config):
    config.addinivalue_line("markers", "smoke: mark test as a smoke test")
    config.addinivalue_line("markers", "integration: mark test as integration")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "smoke" in item.nodeid:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def limiter() -> TokenBucketLimiter:
    # generous bucket so unit tests never wait on refills
    return TokenBucketLimiter(1000, 1.0)


@pytest.fixture
def indexer_client_factory(
    limiter: TokenBucketLimiter,
) -> Callable[..., tuple[AlgorandIndexerClient, Counter]]:
    """Build an indexer client served from ``routes`` (path -> JSON body).

    Unknown paths answer 404. ``latency`` delays every response so concurrent
    callers interleave. Returns the client and a Counter of hit paths.
    """

    def _factory(
        routes: dict[str, Any],
        *,
        latency: float = 0.0,
    ) -> tuple[AlgorandIndexerClient, Counter]:
        hits: Counter = Counter()

        async def handler(request: httpx.Request) -> httpx.Response:
            hits[request.url.path] += 1
            if latency:
                await asyncio.sleep(latency)
            body = routes.get(request.url.path)
            if body is None:
                return httpx.Response(404, json={"message": "no such resource"})
            if callable(body):
                return body(request)
            return httpx.Response(200, json=body)

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = AlgorandIndexerClient(
            base_url=TEST_INDEXER_URL, limiter=limiter, client=http
        )
        return client, hits

    return _factory
