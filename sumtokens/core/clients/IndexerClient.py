import time
from typing import Any

import httpx
from loguru import logger

from sumtokens.core.constants.base import (
    DEFAULT_INDEXER_TIMEOUT,
    DEFAULT_PAGINATION_LIMIT,
    NEXT_TOKEN_KEY,
    NEXT_TOKEN_PARAM,
)
from sumtokens.core.utils.rate_limiter import TokenBucketLimiter, with_limiter


class IndexerClient:
    """Read-only JSON client for a chain indexer.

    Every request acquires a token from ``limiter`` first, so all calls for
    one upstream share a single rate budget. Errors are not retried.
    """

    def __init__(
        self,
        base_url: str,
        *,
        limiter: TokenBucketLimiter | None = None,
        timeout: float = DEFAULT_INDEXER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.limiter = limiter or TokenBucketLimiter()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self.headers = {"Accept": "application/json"}

    async def __aenter__(self) -> "IndexerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    @with_limiter
    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        logger.debug(f"Making {method} request to {url}")
        start_time = time.time()

        resp = await self.client.request(
            method, url, params=params, headers=self.headers
        )

        elapsed = time.time() - start_time
        if resp.status_code >= 400:
            logger.warning(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )
        else:
            logger.debug(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )

        resp.raise_for_status()
        return resp

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request("GET", path, params=params)
        return response.json()

    async def paginate(
        self,
        path: str,
        *,
        items_key: str,
        params: dict[str, Any] | None = None,
        limit: int = DEFAULT_PAGINATION_LIMIT,
    ) -> list[Any]:
        """Follow ``next-token`` cursors until exhausted, concatenating every page."""
        items: list[Any] = []
        next_token: str | None = None
        while True:
            page_params = {**(params or {}), "limit": limit}
            if next_token:
                page_params[NEXT_TOKEN_PARAM] = next_token
            page = await self.get(path, page_params)
            items.extend(page.get(items_key) or [])
            next_token = page.get(NEXT_TOKEN_KEY)
            if not next_token:
                return items
