"""Algorand indexer endpoints used for balance aggregation."""

from __future__ import annotations

from typing import Any

import httpx

from sumtokens.core.clients.IndexerClient import IndexerClient
from sumtokens.core.config import get_http_timeout, get_indexer_base_url, get_rate_limit
from sumtokens.core.constants.base import DEFAULT_PAGINATION_LIMIT
from sumtokens.core.constants.chains import CHAIN_ALGORAND
from sumtokens.core.utils.rate_limiter import TokenBucketLimiter

ENDPOINTS = {
    "account": "/v2/accounts/{id}",
    "accounts": "/v2/accounts",
    "asset": "/v2/assets/{id}",
    "application": "/v2/applications/{id}",
}


class AlgorandIndexerClient(IndexerClient):
    def __init__(
        self,
        base_url: str | None = None,
        *,
        limiter: TokenBucketLimiter | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        if limiter is None:
            tokens, interval = get_rate_limit(CHAIN_ALGORAND)
            limiter = TokenBucketLimiter(tokens, interval)
        super().__init__(
            base_url or get_indexer_base_url(CHAIN_ALGORAND),
            limiter=limiter,
            timeout=timeout if timeout is not None else get_http_timeout(),
            client=client,
        )

    async def lookup_account(self, account_id: str) -> dict[str, Any]:
        return await self.get(ENDPOINTS["account"].format(id=account_id))

    async def lookup_asset(self, asset_id: str) -> dict[str, Any]:
        return await self.get(ENDPOINTS["asset"].format(id=asset_id))

    async def lookup_application(self, app_id: str | int) -> dict[str, Any]:
        return await self.get(ENDPOINTS["application"].format(id=app_id))

    async def search_accounts_all(
        self, app_id: str | int, *, limit: int = DEFAULT_PAGINATION_LIMIT
    ) -> list[dict[str, Any]]:
        """Every account opted into ``app_id``."""
        return await self.paginate(
            ENDPOINTS["accounts"],
            items_key="accounts",
            params={"application-id": app_id},
            limit=limit,
        )
