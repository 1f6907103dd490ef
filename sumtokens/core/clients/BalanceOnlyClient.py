from __future__ import annotations

from typing import Any

import httpx

from sumtokens.core.clients.IndexerClient import IndexerClient
from sumtokens.core.constants.base import DEFAULT_HTTP_TIMEOUT
from sumtokens.core.constants.chains import (
    BALANCE_ONLY_DECIMALS,
    CHAIN_BEP2,
    CHAIN_ELROND,
)
from sumtokens.core.errors import ConfigurationError
from sumtokens.core.utils.ledger import to_raw_int
from sumtokens.core.utils.rate_limiter import TokenBucketLimiter
from sumtokens.core.utils.units import to_raw_amount

ELROND_GATEWAY_URL = "https://gateway.elrond.com"
BEP2_ACCOUNT_URL = "https://api-binance-mainnet.cosmostation.io/v1/account"


class BalanceOnlyClient(IndexerClient):
    """Native balance lookups for chains that have no full adapter."""

    def __init__(
        self,
        *,
        limiter: TokenBucketLimiter | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(
            "", limiter=limiter, timeout=DEFAULT_HTTP_TIMEOUT, client=client
        )

    async def get_balance(self, chain: str, account: str) -> int:
        """Native balance of ``account`` in raw units."""
        if chain == CHAIN_ELROND:
            data = await self.get(f"{ELROND_GATEWAY_URL}/address/{account}")
            return to_raw_int(data["data"]["account"]["balance"])
        if chain == CHAIN_BEP2:
            data = await self.get(f"{BEP2_ACCOUNT_URL}/{account}")
            return self._bnb_free_balance(data)
        raise ConfigurationError(f"Unsupported chain: {chain}")

    @staticmethod
    def _bnb_free_balance(data: dict[str, Any]) -> int:
        balances = data.get("balances") or []
        entry = next((b for b in balances if b.get("symbol") == "BNB"), None)
        if entry is None:
            return 0
        return to_raw_amount(entry.get("free") or 0, BALANCE_ONLY_DECIMALS[CHAIN_BEP2])
