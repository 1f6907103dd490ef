from __future__ import annotations

import asyncio
import base64
from typing import Any

from sumtokens.adapters.algorand_adapter.client import AlgorandIndexerClient
from sumtokens.adapters.algorand_adapter.lp import (
    get_price_from_algofi_lp,
    resolve_lp_position,
)
from sumtokens.adapters.algorand_adapter.types import AccountInfo, AssetInfo
from sumtokens.core.adapters.BaseAdapter import ChainAdapter
from sumtokens.core.adapters.models import SumTokensRequest
from sumtokens.core.constants.base import ADAPTER_ALGORAND
from sumtokens.core.constants.chains import CHAIN_ALGORAND
from sumtokens.core.utils.cache import CoalescingCache
from sumtokens.core.utils.ledger import Ledger, sum_single_balance
from sumtokens.core.utils.token_mapping import TokenMapping

# Well-known ASA ids
TOKENS = {
    "usdc": "31566704",
    "goUsd": "672913181",
    "usdcGoUsdLp": "885102318",
    "gard": "684649988",
}


class AlgorandAdapter(ChainAdapter):
    adapter_type = ADAPTER_ALGORAND
    chain = CHAIN_ALGORAND

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        client: AlgorandIndexerClient | None = None,
        account_cache: CoalescingCache[AccountInfo] | None = None,
        asset_cache: CoalescingCache[AssetInfo] | None = None,
        state_cache: CoalescingCache[dict[str, Any]] | None = None,
        token_mapping: TokenMapping | None = None,
    ):
        super().__init__("algorand_adapter", config)
        self.client = client or AlgorandIndexerClient(
            base_url=self.config.get("indexer_url")
        )
        self.account_cache = account_cache or CoalescingCache("algorand:accounts")
        self.asset_cache = asset_cache or CoalescingCache("algorand:assets")
        self.state_cache = state_cache or CoalescingCache("algorand:app_state")
        self.token_mapping = token_mapping or TokenMapping()

    async def close(self) -> None:
        await self.client.aclose()

    async def get_account_info(self, address: str) -> AccountInfo:
        async def _fetch() -> AccountInfo:
            return AccountInfo.from_indexer(await self.client.lookup_account(address))

        return await self.account_cache.get_or_fetch(address, _fetch)

    async def get_asset_info(self, asset_id: str) -> AssetInfo:
        async def _fetch() -> AssetInfo:
            payload = await self.client.lookup_asset(asset_id)
            asset = payload.get("asset", payload)
            reserve_info = await self.get_account_info(asset["params"]["reserve"])
            return AssetInfo.from_indexer(payload, reserve_info)

        return await self.asset_cache.get_or_fetch(str(asset_id), _fetch)

    async def get_app_global_state(self, app_id: str | int) -> dict[str, Any]:
        """Application global state with base64 keys decoded."""

        async def _fetch() -> dict[str, Any]:
            response = await self.client.lookup_application(app_id)
            state: dict[str, Any] = {}
            for entry in response["application"]["params"].get("global-state") or []:
                key = base64.b64decode(entry["key"]).decode("latin-1")
                state[key] = entry["value"].get("uint")
            return state

        return await self.state_cache.get_or_fetch(str(app_id), _fetch)

    async def search_accounts_all(self, app_id: str | int) -> list[dict[str, Any]]:
        return await self.client.search_accounts_all(app_id)

    async def get_price_from_algofi_lp(
        self, lp_asset_id: str, unknown_asset_id: str
    ) -> dict[str, Any]:
        return await get_price_from_algofi_lp(
            lp_asset_id,
            unknown_asset_id,
            get_asset_info=self.get_asset_info,
            gecko_mapping=self.token_mapping.mapping.get(self.chain, {}),
        )

    def _unique_lp_positions(
        self, positions: list[tuple[str, str | None]]
    ) -> dict[str, str | None]:
        """LP id -> hint, one entry per LP; the first position listed wins."""
        unique: dict[str, str | None] = {}
        for lp, hint in positions:
            if lp not in unique:
                unique[lp] = hint
            elif unique[lp] != hint:
                self.logger.warning(
                    f"LP {lp} listed with hints {unique[lp]!r} and {hint!r}; "
                    f"using {unique[lp]!r}"
                )
        return unique

    async def sum_tokens(self, request: SumTokensRequest) -> Ledger:
        owners = list(request.owners)
        if request.owner and not owners:
            owners = [request.owner]
        tokens = set(request.tokens)
        if request.token and not tokens:
            tokens = {request.token}
        blacklist = set(request.blacklisted_tokens)

        # explicit pairs only apply when no owner list was given
        pairs: set[tuple[str, str]] = set()
        if not owners and request.tokens_and_owners:
            pairs = set(request.tokens_and_owners)
            owners = list(dict.fromkeys(owner for _, owner in request.tokens_and_owners))

        ledger: Ledger = {
            k: v for k, v in request.balances.items() if k not in blacklist
        }
        accounts = await asyncio.gather(*(self.get_account_info(o) for o in owners))
        for owner, account in zip(owners, accounts):
            for asset_id, amount in account.assets.items():
                if pairs and (asset_id, owner) not in pairs:
                    continue
                if tokens and asset_id not in tokens:
                    continue
                if asset_id in blacklist:
                    continue
                sum_single_balance(ledger, asset_id, amount)

        lp_positions = self._unique_lp_positions(request.lp_positions)
        if lp_positions:
            lp_blacklist = blacklist if request.blacklist_on_lp_as_well else set()
            await asyncio.gather(
                *(
                    resolve_lp_position(
                        ledger,
                        lp,
                        hint,
                        lp_blacklist,
                        get_asset_info=self.get_asset_info,
                    )
                    for lp, hint in lp_positions.items()
                )
            )

        self.logger.debug(
            f"Summed {len(owners)} owners into {len(ledger)} algorand assets"
        )
        return self.token_mapping.fix_balances(self.chain, ledger)
