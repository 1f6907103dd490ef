"""Types for AlgorandAdapter (dataclasses)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sumtokens.core.constants.base import ALGORAND_NATIVE_ASSET_ID
from sumtokens.core.errors import DataError


@dataclass(frozen=True)
class AccountInfo:
    """An indexer account with every holding keyed by string asset id."""

    address: str
    amount: int  # microalgos
    assets: dict[str, int]
    raw: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_indexer(cls, payload: dict[str, Any]) -> AccountInfo:
        account = payload.get("account", payload)
        assets: dict[str, int] = {}
        for holding in account.get("assets") or []:
            asset_id = str(holding["asset-id"])
            assets[asset_id] = assets.get(asset_id, 0) + int(holding.get("amount", 0))
        amount = int(account.get("amount") or 0)
        if amount:
            assets[ALGORAND_NATIVE_ASSET_ID] = (
                assets.get(ALGORAND_NATIVE_ASSET_ID, 0) + amount
            )
        return cls(
            address=str(account.get("address", "")),
            amount=amount,
            assets=assets,
            raw=account,
        )


@dataclass(frozen=True)
class AssetInfo:
    """ASA parameters plus the holdings of its reserve account.

    For an AMM pool share the reserve account is the pool escrow, so
    ``reserves`` is the pool composition and ``circulating_supply`` the
    number of shares held outside the pool.
    """

    asset_id: str
    total: int
    reserve: str
    unit_name: str | None
    name: str | None
    decimals: int
    reserve_info: AccountInfo = field(repr=False)
    circulating_supply: int
    reserves: dict[str, int]

    @classmethod
    def from_indexer(
        cls, payload: dict[str, Any], reserve_info: AccountInfo
    ) -> AssetInfo:
        asset = payload.get("asset", payload)
        params = asset.get("params") or {}
        asset_id = str(asset["index"])
        if asset_id not in reserve_info.assets:
            raise DataError(
                f"Reserve account {reserve_info.address} holds no asset {asset_id}"
            )
        total = int(params.get("total", 0))
        reserves = {k: v for k, v in reserve_info.assets.items() if k != asset_id}
        return cls(
            asset_id=asset_id,
            total=total,
            reserve=str(params.get("reserve", "")),
            unit_name=params.get("unit-name"),
            name=params.get("name"),
            decimals=int(params.get("decimals", 0)),
            reserve_info=reserve_info,
            circulating_supply=total - reserve_info.assets[asset_id],
            reserves=reserves,
        )
