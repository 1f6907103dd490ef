"""Decomposition of AMM pool shares into the pool's reserve assets."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Collection
from fractions import Fraction
from typing import Any

from loguru import logger

from sumtokens.adapters.algorand_adapter.types import AssetInfo
from sumtokens.core.constants.base import ALGOFI_POOL_UNIT_NAME
from sumtokens.core.errors import ConfigurationError, DataError
from sumtokens.core.utils.ledger import Ledger, sum_single_balance

AssetInfoFetcher = Callable[[str], Awaitable[AssetInfo]]


async def resolve_lp_position(
    ledger: Ledger,
    lp_asset_id: str,
    hint_asset_id: str | None,
    blacklist: Collection[str],
    *,
    get_asset_info: AssetInfoFetcher,
) -> Ledger:
    """Replace the ``lp_asset_id`` entry with its pro-rata share of pool reserves.

    When ``hint_asset_id`` is one of the pool's reserves the share is doubled
    and paid out entirely in the other reserve(s); the hinted leg is skipped.
    This matches Tinyman-style pools where one side has no price of its own.
    The pool-share key is removed in every case.
    """
    # taken out before the first await so a concurrent resolver sees nothing left
    held = int(ledger.pop(lp_asset_id, None) or 0)
    if not held:
        return ledger

    lp_info = await get_asset_info(lp_asset_id)
    if lp_info.circulating_supply <= 0:
        raise DataError(
            f"LP {lp_asset_id} has no circulating supply but {held} is held"
        )
    ratio = Fraction(held, lp_info.circulating_supply)
    payout = lp_info.reserves
    if hint_asset_id and hint_asset_id in lp_info.reserves:
        ratio *= 2
        payout = {k: v for k, v in lp_info.reserves.items() if k != hint_asset_id}
    for token, reserve_amount in payout.items():
        if token in blacklist:
            continue
        sum_single_balance(ledger, token, reserve_amount * ratio)
    logger.debug(
        f"Resolved LP {lp_asset_id}: {held}/{lp_info.circulating_supply} "
        f"into {sorted(payout)}"
    )
    return ledger


async def get_price_from_algofi_lp(
    lp_asset_id: str,
    unknown_asset_id: str,
    *,
    get_asset_info: AssetInfoFetcher,
    gecko_mapping: dict[str, dict[str, Any]],
) -> dict[str, Any]:
    """Price ``unknown_asset_id`` against the whitelisted leg of an AlgoFi pool.

    Returns ``{"price", "gecko_id", "decimals"}`` where price is the raw
    reserve ratio known/unknown.
    """
    lp_info = await get_asset_info(str(lp_asset_id))
    if lp_info.unit_name != ALGOFI_POOL_UNIT_NAME:
        raise ConfigurationError(f"Asset {lp_asset_id} is not an AlgoFi LP")

    holdings = lp_info.reserve_info.assets
    unknown_quantity = holdings.get(str(unknown_asset_id))
    if not unknown_quantity:
        raise DataError(
            f"AlgoFi pool {lp_asset_id} holds no asset {unknown_asset_id}"
        )
    for asset_id, amount in holdings.items():
        mapped = gecko_mapping.get(asset_id)
        if mapped:
            return {
                "price": Fraction(amount, unknown_quantity),
                "gecko_id": mapped["coingecko_id"],
                "decimals": mapped.get("decimals"),
            }
    raise DataError(f"AlgoFi pool {lp_asset_id} is not mapped with any whitelisted assets")
