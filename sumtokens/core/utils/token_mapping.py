from __future__ import annotations

from typing import Any

from sumtokens.core.utils.ledger import Ledger, sum_single_balance


class TokenMapping:
    """Renames chain-native token ids to caller-visible identities.

    ``mapping`` is ``{chain: {native_id: {"coingecko_id": ..., "decimals": ...}}}``
    or ``{chain: {native_id: "identity"}}``. Amounts are left in raw units.
    """

    def __init__(self, mapping: dict[str, dict[str, Any]] | None = None):
        self.mapping = mapping or {}

    def identity_for(self, chain: str, token: str) -> str | None:
        entry = self.mapping.get(chain, {}).get(token)
        if entry is None:
            return None
        if isinstance(entry, str):
            return entry
        gecko_id = entry.get("coingecko_id")
        return f"coingecko:{gecko_id}" if gecko_id else None

    def gecko_info(self, chain: str, token: str) -> dict[str, Any] | None:
        entry = self.mapping.get(chain, {}).get(token)
        if isinstance(entry, dict) and entry.get("coingecko_id"):
            return entry
        return None

    def fix_balances(self, chain: str, ledger: Ledger) -> Ledger:
        chain_map = self.mapping.get(chain)
        if not chain_map:
            return ledger
        fixed: Ledger = {}
        for token, amount in ledger.items():
            sum_single_balance(fixed, self.identity_for(chain, token) or token, amount)
        ledger.clear()
        ledger.update(fixed)
        return ledger
