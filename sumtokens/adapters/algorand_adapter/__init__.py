"""Algorand adapter - sums ASA balances via the indexer and unwraps AMM pool shares."""

from .adapter import TOKENS, AlgorandAdapter
from .address import get_application_address
from .client import AlgorandIndexerClient
from .types import AccountInfo, AssetInfo

__all__ = [
    "AlgorandAdapter",
    "AlgorandIndexerClient",
    "AccountInfo",
    "AssetInfo",
    "TOKENS",
    "get_application_address",
]
