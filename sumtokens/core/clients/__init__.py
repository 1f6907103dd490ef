from sumtokens.core.clients.BalanceOnlyClient import BalanceOnlyClient
from sumtokens.core.clients.IndexerClient import IndexerClient

__all__ = [
    "IndexerClient",
    "BalanceOnlyClient",
]
