DEFAULT_HTTP_TIMEOUT = 30.0  # HTTP client timeout
# Indexer account/asset lookups on large escrow accounts can take minutes.
DEFAULT_INDEXER_TIMEOUT = 300.0

# Shared indexer quota: tokens per interval (seconds)
DEFAULT_RATE_LIMIT_TOKENS = 10
DEFAULT_RATE_LIMIT_INTERVAL = 1.0

DEFAULT_PAGINATION_LIMIT = 1000
NEXT_TOKEN_KEY = "next-token"
NEXT_TOKEN_PARAM = "next"

# Separator used to fold (token, owner) pairs into one dedupe key.
PAIR_SEPARATOR = "¤"

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

ALGORAND_INDEXER_URL = "https://algoindexer.algoexplorerapi.io"
# Native ALGO balance is folded into the asset ledger under this id.
ALGORAND_NATIVE_ASSET_ID = "1"
ALGOFI_POOL_UNIT_NAME = "AF-POOL"

ADAPTER_ALGORAND = "ALGORAND"
