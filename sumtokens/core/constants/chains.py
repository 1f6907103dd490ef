CHAIN_ALGORAND = "algorand"
CHAIN_COSMOS = "cosmos"
CHAIN_EOS = "eos"
CHAIN_BSC = "bsc"
CHAIN_BEP2 = "bep2"
CHAIN_ELROND = "elrond"

# Chains served by the same Cosmos SDK helper (one shared adapter instance).
IBC_CHAINS = [
    "terra",
    "terra2",
    "crescent",
    "osmosis",
    "kujira",
    "stargaze",
    "juno",
    "injective",
    "cosmos",
    "comdex",
    "umee",
    "orai",
    "persistence",
    "fxcore",
    "neutron",
    "quasar",
    "chihuahua",
    "sei",
    "archway",
    "migaloo",
    "secret",
    "aura",
    "xpla",
    "bostrom",
    "joltify",
    "nolus",
]

# Chains resolved through a single balance endpoint instead of a full adapter.
BALANCE_ONLY_CHAIN_GECKO_IDS: dict[str, str] = {
    CHAIN_BEP2: "binancecoin",
    CHAIN_ELROND: "elrond-erd-2",
}
BALANCE_ONLY_CHAINS = list(BALANCE_ONLY_CHAIN_GECKO_IDS)

BALANCE_ONLY_DECIMALS: dict[str, int] = {
    CHAIN_BEP2: 8,
    CHAIN_ELROND: 18,
}

# Token ids on these chains are composite (contract, symbol) records and are
# not matched against the blacklist.
NON_FILTERABLE_TOKEN_CHAINS = {CHAIN_EOS}

# Chains whose addresses/token ids are case-sensitive and must not be folded.
CASE_SENSITIVE_CHAINS = {
    CHAIN_ALGORAND,
    "solana",
    "tron",
    "tezos",
    "cardano",
    "near",
    "bitcoin",
    "litecoin",
    "polkadot",
    "zilliqa",
    "stacks",
    "ton",
    "ripple",
    "stellar",
    CHAIN_EOS,
}

# Non-EVM chains with hex ids that are compared lower-cased.
LOWERCASE_HEX_CHAINS = {"aptos", "sui", "starknet"}
