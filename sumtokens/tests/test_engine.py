from unittest.mock import AsyncMock

import httpx
import pytest

from sumtokens.adapters.algorand_adapter.adapter import AlgorandAdapter
from sumtokens.core.adapters.BaseAdapter import ChainAdapter
from sumtokens.core.adapters.models import SumTokensRequest
from sumtokens.core.clients.BalanceOnlyClient import BalanceOnlyClient
from sumtokens.core.constants.chains import IBC_CHAINS
from sumtokens.core.engine.dispatch import SumTokensEngine, normalize_request
from sumtokens.core.engine.registry import AdapterRegistry
from sumtokens.core.errors import ConfigurationError


class RecordingAdapter(ChainAdapter):
    """Echoes each (token, owner) pair as a ledger entry of 1."""

    chain = "recording"

    def __init__(self) -> None:
        super().__init__("recording")
        self.requests: list[SumTokensRequest] = []
        self.closed = 0

    async def sum_tokens(self, request: SumTokensRequest) -> dict[str, int]:
        self.requests.append(request)
        ledger = dict(request.balances)
        for token, _owner in request.tokens_and_owners:
            ledger[token] = ledger.get(token, 0) + 1
        return ledger

    async def close(self) -> None:
        self.closed += 1


class FailingAdapter(RecordingAdapter):
    async def sum_tokens(self, request: SumTokensRequest) -> dict[str, int]:
        raise httpx.ConnectError("indexer unreachable")


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def engine(adapter) -> SumTokensEngine:
    return SumTokensEngine(AdapterRegistry({"ethereum": adapter, "tron": adapter}))


class TestNormalizeRequest:
    def test_missing_chain(self):
        with pytest.raises(ConfigurationError, match="Missing chain"):
            normalize_request(SumTokensRequest(owners=["0x1"]))

    def test_cross_product_is_token_major(self):
        req = normalize_request(
            SumTokensRequest(chain="ethereum", tokens=["0xT1", "0xT2"], owners=["0xO1", "0xO2"])
        )
        assert req.tokens_and_owners == [
            ("0xt1", "0xo1"),
            ("0xt1", "0xo2"),
            ("0xt2", "0xo1"),
            ("0xt2", "0xo2"),
        ]

    def test_explicit_pairs_match_derived_pairs(self):
        explicit = normalize_request(
            SumTokensRequest(chain="ethereum", tokens_and_owners=[("0xT1", "0xO1"), ("0xt1", "0xO2")])
        )
        derived = normalize_request(
            SumTokensRequest(chain="ethereum", tokens=["0xT1"], owners=["0xO1", "0xO2", "0xo1"])
        )
        assert set(explicit.tokens_and_owners) == set(derived.tokens_and_owners)

    def test_blacklist_filters_tokens_and_pairs(self):
        req = normalize_request(
            SumTokensRequest(
                chain="ethereum",
                tokens=["0xA", "0xB"],
                owners=["0xO"],
                tokens_and_owners=[("0xB", "0xO"), ("0xC", "0xO")],
                blacklisted_tokens=["0xb"],
            )
        )
        assert req.tokens == ["0xa"]
        assert req.tokens_and_owners == [("0xc", "0xo")]
        assert req.blacklisted_tokens == ["0xb"]

    def test_eos_tokens_are_not_blacklist_filtered(self):
        req = normalize_request(
            SumTokensRequest(
                chain="eos", tokens=["eosio.token:EOS"], owners=["acct"],
                blacklisted_tokens=["eosio.token:EOS"],
            )
        )
        assert req.tokens == ["eosio.token:EOS"]
        assert req.tokens_and_owners == [("eosio.token:EOS", "acct")]

    def test_owner_and_token_shorthand(self):
        req = normalize_request(SumTokensRequest(chain="ethereum", owner="0xO", token="0xT"))
        assert req.owners == ["0xo"]
        assert req.tokens_and_owners == [("0xt", "0xo")]

    def test_idempotent(self):
        once = normalize_request(
            SumTokensRequest(
                chain="ethereum",
                tokens=["0xA", "0xa", "0xB"],
                owners=["0xO", "0xo"],
                blacklisted_tokens=["0xB"],
            )
        )
        twice = normalize_request(once)
        assert twice == once

    def test_caller_request_not_mutated(self):
        original = SumTokensRequest(chain="ethereum", tokens=["0xA"], owners=["0xO"], balances={"x": 1})
        normalized = normalize_request(original)
        normalized.balances["x"] = 99
        assert original.tokens_and_owners == []
        assert original.balances == {"x": 1}


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatches_normalized_request(self, engine, adapter):
        ledger = await engine.aggregate(
            SumTokensRequest(chain="ethereum", tokens=["0xA", "0xB"], owners=["0xO1", "0xO2"])
        )
        assert ledger == {"0xa": 2, "0xb": 2}
        assert adapter.requests[0].owners == ["0xo1", "0xo2"]

    @pytest.mark.asyncio
    async def test_unknown_chain_is_configuration_error(self, engine, adapter):
        with pytest.raises(ConfigurationError, match="No handler"):
            await engine.aggregate(SumTokensRequest(chain="dogechain", owners=["0x1"]))
        assert adapter.requests == []

    @pytest.mark.asyncio
    async def test_missing_chain(self, engine):
        with pytest.raises(ConfigurationError, match="Missing chain"):
            await engine.aggregate(SumTokensRequest(owners=["0x1"]))

    @pytest.mark.asyncio
    async def test_fallback_handles_unregistered_chains(self, adapter):
        fallback = RecordingAdapter()
        engine = SumTokensEngine(AdapterRegistry({"tron": adapter}), fallback=fallback)
        await engine.aggregate(SumTokensRequest(chain="polygon", tokens=["0xA"], owners=["0xO"]))
        assert len(fallback.requests) == 1
        assert adapter.requests == []

    @pytest.mark.asyncio
    async def test_ibc_family_shares_one_adapter(self):
        cosmos = RecordingAdapter()
        registry = AdapterRegistry()
        registry.register_family(IBC_CHAINS, cosmos)
        engine = SumTokensEngine(registry)
        await engine.aggregate(SumTokensRequest(chain="osmosis", tokens=["uosmo"], owners=["OSMO1X"]))
        await engine.aggregate(SumTokensRequest(chain="juno", tokens=["ujuno"], owners=["juno1x"]))
        assert [r.chain for r in cosmos.requests] == ["osmosis", "juno"]
        assert cosmos.requests[0].owners == ["osmo1x"]

        await engine.close()
        assert cosmos.closed == 1

    @pytest.mark.asyncio
    async def test_balance_only_chain_sums_owner_balances(self):
        balance_only = BalanceOnlyClient()
        balance_only.get_balance = AsyncMock(side_effect=[100, 250])  # type: ignore[method-assign]
        engine = SumTokensEngine(AdapterRegistry(), balance_only=balance_only)

        ledger = await engine.aggregate(
            SumTokensRequest(chain="bep2", owners=["bnb1a", "bnb1b", "bnb1a"])
        )

        assert ledger == {"binancecoin": 350}
        assert balance_only.get_balance.await_count == 2

    @pytest.mark.asyncio
    async def test_balance_only_seed_respects_blacklist(self):
        balance_only = BalanceOnlyClient()
        balance_only.get_balance = AsyncMock(return_value=5)  # type: ignore[method-assign]
        engine = SumTokensEngine(AdapterRegistry(), balance_only=balance_only)

        ledger = await engine.aggregate(
            SumTokensRequest(
                chain="elrond",
                owners=["erd1a"],
                balances={"stale": 9, "kept": 1},
                blacklisted_tokens=["stale"],
            )
        )

        assert ledger == {"kept": 1, "elrond-erd-2": 5}

    @pytest.mark.asyncio
    async def test_transport_errors_propagate_unchanged(self):
        engine = SumTokensEngine(AdapterRegistry({"ethereum": FailingAdapter()}))
        with pytest.raises(httpx.ConnectError):
            await engine.aggregate(SumTokensRequest(chain="ethereum", owners=["0x1"]))

    def test_duplicate_registration_rejected(self, adapter):
        registry = AdapterRegistry({"ethereum": adapter})
        with pytest.raises(ConfigurationError):
            registry.register("ethereum", adapter)
        assert "ethereum" in registry
        assert registry.get("solana") is None


class TestAggregateMany:
    @pytest.mark.asyncio
    async def test_failures_reported_per_chain(self, adapter):
        engine = SumTokensEngine(
            AdapterRegistry({"ethereum": adapter, "tron": FailingAdapter()})
        )
        results = await engine.aggregate_many(
            [
                SumTokensRequest(chain="ethereum", tokens=["0xA"], owners=["0xO"]),
                SumTokensRequest(chain="tron", tokens=["T1"], owners=["TO"]),
                SumTokensRequest(chain="nowhere", owners=["x"]),
            ]
        )
        assert results["ethereum"] == (True, {"0xa": 1})
        assert results["tron"][0] is False
        assert "unreachable" in results["tron"][1]
        assert results["nowhere"][0] is False
        assert "No handler" in results["nowhere"][1]

    @pytest.mark.asyncio
    async def test_duplicate_chains_rejected(self, engine):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            await engine.aggregate_many(
                [SumTokensRequest(chain="ethereum"), SumTokensRequest(chain="ethereum")]
            )


class TestSumTokensExport:
    def test_missing_chain_fails_at_export_time(self, engine):
        with pytest.raises(ConfigurationError):
            engine.sum_tokens_export(owners=["0x1"])

    @pytest.mark.asyncio
    async def test_chain_block_bound_at_call_time(self, engine, adapter):
        tvl = engine.sum_tokens_export(chain="ethereum", tokens=["0xA"], owners=["0xO"])
        first = await tvl(1700000000, 18_000_000, {"ethereum": 18_000_000})
        first["0xa"] = 999
        second = await tvl(1700000000, 18_000_001, {"ethereum": 18_000_001})
        assert second == {"0xa": 1}
        assert [r.block for r in adapter.requests] == [18_000_000, 18_000_001]


class TestAlgorandScenarios:
    ALGO_ROUTES = {
        "/v2/accounts/OWNER": {
            "account": {
                "address": "OWNER",
                "amount": 500,
                "assets": [
                    {"asset-id": 31566704, "amount": 1_000_000},
                    {"asset-id": 885102318, "amount": 100},
                    {"asset-id": 12345, "amount": 7},
                ],
            }
        },
        "/v2/accounts/POOL": {
            "account": {
                "address": "POOL",
                "amount": 0,
                "assets": [
                    {"asset-id": 885102318, "amount": 9_000},
                    {"asset-id": 31566704, "amount": 5_000},
                    {"asset-id": 672913181, "amount": 5_000},
                ],
            }
        },
        "/v2/assets/885102318": {
            "asset": {"index": 885102318, "params": {"total": 10_000, "reserve": "POOL"}}
        },
    }

    @pytest.fixture
    def algo_engine(self, indexer_client_factory):
        client, hits = indexer_client_factory(self.ALGO_ROUTES)
        registry = AdapterRegistry({"algorand": AlgorandAdapter(client=client)})
        return SumTokensEngine(registry), hits

    @pytest.mark.asyncio
    async def test_all_holdings_with_no_token_filter(self, algo_engine):
        engine, _ = algo_engine
        ledger = await engine.aggregate(
            SumTokensRequest(chain="algorand", owners=["OWNER"], blacklisted_tokens=[12345])
        )
        assert ledger == {"1": 500, "31566704": 1_000_000, "885102318": 100}
        assert "12345" not in ledger

    @pytest.mark.asyncio
    async def test_lp_resolved_end_to_end(self, algo_engine):
        engine, hits = algo_engine
        ledger = await engine.aggregate(
            SumTokensRequest(
                chain="algorand",
                owners=["OWNER", "OWNER"],
                tokens=[885102318],
                lp_positions=[(885102318, 672913181)],
            )
        )
        assert ledger == {"31566704": 1000}
        assert hits["/v2/accounts/OWNER"] == 1
