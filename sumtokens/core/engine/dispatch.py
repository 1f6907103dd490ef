"""Chain-agnostic entry point for balance aggregation.

``SumTokensEngine.aggregate`` normalizes a request (owners, tokens, blacklist,
explicit ``tokens_and_owners`` pairs), picks the adapter registered for the
request's chain and returns that adapter's ledger. Chains without an adapter
are either served by the small balance-only lookup (native coin of a handful
of chains), by an injected ``fallback`` adapter, or rejected.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from loguru import logger

from sumtokens.core.adapters.BaseAdapter import ChainAdapter
from sumtokens.core.adapters.decorators import status_tuple
from sumtokens.core.adapters.models import SumTokensRequest
from sumtokens.core.clients.BalanceOnlyClient import BalanceOnlyClient
from sumtokens.core.constants.chains import (
    BALANCE_ONLY_CHAIN_GECKO_IDS,
    NON_FILTERABLE_TOKEN_CHAINS,
)
from sumtokens.core.engine.registry import AdapterRegistry
from sumtokens.core.errors import ConfigurationError
from sumtokens.core.utils.ledger import Ledger, sum_single_balance
from sumtokens.core.utils.normalize import (
    get_unique_addresses,
    get_unique_tokens_and_owners,
)


def normalize_request(request: SumTokensRequest) -> SumTokensRequest:
    chain = request.chain
    if not chain:
        raise ConfigurationError("Missing chain info")

    owners = list(request.owners)
    if not owners and request.owner:
        owners = [request.owner]
    tokens = list(request.tokens)
    if not tokens and request.token:
        tokens = [request.token]

    owners = get_unique_addresses(owners, chain)
    blacklist = get_unique_addresses(request.blacklisted_tokens, chain)
    blacklisted = set(blacklist)
    filterable = chain not in NON_FILTERABLE_TOKEN_CHAINS
    if filterable:
        tokens = [t for t in get_unique_addresses(tokens, chain) if t not in blacklisted]

    pairs = list(request.tokens_and_owners)
    if not pairs:
        pairs = [(t, o) for t in tokens for o in owners]
    pairs = get_unique_tokens_and_owners(pairs, chain)
    if filterable:
        pairs = [(t, o) for t, o in pairs if t not in blacklisted]

    return request.model_copy(
        update={
            "owners": owners,
            "tokens": tokens,
            "blacklisted_tokens": blacklist,
            "tokens_and_owners": pairs,
            "balances": dict(request.balances),
        }
    )


class SumTokensEngine:
    def __init__(
        self,
        registry: AdapterRegistry,
        *,
        fallback: ChainAdapter | None = None,
        balance_only: BalanceOnlyClient | None = None,
    ):
        self.registry = registry
        self.fallback = fallback
        self._balance_only = balance_only
        self.logger = logger.bind(component=self.__class__.__name__)

    @property
    def balance_only(self) -> BalanceOnlyClient:
        if self._balance_only is None:
            self._balance_only = BalanceOnlyClient()
        return self._balance_only

    def resolve_adapter(self, chain: str) -> ChainAdapter | None:
        """Adapter for ``chain``; ``None`` means the balance-only path."""
        adapter = self.registry.get(chain)
        if adapter is not None:
            return adapter
        if chain in BALANCE_ONLY_CHAIN_GECKO_IDS:
            return None
        if self.fallback is not None:
            return self.fallback
        raise ConfigurationError(f"No handler for chain {chain!r}")

    async def aggregate(self, request: SumTokensRequest) -> Ledger:
        if not request.chain:
            raise ConfigurationError("Missing chain info")
        adapter = self.resolve_adapter(request.chain)
        normalized = normalize_request(request)

        if adapter is None:
            self.logger.debug(f"{request.chain}: balance-only lookup")
            return await self._sum_balance_only(normalized)

        self.logger.debug(
            f"{request.chain}: dispatching to {adapter.__class__.__name__} "
            f"({len(normalized.owners)} owners, {len(normalized.tokens)} tokens)"
        )
        return await adapter.sum_tokens(normalized)

    async def _sum_balance_only(self, request: SumTokensRequest) -> Ledger:
        chain = request.chain
        balances = await asyncio.gather(
            *(self.balance_only.get_balance(chain, owner) for owner in request.owners)
        )
        blacklist = set(request.blacklisted_tokens)
        ledger: Ledger = {
            k: v for k, v in request.balances.items() if k not in blacklist
        }
        sum_single_balance(ledger, BALANCE_ONLY_CHAIN_GECKO_IDS[chain], sum(balances))
        return ledger

    @status_tuple
    async def try_aggregate(self, request: SumTokensRequest) -> Ledger:
        return await self.aggregate(request)

    async def aggregate_many(
        self, requests: Iterable[SumTokensRequest]
    ) -> dict[str, tuple[bool, Ledger | str]]:
        """Aggregate several chains concurrently, reporting each chain separately."""
        requests = list(requests)
        chains = [r.chain for r in requests]
        duplicates = sorted({c for c in chains if chains.count(c) > 1}, key=str)
        if duplicates:
            raise ConfigurationError(f"Duplicate chains in one job: {duplicates}")
        results = await asyncio.gather(*(self.try_aggregate(r) for r in requests))
        return {str(chain): result for chain, result in zip(chains, results)}

    def sum_tokens_export(
        self, **options: Any
    ) -> Callable[..., Awaitable[Ledger]]:
        """Bind a request template into a ``tvl(timestamp, block, chain_blocks)`` callable.

        The chain's block is taken from ``chain_blocks`` at call time.
        """
        chain = options.get("chain")
        if not chain:
            raise ConfigurationError("Missing chain info")
        template = SumTokensRequest(**options)

        async def tvl(
            timestamp: int | None = None,
            block: int | None = None,
            chain_blocks: dict[str, int] | None = None,
        ) -> Ledger:
            chain_block = (chain_blocks or {}).get(chain, template.block)
            return await self.aggregate(
                template.model_copy(
                    update={"block": chain_block, "balances": dict(template.balances)}
                )
            )

        return tvl

    async def close(self) -> None:
        await self.registry.close()
        if self._balance_only is not None:
            await self._balance_only.aclose()
