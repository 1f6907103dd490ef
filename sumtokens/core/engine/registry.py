from __future__ import annotations

from collections.abc import Iterable

from sumtokens.core.adapters.BaseAdapter import ChainAdapter
from sumtokens.core.errors import ConfigurationError


class AdapterRegistry:
    """Chain identifier -> adapter. Several chains may share one instance."""

    def __init__(self, adapters: dict[str, ChainAdapter] | None = None):
        self._adapters: dict[str, ChainAdapter] = {}
        for chain, adapter in (adapters or {}).items():
            self.register(chain, adapter)

    def register(self, chain: str, adapter: ChainAdapter) -> None:
        if chain in self._adapters:
            raise ConfigurationError(f"Adapter already registered for chain {chain!r}")
        self._adapters[chain] = adapter

    def register_family(self, chains: Iterable[str], adapter: ChainAdapter) -> None:
        for chain in chains:
            self.register(chain, adapter)

    def get(self, chain: str) -> ChainAdapter | None:
        return self._adapters.get(chain)

    def chains(self) -> list[str]:
        return list(self._adapters)

    def __contains__(self, chain: object) -> bool:
        return chain in self._adapters

    async def close(self) -> None:
        # family members share an instance; close each adapter once
        for adapter in {id(a): a for a in self._adapters.values()}.values():
            await adapter.close()
