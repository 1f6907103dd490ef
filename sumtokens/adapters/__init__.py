from sumtokens.adapters.algorand_adapter import AlgorandAdapter
from sumtokens.core.engine.registry import AdapterRegistry
from sumtokens.core.utils.token_mapping import TokenMapping


def build_default_registry(
    *, token_mapping: TokenMapping | None = None
) -> AdapterRegistry:
    """Registry with every adapter shipped in this package."""
    registry = AdapterRegistry()
    registry.register(AlgorandAdapter.chain, AlgorandAdapter(token_mapping=token_mapping))
    return registry


__all__ = ["AlgorandAdapter", "build_default_registry"]
