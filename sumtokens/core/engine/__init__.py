from sumtokens.core.engine.dispatch import SumTokensEngine, normalize_request
from sumtokens.core.engine.registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "SumTokensEngine",
    "normalize_request",
]
