__version__ = "0.1.0"

from sumtokens.core import (
    BaseAdapter,
    ChainAdapter,
    ConfigurationError,
    DataError,
    SumTokensError,
    SumTokensRequest,
)
from sumtokens.core.engine import AdapterRegistry, SumTokensEngine

__all__ = [
    "__version__",
    "AdapterRegistry",
    "BaseAdapter",
    "ChainAdapter",
    "ConfigurationError",
    "DataError",
    "SumTokensEngine",
    "SumTokensError",
    "SumTokensRequest",
]
