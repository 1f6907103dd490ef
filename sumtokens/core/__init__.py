from sumtokens.core.adapters.BaseAdapter import BaseAdapter, ChainAdapter
from sumtokens.core.adapters.models import SumTokensRequest
from sumtokens.core.errors import ConfigurationError, DataError, SumTokensError

__all__ = [
    "BaseAdapter",
    "ChainAdapter",
    "SumTokensRequest",
    "SumTokensError",
    "ConfigurationError",
    "DataError",
]
