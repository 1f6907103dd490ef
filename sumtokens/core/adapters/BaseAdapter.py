from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from sumtokens.core.adapters.models import SumTokensRequest


class BaseAdapter(ABC):
    adapter_type: str | None = None

    def __init__(self, name: str, config: dict[str, Any] | None = None):
        self.name = name
        self.config = config or {}
        self.logger = logger.bind(adapter=self.__class__.__name__)

    async def close(self) -> None:
        pass


class ChainAdapter(BaseAdapter):
    """Sums owner balances on one chain (or one family of chains)."""

    chain: str

    @abstractmethod
    async def sum_tokens(self, request: SumTokensRequest) -> dict[str, int]:
        """Return the ledger of token id -> raw amount for ``request``.

        ``request`` has already been normalized by the engine: owners, tokens,
        blacklist and ``tokens_and_owners`` are deduplicated canonical ids.
        """
