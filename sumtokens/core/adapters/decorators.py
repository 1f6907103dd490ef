from __future__ import annotations

from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

from sumtokens.core.adapters.models import SumTokensRequest


T = TypeVar("T")


def status_tuple(
    fn: Callable[..., Coroutine[Any, Any, T]],
) -> Callable[..., Coroutine[Any, Any, tuple[bool, T | str]]]:
    """Wrap a per-request coroutine to return ``(True, result)`` or ``(False, error_str)``.

    Used where one failing chain must be reported rather than abort a
    multi-chain job. Failures are logged via ``self.logger`` with the chain.
    """

    @wraps(fn)
    async def wrapper(
        self: Any, request: SumTokensRequest, *args: Any, **kwargs: Any
    ) -> tuple[bool, T | str]:
        try:
            result = await fn(self, request, *args, **kwargs)
            return (True, result)
        except Exception as exc:
            self.logger.error(
                f"Error in {fn.__name__} for chain {request.chain!r}: "
                f"{type(exc).__name__}: {exc}"
            )
            return (False, str(exc))

    return wrapper  # type: ignore[return-value]
