from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from sumtokens.core.constants.base import (
    DEFAULT_RATE_LIMIT_INTERVAL,
    DEFAULT_RATE_LIMIT_TOKENS,
)

# Float refills land a hair under a whole token; treat that as whole.
_TOKEN_EPSILON = 1e-9
_MIN_SLEEP = 1e-6


class TokenBucketLimiter:
    """Token bucket shared by every outbound call to one upstream.

    ``tokens_per_interval`` tokens are available at once and refill
    continuously at ``tokens_per_interval / interval`` per second.
    ``acquire`` suspends the caller until enough tokens are available.
    """

    def __init__(
        self,
        tokens_per_interval: int = DEFAULT_RATE_LIMIT_TOKENS,
        interval: float = DEFAULT_RATE_LIMIT_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tokens_per_interval < 1:
            raise ValueError("tokens_per_interval must be >= 1")
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.capacity = int(tokens_per_interval)
        self.interval = float(interval)
        self._clock = clock
        self._tokens = float(self.capacity)
        self._updated_at = clock()
        self._lock = asyncio.Lock()

    @property
    def fill_rate(self) -> float:
        return self.capacity / self.interval

    @property
    def available(self) -> float:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated_at)
        self._tokens = min(float(self.capacity), self._tokens + elapsed * self.fill_rate)
        self._updated_at = now

    async def acquire(self, tokens: int = 1) -> None:
        if tokens > self.capacity:
            raise ValueError(
                f"Requested {tokens} tokens but bucket capacity is {self.capacity}"
            )
        # Waiters queue on the lock so tokens are handed out in arrival order.
        async with self._lock:
            while True:
                self._refill()
                if self._tokens + _TOKEN_EPSILON >= tokens:
                    self._tokens = max(0.0, self._tokens - tokens)
                    return
                wait = (tokens - self._tokens) / self.fill_rate
                await asyncio.sleep(max(wait, _MIN_SLEEP))


T = TypeVar("T")


def with_limiter(
    fn: Callable[..., Coroutine[Any, Any, T]] | None = None,
    *,
    tokens: int = 1,
) -> Any:
    """Acquire ``tokens`` from ``self.limiter`` before running the wrapped method.

    Usable bare (``@with_limiter``) or with arguments (``@with_limiter(tokens=2)``).
    """

    def decorator(
        func: Callable[..., Coroutine[Any, Any, T]],
    ) -> Callable[..., Coroutine[Any, Any, T]]:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            await self.limiter.acquire(tokens)
            return await func(self, *args, **kwargs)

        return wrapper

    if fn is not None:
        return decorator(fn)
    return decorator
