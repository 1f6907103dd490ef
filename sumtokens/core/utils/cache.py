from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from aiocache import Cache
from loguru import logger


def _being_cancelled() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


V = TypeVar("V")


class CoalescingCache(Generic[V]):
    """Process-lifetime memoization with at most one in-flight fetch per key.

    The first caller for a key registers a pending future with ``add`` (which
    refuses to overwrite) before calling ``fetch_fn``; everyone else awaits that
    future. Successful values are kept with no TTL. Failures are delivered to
    every waiter and then dropped, unless ``cache_failures`` is set.
    """

    def __init__(self, namespace: str = "sumtokens", *, cache_failures: bool = False):
        self.namespace = f"{namespace}:{uuid.uuid4().hex}"
        self.cache_failures = cache_failures
        self.fetches = 0
        self._cache = Cache(Cache.MEMORY, namespace=self.namespace)

    async def get_or_fetch(self, key: Any, fetch_fn: Callable[[], Awaitable[V]]) -> V:
        cache_key = str(key)
        while True:
            future: asyncio.Future[V] | None = await self._cache.get(cache_key)
            if future is not None:
                try:
                    # shield: a cancelled waiter must not cancel the shared fetch
                    return await asyncio.shield(future)
                except asyncio.CancelledError:
                    # the fetching caller was cancelled, not this one: take over
                    if future.cancelled() and not _being_cancelled():
                        continue
                    raise
            pending: asyncio.Future[V] = asyncio.get_running_loop().create_future()
            try:
                await self._cache.add(cache_key, pending)
            except ValueError:
                # lost the race to register; wait on the winner's future
                continue
            return await self._fetch(cache_key, pending, fetch_fn)

    async def _fetch(
        self,
        cache_key: str,
        pending: asyncio.Future[V],
        fetch_fn: Callable[[], Awaitable[V]],
    ) -> V:
        self.fetches += 1
        try:
            value = await fetch_fn()
        except asyncio.CancelledError:
            await self._cache.delete(cache_key)
            pending.cancel()
            raise
        except Exception as exc:
            pending.set_exception(exc)
            pending.exception()  # the raising caller below retrieves it
            if not self.cache_failures:
                await self._cache.delete(cache_key)
            logger.debug(f"Fetch for {self.namespace}/{cache_key} failed: {exc}")
            raise
        pending.set_result(value)
        return value

    async def has(self, key: Any) -> bool:
        return await self._cache.exists(str(key))

    async def clear(self) -> None:
        await self._cache.clear(namespace=self.namespace)
