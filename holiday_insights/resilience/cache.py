"""
Cache-aside memoization for async computations.

``get_or_compute(key, compute)`` returns the stored value for ``key`` or runs
``compute`` and stores its result. Concurrent misses on one key share a
single in-flight computation. Failures are handed to every waiter but never
stored. A cancelled caller stops waiting while the shared computation runs on
for the others. With ``max_entries`` set, least-recently-used entries are
evicted.
"""
import asyncio
import functools
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    joins: int = 0
    evictions: int = 0


class ResultCache:
    """Keyed async memoization with single-flight and an optional LRU bound."""

    def __init__(self, name: str, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1 or None")
        self.name = name
        self.max_entries = max_entries
        self.stats = CacheStats()
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._in_flight: Dict[Hashable, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    async def get_or_compute(self, key: Hashable, compute: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for ``key``, computing it on a miss.

        The computation runs in its own task and every caller awaits it through
        ``asyncio.shield``, so cancelling one caller never cancels the others.

        Args:
            key: Hashable key, conventionally ``(operation, *arguments)``
            compute: Zero-argument coroutine factory producing the value

        Returns:
            The cached or freshly computed value
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            self.stats.hits += 1
            return self._entries[key]

        pending = self._in_flight.get(key)
        if pending is not None:
            self.stats.joins += 1
            return await asyncio.shield(pending)

        self.stats.misses += 1
        task = asyncio.ensure_future(compute())
        self._in_flight[key] = task
        task.add_done_callback(functools.partial(self._settle, key))
        return await asyncio.shield(task)

    def _settle(self, key: Hashable, task: asyncio.Future) -> None:
        self._in_flight.pop(key, None)
        if task.cancelled():
            return
        # exception() also marks a failure as retrieved when nobody awaits it
        if task.exception() is None:
            self._store(key, task.result())

    def _store(self, key: Hashable, value: Any) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self.stats.evictions += 1
            logger.debug("Evicted cache entry", extra={"cache": self.name, "key": evicted})

    def invalidate(self, key: Hashable) -> bool:
        """Drop one entry. Returns True if it was present."""
        if key not in self._entries:
            return False
        del self._entries[key]
        return True

    def clear(self) -> None:
        self._entries.clear()
