"""In-memory TTL cache for quotes and metadata lookups.

Safe for concurrent use from one event loop: callers racing on the same key
in `get_or_set` share a single computation.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from dexterity.constants import CACHE_MAX_ITEMS, DEFAULT_CACHE_TTL

T = TypeVar("T")


@dataclass
class CacheEntry:
    value: Any
    expiry: float


@dataclass
class KeyLock:
    """Per-key lock plus the number of callers holding or awaiting it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class TTLCache:
    """Bounded cache whose entries expire after a per-entry TTL (seconds).

    When full, the oldest inserted entry is evicted first.
    """

    def __init__(
        self,
        max_items: int = CACHE_MAX_ITEMS,
        default_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._items: OrderedDict[str, CacheEntry] = OrderedDict()
        self._locks: dict[str, KeyLock] = {}
        self._max_items = max_items
        self._default_ttl = default_ttl
        self._clock = clock

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Any | None:
        """Return a live entry's value, dropping it if expired."""
        entry = self._items.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expiry:
            del self._items[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        if key in self._items:
            del self._items[key]
        elif len(self._items) >= self._max_items:
            self._items.popitem(last=False)
        expiry = self._clock() + (self._default_ttl if ttl is None else ttl)
        self._items[key] = CacheEntry(value=value, expiry=expiry)

    async def get_or_set(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: float | None = None,
    ) -> T:
        """Return the cached value or compute, store and return it.

        Exceptions from `compute` propagate and nothing is stored.
        """
        entry = self._items.get(key)
        if entry is not None and self._clock() < entry.expiry:
            return entry.value

        # Locks live only while someone computes or waits on the key
        key_lock = self._locks.setdefault(key, KeyLock())
        key_lock.users += 1
        try:
            async with key_lock.lock:
                cached = self.get(key)
                if cached is not None:
                    return cached
                value = await compute()
                self.set(key, value, ttl)
                return value
        finally:
            key_lock.users -= 1
            if key_lock.users == 0 and self._locks.get(key) is key_lock:
                del self._locks[key]

    def invalidate(self, key: str) -> None:
        self._items.pop(key, None)
        self._locks.pop(key, None)

    def clear(self) -> None:
        self._items.clear()
        self._locks.clear()


__all__ = ["TTLCache"]
