"""Tests for the TTL cache."""

import asyncio

import pytest

from dexterity.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    def test_get_before_and_after_expiry(self) -> None:
        clock = FakeClock()
        cache = TTLCache(default_ttl=30, clock=clock)
        cache.set("k", "v")

        clock.now = 29.9
        assert cache.get("k") == "v"
        clock.now = 30.0
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_per_entry_ttl(self) -> None:
        clock = FakeClock()
        cache = TTLCache(default_ttl=300, clock=clock)
        cache.set("short", 1, ttl=5)
        cache.set("long", 2)

        clock.now = 10
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_evicts_oldest_when_full(self) -> None:
        cache = TTLCache(max_items=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_overwrite_does_not_evict(self) -> None:
        cache = TTLCache(max_items=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)

        assert len(cache) == 2
        assert cache.get("a") == 10
        assert cache.get("b") == 2

    def test_invalidate_and_clear(self) -> None:
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        cache.clear()
        assert len(cache) == 0


class TestGetOrSet:
    def test_computes_once_for_concurrent_callers(self) -> None:
        cache = TTLCache()
        calls = 0

        async def compute() -> int:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return 42

        async def run() -> list[int]:
            return await asyncio.gather(*(cache.get_or_set("k", compute) for _ in range(5)))

        assert asyncio.run(run()) == [42] * 5
        assert calls == 1
        assert cache._locks == {}

    def test_failure_is_not_cached(self) -> None:
        cache = TTLCache()

        async def boom() -> int:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(cache.get_or_set("k", boom))
        assert cache.get("k") is None

    def test_recomputes_after_expiry(self) -> None:
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        values = iter([1, 2])

        async def compute() -> int:
            return next(values)

        assert asyncio.run(cache.get_or_set("k", compute, ttl=30)) == 1
        assert asyncio.run(cache.get_or_set("k", compute, ttl=30)) == 1
        clock.now = 31
        assert asyncio.run(cache.get_or_set("k", compute, ttl=30)) == 2

    def test_locks_are_released_after_compute(self) -> None:
        cache = TTLCache(max_items=3)

        async def compute() -> int:
            return 1

        async def run() -> None:
            for i in range(20):
                await cache.get_or_set(f"k{i}", compute)

        asyncio.run(run())
        assert len(cache) == 3
        assert cache._locks == {}

    def test_lock_released_after_failure(self) -> None:
        cache = TTLCache()

        async def boom() -> int:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(cache.get_or_set("k", boom))
        assert cache._locks == {}
