"""Tests for routing instrumentation counters."""

from dexterity.stats import RoutingStats


class TestRoutingStats:
    def test_increment_and_reset(self) -> None:
        stats = RoutingStats()
        stats.increment_paths_explored()
        stats.increment_quotes_requested()
        stats.increment_quotes_requested()
        stats.increment_quotes_failed()
        stats.increment_routes_evaluated()

        snapshot = stats.snapshot()
        assert snapshot["paths_explored"] == 1
        assert snapshot["quotes_requested"] == 2
        assert snapshot["quotes_failed"] == 1
        assert snapshot["routes_evaluated"] == 1
        assert snapshot["elapsed_ms"] >= 0

        stats.reset()
        assert stats.snapshot()["quotes_requested"] == 0

    def test_merge_adds_counters(self) -> None:
        total = RoutingStats(paths_explored=3, quotes_requested=2)
        query = RoutingStats(paths_explored=1, quotes_requested=4, quotes_failed=1)
        query.increment_routes_evaluated()

        total.merge(query)

        assert total.paths_explored == 4
        assert total.quotes_requested == 6
        assert total.quotes_failed == 1
        assert total.routes_evaluated == 1
        assert query.quotes_requested == 4
