"""Routing instrumentation counters.

Counters are diagnostic only; nothing in the router reads them to make a
decision.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class RoutingStats:
    """Counters for one or more route queries."""

    paths_explored: int = 0
    quotes_requested: int = 0
    quotes_failed: int = 0
    routes_evaluated: int = 0
    started_at: float = field(default_factory=time.monotonic)

    def reset(self) -> None:
        self.paths_explored = 0
        self.quotes_requested = 0
        self.quotes_failed = 0
        self.routes_evaluated = 0
        self.started_at = time.monotonic()

    def increment_paths_explored(self) -> None:
        self.paths_explored += 1

    def increment_quotes_requested(self) -> None:
        self.quotes_requested += 1

    def increment_quotes_failed(self) -> None:
        self.quotes_failed += 1

    def increment_routes_evaluated(self) -> None:
        self.routes_evaluated += 1

    def merge(self, other: RoutingStats) -> None:
        """Add another query's counters to these."""
        self.paths_explored += other.paths_explored
        self.quotes_requested += other.quotes_requested
        self.quotes_failed += other.quotes_failed
        self.routes_evaluated += other.routes_evaluated

    def snapshot(self) -> dict[str, float | int]:
        return {
            "paths_explored": self.paths_explored,
            "quotes_requested": self.quotes_requested,
            "quotes_failed": self.quotes_failed,
            "routes_evaluated": self.routes_evaluated,
            "elapsed_ms": round((time.monotonic() - self.started_at) * 1000, 3),
        }


__all__ = ["RoutingStats"]
