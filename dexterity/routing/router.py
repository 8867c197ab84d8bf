"""Router engine: owns the token graph and selects the best route.

Each Router instance holds its own graph, so independent graphs (one per
network, one per test) never share state.

Query flow:
    find_best_route -> PathFinder (sync DFS) -> RouteEvaluator (one task per
    path) -> vault quotes -> best route by output, or a query-level error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from dexterity.cache import TTLCache
from dexterity.config import DEFAULT_CONFIG, RouterConfig
from dexterity.constants import MAX_HOPS_LIMIT
from dexterity.errors import (
    InvalidPathError,
    NoValidRouteError,
    QuoteFailedError,
    TransactionFailedError,
)
from dexterity.models.tokens import Token
from dexterity.routing.evaluator import RouteEvaluator
from dexterity.routing.graph import RouteGraph
from dexterity.routing.pathfinding import PathFinder
from dexterity.routing.types import GraphStats, Path, QuoteResult, Route, RouterCall
from dexterity.stats import RoutingStats
from dexterity.vaults.base import Vault

logger = structlog.get_logger()


def route_sort_key(route: Route) -> tuple[int, int, int]:
    """Best output first, then fewer hops, then earlier discovery."""
    return (-route.amount_out, len(route.hops), route.discovery_index)


class Router:
    """Multi-hop route finder over a set of vaults.

    Usage:
        router = Router(RouterConfig(max_hops=2))
        router.load_vaults(vaults)
        route = await router.find_best_route(".stx", "SP...charisma-token", 1_000_000)
    """

    def __init__(
        self,
        config: RouterConfig | None = None,
        cache: TTLCache | None = None,
        stats: RoutingStats | None = None,
    ) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG
        self.graph = RouteGraph()
        self.stats = stats if stats is not None else RoutingStats()
        self.cache = cache if cache is not None else TTLCache(
            max_items=self.config.cache_max_items, default_ttl=self.config.quote_cache_ttl
        )
        self.path_finder = PathFinder(self.graph, self.stats)
        self.evaluator = RouteEvaluator(self.graph, self.stats)

    # Graph management

    def load_vaults(self, vaults: Iterable[Vault]) -> None:
        """Rebuild the graph from scratch; cached paths and quotes are dropped."""
        self.graph.load_vaults(vaults)
        self.path_finder.invalidate()
        self.cache.clear()
        stats = self.graph.get_graph_stats()
        logger.info("vaults_loaded", tokens=stats.node_count, edges=stats.edge_count)

    def get_vaults_for_token(self, token_id: str) -> list[Vault]:
        return list(self.graph.get_vaults_for_token(token_id).values())

    def get_vault(self, vault_id: str) -> Vault | None:
        return self.graph.get_vault(vault_id)

    def get_vaults(self) -> list[Vault]:
        return self.graph.get_vaults()

    def get_tokens(self) -> list[Token]:
        return self.graph.get_tokens()

    def get_graph_stats(self) -> GraphStats:
        return self.graph.get_graph_stats()

    # Route finding

    def find_all_paths(self, from_id: str, to_id: str, max_hops: int | None = None) -> list[Path]:
        return self.path_finder.find_all_paths(
            from_id,
            to_id,
            self.config.max_hops if max_hops is None else max_hops,
            self.config.path_strategy,
        )

    async def evaluate_route(
        self, path: Path, amount: int, timeout: float | None = None
    ) -> Route:
        """Price a single path. Raises QuoteFailedError if any hop fails."""
        deadline = self._deadline(timeout)
        semaphore = asyncio.Semaphore(self.config.parallel_requests)
        return await self.evaluator.evaluate_route(path, amount, deadline, semaphore)

    async def find_best_route(
        self,
        token_in_id: str,
        token_out_id: str,
        amount: int,
        timeout: float | None = None,
    ) -> Route:
        """Find the highest-output route for an exact input amount.

        Args:
            token_in_id: Token to sell
            token_out_id: Token to buy
            amount: Exact input amount (atomic units)
            timeout: Query deadline in seconds (defaults to config.quote_timeout)

        Returns:
            Best route by output amount

        Raises:
            ValueError: If amount is not positive
            InvalidPathError: If no path exists within the hop budget
            NoValidRouteError: If every candidate path failed to price
        """
        if amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")

        # Counters for this query only; folded into the shared totals at the end
        query_stats = RoutingStats()
        try:
            return await self._search_routes(
                token_in_id, token_out_id, amount, timeout, query_stats
            )
        finally:
            self.stats.merge(query_stats)

    async def _search_routes(
        self,
        token_in_id: str,
        token_out_id: str,
        amount: int,
        timeout: float | None,
        query_stats: RoutingStats,
    ) -> Route:
        logger.debug(
            "pathfinding_started",
            token_in=token_in_id,
            token_out=token_out_id,
            amount=amount,
            max_hops=self.config.max_hops,
        )

        paths = self.path_finder.find_all_paths(
            token_in_id,
            token_out_id,
            self.config.max_hops,
            self.config.path_strategy,
            stats=query_stats,
        )
        if not paths:
            logger.info(
                "no_path_found",
                token_in=token_in_id,
                token_out=token_out_id,
                max_hops=self.config.max_hops,
            )
            raise InvalidPathError(f"No path found from {token_in_id} to {token_out_id}")

        deadline = self._deadline(timeout)
        semaphore = asyncio.Semaphore(self.config.parallel_requests)
        results = await asyncio.gather(
            *(
                self.evaluator.evaluate_route(p, amount, deadline, semaphore, query_stats)
                for p in paths
            ),
            return_exceptions=True,
        )

        routes: list[Route] = []
        for path, result in zip(paths, results, strict=True):
            if isinstance(result, Route):
                routes.append(result)
            elif isinstance(result, QuoteFailedError):
                logger.debug(
                    "path_dropped",
                    path=path.token_ids,
                    hop=result.hop_index,
                    vault=result.vault_id,
                    error=str(result),
                )
            else:
                raise result

        if not routes:
            logger.info(
                "no_valid_route",
                token_in=token_in_id,
                token_out=token_out_id,
                paths=len(paths),
                **query_stats.snapshot(),
            )
            raise NoValidRouteError(
                f"No valid routes from {token_in_id} to {token_out_id} "
                f"({len(paths)} path(s) failed to price)"
            )

        routes.sort(key=route_sort_key)
        best = routes[0]
        logger.info(
            "route_found",
            token_in=token_in_id,
            token_out=token_out_id,
            hops=len(best.hops),
            vaults=best.vault_ids,
            amount_in=best.amount_in,
            amount_out=best.amount_out,
            candidates=len(paths),
            valid=len(routes),
            **query_stats.snapshot(),
        )
        return best

    async def get_quote(
        self,
        token_in_id: str,
        token_out_id: str,
        amount: int,
        timeout: float | None = None,
    ) -> QuoteResult:
        """Best-route quote, memoized for `config.quote_cache_ttl` seconds.

        Failed queries are not cached.
        """
        key = f"quote:{token_in_id}:{token_out_id}:{amount}"

        async def compute() -> QuoteResult:
            route = await self.find_best_route(token_in_id, token_out_id, amount, timeout)
            return QuoteResult.from_route(route)

        return await self.cache.get_or_set(key, compute, self.config.quote_cache_ttl)

    def build_router_call(self, route: Route) -> RouterCall:
        """Describe the multi-hop router call that would execute a route."""
        if not 1 <= len(route.hops) <= MAX_HOPS_LIMIT:
            raise TransactionFailedError(
                f"Router contract supports 1 to {MAX_HOPS_LIMIT} hops, route has {len(route.hops)}"
            )
        return RouterCall(
            contract_id=self.config.router_contract,
            function_name=f"swap-{len(route.hops)}",
            amount=route.amount_in,
            hops=[(hop.vault.contract_id, hop.opcode.to_clarity_hex()) for hop in route.hops],
        )

    def _deadline(self, timeout: float | None) -> float | None:
        effective = timeout if timeout is not None else self.config.quote_timeout
        if effective is None:
            return None
        return asyncio.get_running_loop().time() + effective


__all__ = ["Router", "route_sort_key"]
