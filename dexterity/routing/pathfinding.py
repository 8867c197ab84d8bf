"""Path enumeration over the token graph.

Depth-first search that bounds the number of hops and never traverses the
same vault twice within one path. Tokens may repeat (e.g. a loop A->B->A
through two different vaults), vaults may not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dexterity.config import PathStrategy
from dexterity.models.tokens import Token
from dexterity.routing.types import Path

if TYPE_CHECKING:
    from dexterity.routing.graph import GraphNode, RouteGraph
    from dexterity.stats import RoutingStats
    from dexterity.vaults.base import Vault

logger = structlog.get_logger()


class PathFinder:
    """Enumerates candidate paths with caching.

    Usage:
        finder = PathFinder(graph)
        paths = finder.find_all_paths(token_in, token_out, max_hops=3)

    Call `invalidate()` after the graph is reloaded.
    """

    def __init__(self, graph: RouteGraph, stats: RoutingStats | None = None) -> None:
        self._graph = graph
        self._stats = stats
        # (from_id, to_id, max_hops, strategy) -> paths
        self._path_cache: dict[tuple[str, str, int, str], list[Path]] = {}

    def invalidate(self) -> None:
        self._path_cache.clear()

    def find_all_paths(
        self,
        from_id: str,
        to_id: str,
        max_hops: int,
        strategy: PathStrategy = "vault_sequence",
        stats: RoutingStats | None = None,
    ) -> list[Path]:
        """Find every simple path from one token to another.

        Args:
            from_id: Starting token id
            to_id: Target token id (may equal from_id for cyclic routes)
            max_hops: Maximum number of edges in a path
            strategy: "vault_sequence" returns one path per distinct vault
                sequence; "asset_sequence" returns one path per distinct
                token sequence, with no vaults pinned
            stats: Counters for this call (defaults to the finder's own)

        Returns:
            Paths in discovery order. Empty if from_id is unknown or the
            target is unreachable within max_hops.
        """
        start = self._graph.get_node(from_id)
        # Misses on unknown tokens are not cached, so the cache stays bounded by the graph
        if start is None or not self._graph.has_token(to_id) or max_hops < 1:
            return []

        cache_key = (from_id, to_id, max_hops, strategy)
        if cache_key in self._path_cache:
            return list(self._path_cache[cache_key])

        found: list[Path] = []
        counters = stats if stats is not None else self._stats
        self._search(start, to_id, max_hops, [start.token], [], frozenset(), found, counters)

        if strategy == "asset_sequence":
            found = self._dedupe_by_tokens(found)

        for index, path in enumerate(found):
            path.discovery_index = index

        logger.debug(
            "paths_enumerated",
            token_in=from_id,
            token_out=to_id,
            max_hops=max_hops,
            strategy=strategy,
            paths=len(found),
        )
        self._path_cache[cache_key] = found
        return list(found)

    def _search(
        self,
        node: GraphNode,
        to_id: str,
        max_hops: int,
        tokens: list[Token],
        vaults: list[Vault],
        used_vaults: frozenset[str],
        found: list[Path],
        stats: RoutingStats | None,
    ) -> None:
        if stats is not None:
            stats.increment_paths_explored()

        if node.token.contract_id == to_id and len(tokens) >= 2:
            found.append(Path(tokens=tokens, vaults=vaults))

        # tokens holds hop_count + 1 entries
        if len(tokens) > max_hops:
            return

        for edge in node.edges.values():
            vault_id = edge.vault.contract_id
            if vault_id in used_vaults:
                continue
            next_node = self._graph.get_node(edge.target.contract_id)
            if next_node is None:
                continue
            self._search(
                next_node,
                to_id,
                max_hops,
                tokens + [next_node.token],
                vaults + [edge.vault],
                used_vaults | {vault_id},
                found,
                stats,
            )

    @staticmethod
    def _dedupe_by_tokens(paths: list[Path]) -> list[Path]:
        seen: set[tuple[str, ...]] = set()
        unique: list[Path] = []
        for path in paths:
            key = tuple(path.token_ids)
            if key in seen:
                continue
            seen.add(key)
            unique.append(Path(tokens=path.tokens))
        return unique


__all__ = ["PathFinder"]
