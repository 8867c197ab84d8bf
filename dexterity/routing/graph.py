"""Token graph built from vaults.

Nodes are tokens; each vault contributes two directed edges (A->B and
B->A). Edge keys combine the target token and the vault id, so several
vaults between the same pair coexist as distinct edges.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from dexterity.models.tokens import Token
from dexterity.routing.types import GraphStats
from dexterity.vaults.base import Vault

logger = structlog.get_logger()


@dataclass
class GraphEdge:
    """Directed edge from a node's token to `target` through `vault`.

    `liquidity` is the target leg's reserve; it is informational only.
    """

    vault: Vault
    target: Token
    liquidity: int
    fee: int


@dataclass
class GraphNode:
    token: Token
    edges: dict[tuple[str, str], GraphEdge] = field(default_factory=dict)


def edge_key(target_id: str, vault_id: str) -> tuple[str, str]:
    return (target_id, vault_id)


class RouteGraph:
    """Adjacency map of tokens connected by vaults.

    The graph is rebuilt wholesale by `load_vaults`; there is no incremental
    update. Readers must not query it while a reload is running.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._vaults: dict[str, Vault] = {}

    def load_vaults(self, vaults: Iterable[Vault]) -> None:
        """Replace the whole graph with the given vaults.

        Vaults whose legs are the same token, and repeated vault ids, are
        skipped (first occurrence wins).
        """
        self._nodes.clear()
        self._vaults.clear()

        for vault in vaults:
            vault_id = vault.contract_id
            token_a, token_b = vault.get_legs()
            if vault_id in self._vaults:
                logger.warning("vault_skipped", vault=vault_id, reason="duplicate_id")
                continue
            if token_a.contract_id == token_b.contract_id:
                logger.warning("vault_skipped", vault=vault_id, reason="identical_legs")
                continue

            self._vaults[vault_id] = vault
            reserve_a, reserve_b = vault.get_reserves()
            fee = vault.get_fee()

            node_a = self._ensure_node(token_a)
            node_b = self._ensure_node(token_b)
            node_a.edges[edge_key(token_b.contract_id, vault_id)] = GraphEdge(
                vault=vault, target=token_b, liquidity=reserve_b, fee=fee
            )
            node_b.edges[edge_key(token_a.contract_id, vault_id)] = GraphEdge(
                vault=vault, target=token_a, liquidity=reserve_a, fee=fee
            )

        logger.debug(
            "graph_loaded",
            vaults=len(self._vaults),
            tokens=len(self._nodes),
        )

    def _ensure_node(self, token: Token) -> GraphNode:
        node = self._nodes.get(token.contract_id)
        if node is None:
            node = GraphNode(token=token)
            self._nodes[token.contract_id] = node
        return node

    def get_node(self, token_id: str) -> GraphNode | None:
        return self._nodes.get(token_id)

    def has_token(self, token_id: str) -> bool:
        return token_id in self._nodes

    def get_token(self, token_id: str) -> Token | None:
        node = self._nodes.get(token_id)
        return node.token if node else None

    def get_tokens(self) -> list[Token]:
        return [node.token for node in self._nodes.values()]

    def get_vault(self, vault_id: str) -> Vault | None:
        return self._vaults.get(vault_id)

    def get_vaults(self) -> list[Vault]:
        return list(self._vaults.values())

    def get_vaults_for_token(self, token_id: str) -> dict[str, Vault]:
        """Vaults touching a token, keyed by vault id, in discovery order."""
        node = self._nodes.get(token_id)
        if node is None:
            return {}
        return {edge.vault.contract_id: edge.vault for edge in node.edges.values()}

    def edges_between(self, from_id: str, to_id: str) -> list[GraphEdge]:
        """All parallel edges from one token to another, in discovery order."""
        node = self._nodes.get(from_id)
        if node is None:
            return []
        return [edge for edge in node.edges.values() if edge.target.contract_id == to_id]

    def get_graph_stats(self) -> GraphStats:
        return GraphStats(
            node_count=len(self._nodes),
            edge_count=sum(len(node.edges) for node in self._nodes.values()),
            token_ids=list(self._nodes),
        )


__all__ = ["GraphEdge", "GraphNode", "RouteGraph", "edge_key"]
