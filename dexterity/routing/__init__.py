"""Route finding over vault liquidity.

Module structure:
- types.py: Hop, Path, Route and related dataclasses
- graph.py: RouteGraph built from vaults
- pathfinding.py: PathFinder (hop-bounded DFS, no vault reuse)
- evaluator.py: RouteEvaluator (chains vault quotes along a path)
- router.py: Router engine and best-route selection
"""

from dexterity.routing.evaluator import RouteEvaluator
from dexterity.routing.graph import GraphEdge, GraphNode, RouteGraph
from dexterity.routing.pathfinding import PathFinder
from dexterity.routing.router import Router
from dexterity.routing.types import GraphStats, Hop, HopQuote, Path, QuoteResult, Route, RouterCall

__all__ = [
    "GraphEdge",
    "GraphNode",
    "GraphStats",
    "Hop",
    "HopQuote",
    "Path",
    "PathFinder",
    "QuoteResult",
    "Route",
    "RouteEvaluator",
    "RouteGraph",
    "Router",
    "RouterCall",
]
