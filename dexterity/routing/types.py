"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, field

from dexterity.models.tokens import Token
from dexterity.opcode import Opcode
from dexterity.vaults.base import Vault


@dataclass(frozen=True)
class HopQuote:
    amount_in: int
    amount_out: int
    minimum_received: int | None = None


@dataclass
class Hop:
    """One priced conversion step through a single vault."""

    vault: Vault
    opcode: Opcode
    token_in: Token
    token_out: Token
    quote: HopQuote
    fee: int = 0


@dataclass
class Path:
    """Candidate token sequence from the path finder.

    `vaults` pins the vault used at each hop when every distinct vault
    sequence is enumerated; it is None when the evaluator should pick the
    best parallel vault per hop.
    """

    tokens: list[Token]
    vaults: list[Vault] | None = None
    discovery_index: int = 0

    @property
    def hop_count(self) -> int:
        return len(self.tokens) - 1

    @property
    def token_ids(self) -> list[str]:
        return [token.contract_id for token in self.tokens]


@dataclass
class Route:
    """A fully priced path.

    Invariant: hops[0].quote.amount_in == amount_in and each hop's
    amount_in equals the previous hop's amount_out.
    """

    path: list[Token]
    hops: list[Hop]
    amount_in: int
    amount_out: int
    discovery_index: int = 0

    @property
    def total_fees(self) -> int:
        return sum(hop.fee for hop in self.hops)

    @property
    def expected_price(self) -> float:
        return self.amount_out / self.amount_in if self.amount_in else 0.0

    @property
    def minimum_received(self) -> int:
        """Output floor after every hop's slippage bound.

        A hop that guarantees only part of its output shrinks the input of
        every later hop by the same ratio, so the floors compound.
        """
        minimum = self.amount_out
        for hop in self.hops:
            floor = hop.quote.minimum_received
            if floor is None or hop.quote.amount_out <= 0:
                continue
            minimum = minimum * min(floor, hop.quote.amount_out) // hop.quote.amount_out
        return minimum

    @property
    def vault_ids(self) -> list[str]:
        return [hop.vault.contract_id for hop in self.hops]

    @property
    def is_multihop(self) -> bool:
        return len(self.hops) > 1


@dataclass
class QuoteResult:
    """Summary of the best route for a quote request."""

    route: Route
    amount_in: int
    amount_out: int
    expected_price: float
    minimum_received: int
    fee: int

    @classmethod
    def from_route(cls, route: Route) -> QuoteResult:
        return cls(
            route=route,
            amount_in=route.amount_in,
            amount_out=route.amount_out,
            expected_price=route.expected_price,
            minimum_received=route.minimum_received,
            fee=route.total_fees,
        )


@dataclass(frozen=True)
class GraphStats:
    node_count: int
    edge_count: int
    token_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RouterCall:
    """Unsigned call description for the multi-hop router contract."""

    contract_id: str
    function_name: str
    amount: int
    hops: list[tuple[str, str]]


__all__ = [
    "GraphStats",
    "Hop",
    "HopQuote",
    "Path",
    "QuoteResult",
    "Route",
    "RouterCall",
]
