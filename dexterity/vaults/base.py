"""Vault interface shared by every liquidity source the router can use."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from dexterity.models.tokens import PoolDefinition, Token
from dexterity.opcode import Opcode, OperationType


@dataclass(frozen=True)
class SwapQuote:
    """Result of quoting a swap through a vault."""

    amount_in: int
    amount_out: int
    expected_price: float
    minimum_received: int
    fee: int


@runtime_checkable
class Vault(Protocol):
    """Protocol for a two-token liquidity source.

    Implementations: ContractVault (on-chain pool), ConstantProductVault
    (local reserves), OrderBookVault (off-chain order book). `quote` must be
    a read: calling it twice with the same arguments has no side effects.
    A failed quote raises (or returns an exception instance).
    """

    @property
    def contract_id(self) -> str: ...

    def get_legs(self) -> tuple[Token, Token]: ...

    def get_reserves(self) -> tuple[int, int]: ...

    def get_fee(self) -> int: ...

    async def quote(self, amount: int, opcode: Opcode) -> SwapQuote: ...


@dataclass
class VaultState:
    """Mutable snapshot of a pool's legs, reserves and fee."""

    contract_id: str
    token_a: Token
    token_b: Token
    reserve_a: int = 0
    reserve_b: int = 0
    fee: int = 0
    supply: int = 0

    @classmethod
    def from_definition(cls, definition: PoolDefinition) -> VaultState:
        leg_a, leg_b = definition.liquidity
        return cls(
            contract_id=definition.contract_id,
            token_a=leg_a.token,
            token_b=leg_b.token,
            reserve_a=leg_a.reserves,
            reserve_b=leg_b.reserves,
            fee=definition.fee,
            supply=definition.supply,
        )

    def oriented_reserves(self, opcode: Opcode) -> tuple[int, int]:
        """Return (reserve_in, reserve_out) for the opcode's swap direction."""
        if opcode.operation == OperationType.SWAP_A_TO_B:
            return self.reserve_a, self.reserve_b
        if opcode.operation == OperationType.SWAP_B_TO_A:
            return self.reserve_b, self.reserve_a
        raise ValueError(f"Opcode operation {opcode.operation:#04x} is not a swap")


def make_quote(amount_in: int, amount_out: int, fee: int) -> SwapQuote:
    """Build a SwapQuote with the price derived from the amounts."""
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        expected_price=amount_out / amount_in if amount_in else 0.0,
        minimum_received=amount_out,
        fee=fee,
    )


__all__ = ["SwapQuote", "Vault", "VaultState", "make_quote"]
