"""Constant product vault quoted from locally known reserves.

Formula: amount_out = (in * (1e6 - fee) * res_out) / (res_in * 1e6 + in * (1e6 - fee))

Used for offline quoting and as the reference pool in tests.
"""

from __future__ import annotations

from dexterity.constants import FEE_DENOMINATOR
from dexterity.errors import QuoteFailedError
from dexterity.models.tokens import PoolDefinition, Token
from dexterity.opcode import Opcode
from dexterity.vaults.base import SwapQuote, VaultState, make_quote


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee: int) -> int:
    """Calculate output amount with the fee taken from the input.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee: Fee in parts per million

    Returns:
        Output token amount (0 for non-positive inputs or reserves)
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0
    amount_in_with_fee = amount_in * (FEE_DENOMINATOR - fee)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


class ConstantProductVault:
    """x * y = k pool whose reserves are held in memory."""

    def __init__(self, definition: PoolDefinition) -> None:
        self.state = VaultState.from_definition(definition)

    @property
    def contract_id(self) -> str:
        return self.state.contract_id

    def get_legs(self) -> tuple[Token, Token]:
        return self.state.token_a, self.state.token_b

    def get_reserves(self) -> tuple[int, int]:
        return self.state.reserve_a, self.state.reserve_b

    def get_fee(self) -> int:
        return self.state.fee

    def update_reserves(self, reserve_a: int, reserve_b: int) -> None:
        self.state.reserve_a = reserve_a
        self.state.reserve_b = reserve_b

    async def quote(self, amount: int, opcode: Opcode) -> SwapQuote:
        try:
            reserve_in, reserve_out = self.state.oriented_reserves(opcode)
        except ValueError as e:
            raise QuoteFailedError(str(e), vault_id=self.contract_id) from e

        amount_out = get_amount_out(amount, reserve_in, reserve_out, self.state.fee)
        if amount_out <= 0:
            raise QuoteFailedError(
                f"No output from {self.contract_id} for input {amount}",
                vault_id=self.contract_id,
            )
        return make_quote(amount_in=amount, amount_out=amount_out, fee=self.state.fee)


__all__ = ["ConstantProductVault", "get_amount_out"]
