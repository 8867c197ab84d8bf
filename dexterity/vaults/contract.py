"""On-chain vault quoted through read-only contract calls."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dexterity.clarity import ClarityResponse, deserialize, serialize_uint
from dexterity.errors import NetworkError, QuoteFailedError
from dexterity.models.tokens import PoolDefinition, Token
from dexterity.opcode import Opcode
from dexterity.vaults.base import SwapQuote, VaultState, make_quote

if TYPE_CHECKING:
    from dexterity.client import StacksClient

logger = structlog.get_logger()

QUOTE_FUNCTION = "quote"
DELTA_FIELDS = {"dx", "dy", "dk"}


class ContractVault:
    """A liquidity pool contract implementing `quote(amount, opcode)`.

    The contract answers `(ok {dx, dy, dk})`: input, output and LP amounts.
    With LOOKUP_RESERVES the same tuple holds reserve A, reserve B and supply.
    """

    def __init__(self, definition: PoolDefinition, client: StacksClient) -> None:
        self.state = VaultState.from_definition(definition)
        self._client = client

    @property
    def contract_id(self) -> str:
        return self.state.contract_id

    def get_legs(self) -> tuple[Token, Token]:
        return self.state.token_a, self.state.token_b

    def get_reserves(self) -> tuple[int, int]:
        return self.state.reserve_a, self.state.reserve_b

    def get_fee(self) -> int:
        return self.state.fee

    async def _call_quote(self, amount: int, opcode: Opcode) -> dict[str, int]:
        try:
            result_hex = await self._client.call_read_only(
                self.contract_id,
                QUOTE_FUNCTION,
                [serialize_uint(amount), opcode.to_clarity_hex()],
            )
            result = deserialize(result_hex)
        except (NetworkError, ValueError) as e:
            raise QuoteFailedError(str(e), vault_id=self.contract_id) from e

        if not isinstance(result, ClarityResponse):
            raise QuoteFailedError(
                f"Unexpected quote result from {self.contract_id}", vault_id=self.contract_id
            )
        if not result.ok:
            raise QuoteFailedError(
                f"Vault {self.contract_id} returned error {result.value}",
                vault_id=self.contract_id,
            )
        if not isinstance(result.value, dict) or not DELTA_FIELDS <= result.value.keys():
            raise QuoteFailedError(
                f"Malformed quote tuple from {self.contract_id}", vault_id=self.contract_id
            )
        return result.value

    async def quote(self, amount: int, opcode: Opcode) -> SwapQuote:
        delta = await self._call_quote(amount, opcode)
        return make_quote(amount_in=delta["dx"], amount_out=delta["dy"], fee=self.state.fee)

    async def fetch_reserves(self) -> tuple[int, int]:
        """Refresh reserves and supply using the LOOKUP_RESERVES opcode."""
        delta = await self._call_quote(0, Opcode.lookup_reserves())
        self.state.reserve_a = delta["dx"]
        self.state.reserve_b = delta["dy"]
        self.state.supply = delta["dk"]
        logger.debug(
            "vault_reserves_refreshed",
            vault=self.contract_id,
            reserve_a=self.state.reserve_a,
            reserve_b=self.state.reserve_b,
        )
        return self.get_reserves()


__all__ = ["ContractVault"]
