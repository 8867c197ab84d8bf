"""Vault backed by an off-chain order book.

Leg A is the quote currency and leg B the base asset. Prices are quote units
per base unit. SWAP_A_TO_B buys the base asset by walking the asks;
SWAP_B_TO_A sells it by walking the bids.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal

import structlog

from dexterity.errors import QuoteFailedError
from dexterity.models.tokens import PoolDefinition, Token
from dexterity.opcode import Opcode, OperationType
from dexterity.vaults.base import SwapQuote, VaultState

logger = structlog.get_logger()

# Default order book fee (0.5%, parts per million)
ORDER_BOOK_FEE = 5000


@dataclass(frozen=True)
class OrderBook:
    """Depth snapshot: (price, size) levels, best first."""

    bids: list[tuple[Decimal, Decimal]] = field(default_factory=list)
    asks: list[tuple[Decimal, Decimal]] = field(default_factory=list)


DepthProvider = Callable[[], Awaitable[OrderBook]]


def _to_units(amount: int, decimals: int) -> Decimal:
    return Decimal(amount) / (Decimal(10) ** decimals)


def _to_atomic(amount: Decimal, decimals: int) -> int:
    return int((amount * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN))


def fill_buy(asks: list[tuple[Decimal, Decimal]], quote_amount: Decimal) -> Decimal:
    """Base units received for spending `quote_amount` against the asks."""
    received = Decimal(0)
    remaining = quote_amount
    for price, size in asks:
        if remaining <= 0:
            break
        fill = min(remaining / price, size)
        received += fill
        remaining -= fill * price
    return received


def fill_sell(bids: list[tuple[Decimal, Decimal]], base_amount: Decimal) -> Decimal:
    """Quote units received for selling `base_amount` into the bids."""
    received = Decimal(0)
    remaining = base_amount
    for price, size in bids:
        if remaining <= 0:
            break
        fill = min(remaining, size)
        received += fill * price
        remaining -= fill
    return received


class OrderBookVault:
    """Quotes swaps against a periodically refreshed order book snapshot."""

    def __init__(
        self,
        definition: PoolDefinition,
        depth_provider: DepthProvider,
        refresh_interval: float = 5.0,
        slippage: Decimal = Decimal("0.01"),
    ) -> None:
        self.state = VaultState.from_definition(definition)
        if not definition.fee:
            self.state.fee = ORDER_BOOK_FEE
        self._depth_provider = depth_provider
        self._refresh_interval = refresh_interval
        self._slippage = slippage
        self._book: OrderBook | None = None
        self._fetched_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def contract_id(self) -> str:
        return self.state.contract_id

    def get_legs(self) -> tuple[Token, Token]:
        return self.state.token_a, self.state.token_b

    def get_reserves(self) -> tuple[int, int]:
        return self.state.reserve_a, self.state.reserve_b

    def get_fee(self) -> int:
        return self.state.fee

    async def get_order_book(self) -> OrderBook:
        """Return the cached snapshot, refreshing it when stale."""
        async with self._lock:
            now = time.monotonic()
            if self._book is None or now - self._fetched_at > self._refresh_interval:
                self._book = await self._depth_provider()
                self._fetched_at = now
            return self._book

    async def fetch_reserves(self) -> tuple[int, int]:
        """Estimate reserves from book depth: bid notional (A) and ask size (B)."""
        book = await self.get_order_book()
        bid_notional = sum((price * size for price, size in book.bids), Decimal(0))
        ask_size = sum((size for _, size in book.asks), Decimal(0))
        self.state.reserve_a = _to_atomic(bid_notional, self.state.token_a.decimals)
        self.state.reserve_b = _to_atomic(ask_size, self.state.token_b.decimals)
        return self.get_reserves()

    async def quote(self, amount: int, opcode: Opcode) -> SwapQuote:
        try:
            book = await self.get_order_book()
        except Exception as e:
            logger.warning("order_book_fetch_failed", vault=self.contract_id, error=str(e))
            raise QuoteFailedError(
                f"Order book unavailable for {self.contract_id}", vault_id=self.contract_id
            ) from e

        token_a, token_b = self.state.token_a, self.state.token_b
        if opcode.operation == OperationType.SWAP_A_TO_B:
            received = fill_buy(book.asks, _to_units(amount, token_a.decimals))
            amount_out = _to_atomic(received, token_b.decimals)
        elif opcode.operation == OperationType.SWAP_B_TO_A:
            received = fill_sell(book.bids, _to_units(amount, token_b.decimals))
            amount_out = _to_atomic(received, token_a.decimals)
        else:
            raise QuoteFailedError(
                f"Operation {opcode.operation:#04x} not supported by order book",
                vault_id=self.contract_id,
            )

        if amount_out <= 0:
            raise QuoteFailedError(
                f"Order book {self.contract_id} cannot fill {amount}", vault_id=self.contract_id
            )
        minimum = _to_atomic(Decimal(amount_out) * (1 - self._slippage), 0)
        return SwapQuote(
            amount_in=amount,
            amount_out=amount_out,
            expected_price=amount_out / amount,
            minimum_received=minimum,
            fee=self.state.fee,
        )


__all__ = ["OrderBook", "OrderBookVault", "DepthProvider", "fill_buy", "fill_sell"]
