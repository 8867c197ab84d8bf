"""Tests for the order book vault."""

import asyncio
from decimal import Decimal

import pytest

from dexterity.errors import QuoteFailedError
from dexterity.opcode import Opcode
from dexterity.vaults.order_book import ORDER_BOOK_FEE, OrderBook, OrderBookVault, fill_buy
from tests.helpers import TOKEN_A, TOKEN_B, make_pool

BOOK = OrderBook(
    bids=[(Decimal("1.5"), Decimal("5")), (Decimal("1"), Decimal("100"))],
    asks=[(Decimal("2"), Decimal("10")), (Decimal("4"), Decimal("100"))],
)


class CountingProvider:
    def __init__(self, book: OrderBook = BOOK, error: Exception | None = None) -> None:
        self.book = book
        self.error = error
        self.calls = 0

    async def __call__(self) -> OrderBook:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.book


def make_vault(provider: CountingProvider, fee: int = 0) -> OrderBookVault:
    return OrderBookVault(
        make_pool("book", TOKEN_A, TOKEN_B, 0, 0, fee=fee), provider, refresh_interval=60
    )


class TestFills:
    def test_buy_walks_asks(self) -> None:
        # 20 quote units buy 10 at 2, the remaining 10 buy 2.5 at 4
        assert fill_buy(BOOK.asks, Decimal("30")) == Decimal("12.5")

    def test_buy_larger_than_book(self) -> None:
        assert fill_buy([(Decimal("1"), Decimal("3"))], Decimal("10")) == Decimal("3")


class TestOrderBookVault:
    def test_default_fee(self) -> None:
        assert make_vault(CountingProvider()).get_fee() == ORDER_BOOK_FEE
        assert make_vault(CountingProvider(), fee=1000).get_fee() == 1000

    def test_buy_base_with_quote(self) -> None:
        vault = make_vault(CountingProvider())
        quote = asyncio.run(vault.quote(30_000_000, Opcode.swap_exact_a_for_b()))

        assert quote.amount_out == 12_500_000
        assert quote.minimum_received == 12_375_000

    def test_sell_base_for_quote(self) -> None:
        vault = make_vault(CountingProvider())
        quote = asyncio.run(vault.quote(10_000_000, Opcode.swap_exact_b_for_a()))

        # 5 at 1.5 then 5 at 1
        assert quote.amount_out == 12_500_000

    def test_snapshot_is_reused(self) -> None:
        provider = CountingProvider()
        vault = make_vault(provider)

        async def run() -> None:
            await vault.quote(1_000_000, Opcode.swap_exact_a_for_b())
            await vault.quote(1_000_000, Opcode.swap_exact_b_for_a())

        asyncio.run(run())
        assert provider.calls == 1

    def test_reserves_from_depth(self) -> None:
        vault = make_vault(CountingProvider())
        reserves = asyncio.run(vault.fetch_reserves())
        # bids notional 7.5 + 100, asks size 110
        assert reserves == (107_500_000, 110_000_000)

    def test_provider_failure(self) -> None:
        vault = make_vault(CountingProvider(error=ConnectionError("down")))
        with pytest.raises(QuoteFailedError):
            asyncio.run(vault.quote(1_000_000, Opcode.swap_exact_a_for_b()))

    def test_empty_book(self) -> None:
        vault = make_vault(CountingProvider(book=OrderBook()))
        with pytest.raises(QuoteFailedError):
            asyncio.run(vault.quote(1_000_000, Opcode.swap_exact_a_for_b()))

    def test_liquidity_opcode_rejected(self) -> None:
        vault = make_vault(CountingProvider())
        with pytest.raises(QuoteFailedError):
            asyncio.run(vault.quote(1_000_000, Opcode.remove_liquidity()))
