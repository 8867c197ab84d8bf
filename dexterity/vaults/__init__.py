"""Vault implementations.

Every vault satisfies the `Vault` protocol: two legs, reserves, a fee and
an async `quote(amount, opcode)`.
"""

from dexterity.vaults.base import SwapQuote, Vault, VaultState
from dexterity.vaults.constant_product import ConstantProductVault
from dexterity.vaults.contract import ContractVault
from dexterity.vaults.loader import build_vaults, load_pool_definitions
from dexterity.vaults.order_book import OrderBook, OrderBookVault

__all__ = [
    "Vault",
    "VaultState",
    "SwapQuote",
    "ContractVault",
    "ConstantProductVault",
    "OrderBook",
    "OrderBookVault",
    "build_vaults",
    "load_pool_definitions",
]
