"""Test helpers module for shared test utilities.

- constants: Token ids used across tests
- factories: Token, pool and stub vault factories
"""

from tests.helpers.constants import (
    CHA,
    STX,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    WELSH,
)
from tests.helpers.factories import (
    ConcurrencyTracker,
    StubVault,
    failing_vault,
    make_pool,
    make_token,
    pool_id,
)

__all__ = [
    # Constants
    "STX",
    "CHA",
    "WELSH",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    # Factories
    "ConcurrencyTracker",
    "StubVault",
    "failing_vault",
    "make_pool",
    "make_token",
    "pool_id",
]
