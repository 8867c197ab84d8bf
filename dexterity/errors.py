"""Error classes for routing operations.

Each error carries the numeric code the rest of the network tooling uses
for the same failure.
"""

from __future__ import annotations

from dexterity.constants import (
    ERROR_INVALID_CONFIG,
    ERROR_INVALID_OPCODE,
    ERROR_INVALID_PATH,
    ERROR_NETWORK,
    ERROR_NO_VALID_ROUTE,
    ERROR_QUOTE_FAILED,
    ERROR_TRANSACTION_FAILED,
)


class DexterityError(Exception):
    """Base error for router operations."""

    code: int = 0
    kind: str = "DEXTERITY_ERROR"


class InvalidPathError(DexterityError):
    """No path exists between two tokens within the hop budget."""

    code = ERROR_INVALID_PATH
    kind = "INVALID_PATH"


class NoValidRouteError(DexterityError):
    """Paths existed but every candidate failed to price."""

    code = ERROR_NO_VALID_ROUTE
    kind = "NO_VALID_ROUTE"


class QuoteFailedError(DexterityError):
    """A vault failed to return a usable quote for one hop."""

    code = ERROR_QUOTE_FAILED
    kind = "QUOTE_FAILED"

    def __init__(
        self,
        message: str,
        vault_id: str | None = None,
        hop_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.vault_id = vault_id
        self.hop_index = hop_index


class TransactionFailedError(DexterityError):
    """Building or submitting a transaction failed."""

    code = ERROR_TRANSACTION_FAILED
    kind = "TRANSACTION_FAILED"


class InvalidOpcodeError(DexterityError, ValueError):
    """Opcode bytes or hex input are malformed."""

    code = ERROR_INVALID_OPCODE
    kind = "INVALID_OPCODE"


class ConfigError(DexterityError):
    """Router configuration failed validation."""

    code = ERROR_INVALID_CONFIG
    kind = "INVALID_CONFIG"


class NetworkError(DexterityError):
    """Remote API call failed."""

    code = ERROR_NETWORK
    kind = "NETWORK_ERROR"


__all__ = [
    "DexterityError",
    "InvalidPathError",
    "NoValidRouteError",
    "QuoteFailedError",
    "TransactionFailedError",
    "InvalidOpcodeError",
    "ConfigError",
    "NetworkError",
]
