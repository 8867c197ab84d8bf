"""Multi-hop route finding across AMM vaults."""

from dexterity.config import RouterConfig, load_config
from dexterity.errors import (
    DexterityError,
    InvalidOpcodeError,
    InvalidPathError,
    NoValidRouteError,
    QuoteFailedError,
)
from dexterity.opcode import Opcode
from dexterity.routing.router import Router

__version__ = "0.1.0"

__all__ = [
    "DexterityError",
    "InvalidOpcodeError",
    "InvalidPathError",
    "NoValidRouteError",
    "Opcode",
    "QuoteFailedError",
    "Router",
    "RouterConfig",
    "load_config",
    "__version__",
]
