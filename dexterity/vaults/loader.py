"""Build vaults from a pool definition list.

The pools file is a JSON array of pool objects in discovery's camelCase
shape:

    [{"contractId": "SP...pool", "fee": 3000, "liquidity": [
        {"token": {"contractId": ".stx", "decimals": 6}, "reserves": 1000000},
        {"token": {"contractId": "SP...token"}, "reserves": 2000000}]}]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

import structlog
from pydantic import TypeAdapter, ValidationError

from dexterity.client import StacksClient
from dexterity.errors import ConfigError
from dexterity.models.tokens import PoolDefinition
from dexterity.vaults.base import Vault
from dexterity.vaults.constant_product import ConstantProductVault
from dexterity.vaults.contract import ContractVault

logger = structlog.get_logger()

QuoteMode = Literal["local", "contract"]

_pool_list = TypeAdapter(list[PoolDefinition])


def load_pool_definitions(path: str | Path) -> list[PoolDefinition]:
    """Parse and validate a pools JSON file.

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read pools file {path}: {e}") from e
    try:
        pools = _pool_list.validate_python(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid pools file {path}: {e}") from e
    logger.info("pools_loaded", path=str(path), count=len(pools))
    return pools


def build_vaults(
    definitions: list[PoolDefinition],
    mode: QuoteMode = "local",
    client: StacksClient | None = None,
) -> list[Vault]:
    """Wrap definitions as vaults.

    "local" quotes from the listed reserves; "contract" asks each vault
    contract for a quote through `client`.
    """
    if mode == "local":
        return [ConstantProductVault(d) for d in definitions]
    if mode == "contract":
        if client is None:
            raise ConfigError("Contract quote mode requires a StacksClient")
        return [ContractVault(d, client) for d in definitions]
    raise ConfigError(f"Unknown quote mode: {mode}")


__all__ = ["QuoteMode", "build_vaults", "load_pool_definitions"]
