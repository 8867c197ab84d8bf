"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from dexterity.config import RouterConfig
from dexterity.routing.router import Router
from dexterity.vaults.base import Vault
from tests.helpers import CHA, STX, WELSH, pool_id


@pytest.fixture
def make_router() -> Callable[..., Router]:
    """Build a router over the given vaults.

    Usage:
        router = make_router([vault1, vault2], max_hops=2)
    """

    def _make(vaults: list[Vault], **config: object) -> Router:
        router = Router(RouterConfig(**config))
        router.load_vaults(vaults)
        return router

    return _make


def pool_json(name: str, token_a: str, token_b: str, reserve_a: int, reserve_b: int) -> dict:
    """A pool object in discovery's camelCase shape."""
    return {
        "contractId": pool_id(name),
        "name": name.upper(),
        "fee": 3000,
        "liquidity": [
            {"token": {"contractId": token_a}, "reserves": reserve_a},
            {"token": {"contractId": token_b}, "reserves": reserve_b},
        ],
    }


@pytest.fixture
def pools_file(tmp_path: Path) -> Path:
    """Write a STX/CHA/WELSH pool list and return its path."""
    pools = [
        pool_json("stx-cha", STX, CHA, 1_000_000_000, 2_000_000_000),
        pool_json("cha-welsh", CHA, WELSH, 2_000_000_000, 5_000_000_000),
    ]
    path = tmp_path / "pools.json"
    path.write_text(json.dumps(pools))
    return path
