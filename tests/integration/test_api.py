"""Integration tests: pools file -> router -> HTTP API."""

import pytest
from fastapi.testclient import TestClient

from dexterity.api import endpoints
from dexterity.api.main import app
from dexterity.errors import ConfigError
from dexterity.vaults.constant_product import get_amount_out
from dexterity.vaults.loader import build_vaults, load_pool_definitions
from tests.helpers import CHA, STX, WELSH


@pytest.fixture
def api_client(pools_file, monkeypatch):
    """API client backed by a router built from the pools fixture file."""
    monkeypatch.setattr(endpoints, "POOLS_FILE", str(pools_file))
    monkeypatch.setattr(endpoints, "QUOTE_MODE", "local")
    router = endpoints.create_router()
    app.dependency_overrides[endpoints.get_router] = lambda: router
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestPoolsFile:
    def test_load_definitions(self, pools_file) -> None:
        pools = load_pool_definitions(pools_file)
        assert [p.token_a.contract_id for p in pools] == [STX, CHA]
        assert pools[0].liquidity[1].reserves == 2_000_000_000

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            load_pool_definitions(tmp_path / "missing.json")

    def test_invalid_pool(self, tmp_path) -> None:
        path = tmp_path / "pools.json"
        path.write_text('[{"contractId": "SP1.pool", "liquidity": []}]')
        with pytest.raises(ConfigError):
            load_pool_definitions(path)

    def test_contract_mode_needs_client(self, pools_file) -> None:
        with pytest.raises(ConfigError):
            build_vaults(load_pool_definitions(pools_file), "contract")


class TestQuoteFlow:
    def test_two_hop_quote(self, api_client) -> None:
        response = api_client.post(
            "/quote", json={"tokenIn": STX, "tokenOut": WELSH, "amount": 1_000_000}
        )

        assert response.status_code == 200
        data = response.json()
        cha_out = get_amount_out(1_000_000, 1_000_000_000, 2_000_000_000, 3000)
        welsh_out = get_amount_out(cha_out, 2_000_000_000, 5_000_000_000, 3000)
        assert data["path"] == [STX, CHA, WELSH]
        assert data["amountOut"] == welsh_out
        assert data["transaction"]["hops"][0][0].endswith(".stx-cha")

    def test_reverse_direction(self, api_client) -> None:
        response = api_client.post(
            "/quote", json={"tokenIn": WELSH, "tokenOut": STX, "amount": 5_000_000}
        )
        assert response.status_code == 200
        hops = response.json()["hops"]
        # WELSH is the second leg of cha-welsh, CHA the second leg of stx-cha
        assert [hop["opcode"][:2] for hop in hops] == ["01", "01"]

    def test_graph_stats(self, api_client) -> None:
        data = api_client.get("/graph/stats").json()
        assert data["nodeCount"] == 3
        assert data["edgeCount"] == 4
