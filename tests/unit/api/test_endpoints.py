"""Unit tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from dexterity.api.endpoints import get_router
from dexterity.api.main import app
from dexterity.config import RouterConfig
from dexterity.routing.router import Router
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C, TOKEN_D, StubVault, failing_vault, pool_id


def make_router(*vaults: StubVault) -> Router:
    router = Router(RouterConfig(max_hops=2))
    router.load_vaults(vaults)
    return router


@pytest.fixture
def client():
    """Create a test client for the API."""
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_router(router: Router) -> None:
    app.dependency_overrides[get_router] = lambda: router


class TestQuoteEndpoint:
    def test_returns_best_route(self, client) -> None:
        use_router(
            make_router(
                StubVault("ab", TOKEN_A, TOKEN_B, output=500),
                StubVault("bc", TOKEN_B, TOKEN_C, output=450),
            )
        )
        response = client.post(
            "/quote", json={"tokenIn": TOKEN_A, "tokenOut": TOKEN_C, "amount": 1000}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["amountIn"] == 1000
        assert data["amountOut"] == 450
        assert data["path"] == [TOKEN_A, TOKEN_B, TOKEN_C]
        assert [hop["vault"] for hop in data["hops"]] == [pool_id("ab"), pool_id("bc")]
        assert data["hops"][1]["amountIn"] == 500
        assert data["hops"][0]["opcode"] == "00" * 16
        assert data["transaction"]["functionName"] == "swap-2"
        assert data["totalFees"] == 6000
        assert data["minimumReceived"] == 450
        assert data["hops"][0]["minimumReceived"] == 500

    def test_no_path_is_404(self, client) -> None:
        use_router(
            make_router(StubVault("ab", TOKEN_A, TOKEN_B), StubVault("cd", TOKEN_C, TOKEN_D))
        )
        response = client.post(
            "/quote", json={"tokenIn": TOKEN_A, "tokenOut": TOKEN_D, "amount": 1000}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == 1004
        assert TOKEN_D in body["error"]

    def test_no_valid_route_is_422(self, client) -> None:
        use_router(make_router(failing_vault("ab", TOKEN_A, TOKEN_B)))
        response = client.post(
            "/quote", json={"tokenIn": TOKEN_A, "tokenOut": TOKEN_B, "amount": 1000}
        )

        assert response.status_code == 422
        assert response.json()["code"] == 1008

    @pytest.mark.parametrize(
        "payload",
        [
            {"tokenIn": TOKEN_A, "tokenOut": TOKEN_B, "amount": 0},
            {"tokenIn": TOKEN_A, "amount": 10},
            {"tokenIn": "", "tokenOut": TOKEN_B, "amount": 10},
        ],
    )
    def test_invalid_request(self, client, payload: dict) -> None:
        use_router(make_router(StubVault("ab", TOKEN_A, TOKEN_B)))
        response = client.post("/quote", json=payload)
        assert response.status_code == 422
        assert "detail" in response.json()

    def test_error_responses_are_documented(self, client) -> None:
        schema = client.get("/openapi.json").json()
        responses = schema["paths"]["/quote"]["post"]["responses"]

        error_ref = "#/components/schemas/ErrorResponse"
        for status in ("404", "422"):
            assert responses[status]["content"]["application/json"]["schema"]["$ref"] == error_ref
        assert set(schema["components"]["schemas"]["ErrorResponse"]["required"]) == {
            "code",
            "error",
        }


class TestGraphEndpoints:
    def test_graph_stats(self, client) -> None:
        use_router(
            make_router(StubVault("ab", TOKEN_A, TOKEN_B), StubVault("bc", TOKEN_B, TOKEN_C))
        )
        response = client.get("/graph/stats")

        assert response.status_code == 200
        assert response.json() == {
            "nodeCount": 3,
            "edgeCount": 4,
            "tokenIds": [TOKEN_A, TOKEN_B, TOKEN_C],
        }

    def test_vaults_for_token(self, client) -> None:
        use_router(
            make_router(StubVault("ab", TOKEN_A, TOKEN_B), StubVault("bc", TOKEN_B, TOKEN_C))
        )
        response = client.get(f"/vaults/{TOKEN_B}")

        assert response.status_code == 200
        vaults = response.json()
        assert [v["contractId"] for v in vaults] == [pool_id("ab"), pool_id("bc")]
        assert vaults[0]["tokenA"] == TOKEN_A
        assert vaults[0]["fee"] == 3000

    def test_vaults_for_unknown_token(self, client) -> None:
        use_router(make_router(StubVault("ab", TOKEN_A, TOKEN_B)))
        assert client.get(f"/vaults/{TOKEN_D}").status_code == 404

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
