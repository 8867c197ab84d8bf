"""API endpoints for route quotes."""

import os

import structlog
from fastapi import APIRouter, Depends, HTTPException

from dexterity.api.schemas import (
    ErrorResponse,
    GraphStatsResponse,
    QuoteRequest,
    QuoteResponse,
    VaultResponse,
)
from dexterity.client import StacksClient
from dexterity.config import load_config
from dexterity.routing.router import Router
from dexterity.vaults.loader import build_vaults, load_pool_definitions

logger = structlog.get_logger()

router = APIRouter()

# Pools file loaded at first use; without it the router starts with an empty graph
POOLS_FILE = os.environ.get("DEXTERITY_POOLS_FILE")

# "local" quotes from listed reserves, "contract" calls each vault contract
QUOTE_MODE = os.environ.get("DEXTERITY_QUOTE_MODE", "local")

_default_router: Router | None = None


def create_router() -> Router:
    """Build a router from layered config and the pools file."""
    config = load_config()
    engine = Router(config)
    if POOLS_FILE:
        definitions = load_pool_definitions(POOLS_FILE)
        client = None
        if QUOTE_MODE == "contract":
            client = StacksClient(api_url=config.api_url, api_key=config.api_key)
        engine.load_vaults(build_vaults(definitions, QUOTE_MODE, client))  # type: ignore[arg-type]
    else:
        logger.warning("no_pools_file", message="Router starts with an empty graph")
    return engine


def get_router() -> Router:
    """Dependency provider for the router instance.

    Override this in tests to inject a prepared router:
        app.dependency_overrides[get_router] = lambda: test_router
    """
    global _default_router
    if _default_router is None:
        _default_router = create_router()
    return _default_router


@router.post(
    "/quote",
    response_model=QuoteResponse,
    response_model_by_alias=True,
    responses={
        404: {"model": ErrorResponse, "description": "No path between the tokens"},
        422: {"model": ErrorResponse, "description": "No path could be priced"},
    },
)
async def quote(
    request: QuoteRequest,
    engine: Router = Depends(get_router),
) -> QuoteResponse:
    """Find the best route for an exact-input swap.

    Error Handling:
        - Invalid request schema: 422 Validation Error (Pydantic)
        - No path between the tokens: 404 with {code, error}
        - Paths exist but none could be priced: 422 with {code, error}
    """
    logger.info(
        "received_quote_request",
        token_in=request.token_in,
        token_out=request.token_out,
        amount=request.amount,
    )
    result = await engine.get_quote(request.token_in, request.token_out, request.amount)
    call = engine.build_router_call(result.route)
    return QuoteResponse.from_result(result, call)


@router.get("/graph/stats", response_model=GraphStatsResponse, response_model_by_alias=True)
async def graph_stats(engine: Router = Depends(get_router)) -> GraphStatsResponse:
    return GraphStatsResponse.from_stats(engine.get_graph_stats())


@router.get(
    "/vaults/{token_id}", response_model=list[VaultResponse], response_model_by_alias=True
)
async def vaults_for_token(
    token_id: str, engine: Router = Depends(get_router)
) -> list[VaultResponse]:
    """List vaults that hold `token_id` as one of their legs."""
    if not engine.graph.has_token(token_id):
        raise HTTPException(status_code=404, detail=f"Unknown token: {token_id}")
    vaults = []
    for vault in engine.get_vaults_for_token(token_id):
        token_a, token_b = vault.get_legs()
        reserve_a, reserve_b = vault.get_reserves()
        vaults.append(
            VaultResponse(
                contract_id=vault.contract_id,
                token_a=token_a.contract_id,
                token_b=token_b.contract_id,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                fee=vault.get_fee(),
            )
        )
    return vaults
