"""Request and response models for the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dexterity.routing.types import GraphStats, QuoteResult, Route, RouterCall


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuoteRequest(ApiModel):
    token_in: str = Field(alias="tokenIn", min_length=1)
    token_out: str = Field(alias="tokenOut", min_length=1)
    amount: int = Field(gt=0)


class HopResponse(ApiModel):
    vault: str
    token_in: str = Field(alias="tokenIn")
    token_out: str = Field(alias="tokenOut")
    amount_in: int = Field(alias="amountIn")
    amount_out: int = Field(alias="amountOut")
    minimum_received: int | None = Field(default=None, alias="minimumReceived")
    fee: int
    opcode: str


class RouterCallResponse(ApiModel):
    contract_id: str = Field(alias="contractId")
    function_name: str = Field(alias="functionName")
    amount: int
    hops: list[tuple[str, str]]

    @classmethod
    def from_call(cls, call: RouterCall) -> RouterCallResponse:
        return cls(
            contract_id=call.contract_id,
            function_name=call.function_name,
            amount=call.amount,
            hops=call.hops,
        )


class QuoteResponse(ApiModel):
    token_in: str = Field(alias="tokenIn")
    token_out: str = Field(alias="tokenOut")
    amount_in: int = Field(alias="amountIn")
    amount_out: int = Field(alias="amountOut")
    expected_price: float = Field(alias="expectedPrice")
    minimum_received: int = Field(alias="minimumReceived")
    total_fees: int = Field(alias="totalFees")
    path: list[str]
    hops: list[HopResponse]
    transaction: RouterCallResponse

    @classmethod
    def from_result(cls, result: QuoteResult, call: RouterCall) -> QuoteResponse:
        route: Route = result.route
        return cls(
            token_in=route.path[0].contract_id,
            token_out=route.path[-1].contract_id,
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            expected_price=result.expected_price,
            minimum_received=result.minimum_received,
            total_fees=result.fee,
            path=[token.contract_id for token in route.path],
            hops=[
                HopResponse(
                    vault=hop.vault.contract_id,
                    token_in=hop.token_in.contract_id,
                    token_out=hop.token_out.contract_id,
                    amount_in=hop.quote.amount_in,
                    amount_out=hop.quote.amount_out,
                    minimum_received=hop.quote.minimum_received,
                    fee=hop.fee,
                    opcode=hop.opcode.to_hex(),
                )
                for hop in route.hops
            ],
            transaction=RouterCallResponse.from_call(call),
        )


class GraphStatsResponse(ApiModel):
    node_count: int = Field(alias="nodeCount")
    edge_count: int = Field(alias="edgeCount")
    token_ids: list[str] = Field(alias="tokenIds")

    @classmethod
    def from_stats(cls, stats: GraphStats) -> GraphStatsResponse:
        return cls(
            node_count=stats.node_count,
            edge_count=stats.edge_count,
            token_ids=list(stats.token_ids),
        )


class VaultResponse(ApiModel):
    contract_id: str = Field(alias="contractId")
    token_a: str = Field(alias="tokenA")
    token_b: str = Field(alias="tokenB")
    reserve_a: int = Field(alias="reserveA")
    reserve_b: int = Field(alias="reserveB")
    fee: int


class ErrorResponse(ApiModel):
    code: int
    error: str


__all__ = [
    "ErrorResponse",
    "GraphStatsResponse",
    "HopResponse",
    "QuoteRequest",
    "QuoteResponse",
    "RouterCallResponse",
    "VaultResponse",
]
