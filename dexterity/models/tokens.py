"""Token and pool definition models.

These mirror the JSON shape produced by pool discovery (camelCase keys),
so pool lists can be loaded with `PoolDefinition.model_validate(...)`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dexterity.constants import FEE_DENOMINATOR


class Token(BaseModel):
    """A fungible asset. Identity is `contract_id`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_id: str = Field(alias="contractId", min_length=1)
    identifier: str = ""
    name: str = ""
    symbol: str = ""
    decimals: int = Field(default=6, ge=0, le=38)

    def __hash__(self) -> int:
        return hash(self.contract_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.contract_id == other.contract_id


class Liquidity(BaseModel):
    """One leg of a pool: a token and its current reserve."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: Token
    reserves: int = Field(default=0, ge=0)


class PoolDefinition(BaseModel):
    """Description of a two-token liquidity pool (its LP token).

    `fee` is in parts per million: 3000 = 0.3%.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_id: str = Field(alias="contractId", min_length=1)
    name: str = ""
    symbol: str = ""
    decimals: int = Field(default=6, ge=0, le=38)
    fee: int = Field(default=0, ge=0, le=FEE_DENOMINATOR)
    liquidity: tuple[Liquidity, Liquidity]
    supply: int = Field(default=0, ge=0)

    @field_validator("liquidity", mode="before")
    @classmethod
    def _require_two_legs(cls, value: object) -> object:
        if isinstance(value, (list, tuple)) and len(value) != 2:
            raise ValueError(f"A pool must have exactly two liquidity legs, got {len(value)}")
        return value

    @property
    def token_a(self) -> Token:
        return self.liquidity[0].token

    @property
    def token_b(self) -> Token:
        return self.liquidity[1].token


__all__ = ["Token", "Liquidity", "PoolDefinition"]
