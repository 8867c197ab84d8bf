"""Tests for token and pool models."""

import pytest
from pydantic import ValidationError

from dexterity.models.tokens import PoolDefinition, Token
from tests.helpers import STX, TOKEN_A, make_pool, make_token


class TestToken:
    def test_camel_case_alias(self) -> None:
        token = Token.model_validate({"contractId": STX, "symbol": "STX"})
        assert token.contract_id == STX
        assert token.decimals == 6

    def test_identity_is_contract_id(self) -> None:
        assert Token(contract_id=STX, symbol="STX") == Token(contract_id=STX, symbol="wSTX")
        assert len({make_token(STX), make_token(STX), make_token(TOKEN_A)}) == 2

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Token(contract_id="")


class TestPoolDefinition:
    def test_legs(self) -> None:
        pool = make_pool("p1", STX, TOKEN_A, 10, 20)
        assert pool.token_a.contract_id == STX
        assert pool.token_b.contract_id == TOKEN_A

    def test_requires_two_legs(self) -> None:
        with pytest.raises(ValidationError, match="exactly two"):
            PoolDefinition.model_validate(
                {
                    "contractId": "SP1.pool",
                    "liquidity": [{"token": {"contractId": STX}, "reserves": 1}],
                }
            )

    @pytest.mark.parametrize("fee", [-1, 1_000_001])
    def test_fee_bounds(self, fee: int) -> None:
        with pytest.raises(ValidationError):
            make_pool("p1", STX, TOKEN_A, fee=fee)

    def test_negative_reserves_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_pool("p1", STX, TOKEN_A, reserve_a=-1)
