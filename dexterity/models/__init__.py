"""Pydantic models for tokens and pool definitions."""

from dexterity.models.tokens import Liquidity, PoolDefinition, Token

__all__ = ["Token", "Liquidity", "PoolDefinition"]
