"""Opcode codec for vault operations.

A vault reads a fixed 16-byte buffer to decide which operation to quote or
execute:

    byte 0   operation (swap A->B, swap B->A, add/remove liquidity, lookup)
    byte 1   swap type (exact input / exact output)
    byte 2   fee type
    byte 3   liquidity type
    4..15    reserved, zero

Encoding is a byte-exact round trip; unset bytes are zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from dexterity.constants import OPCODE_SIZE
from dexterity.errors import InvalidOpcodeError

# Byte offsets
OPERATION_INDEX = 0
SWAP_TYPE_INDEX = 1
FEE_TYPE_INDEX = 2
LIQUIDITY_TYPE_INDEX = 3


class OperationType(IntEnum):
    """Operation requested from a vault."""

    SWAP_A_TO_B = 0x00
    SWAP_B_TO_A = 0x01
    ADD_LIQUIDITY = 0x02
    REMOVE_LIQUIDITY = 0x03
    LOOKUP_RESERVES = 0x04


class SwapType(IntEnum):
    EXACT_INPUT = 0x00
    EXACT_OUTPUT = 0x01


class FeeType(IntEnum):
    REDUCE_INPUT = 0x00
    REDUCE_OUTPUT = 0x01
    BURN_ENERGY = 0x02


class LiquidityType(IntEnum):
    BALANCED = 0x00


def _check_byte(name: str, value: int) -> int:
    if not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise InvalidOpcodeError(f"{name} must be a byte (0-255), got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Opcode:
    """Immutable 16-byte vault instruction.

    Usage:
        opcode = Opcode.encode(OperationType.SWAP_B_TO_A)
        opcode.to_hex()  # "01000000000000000000000000000000"
    """

    buffer: bytes = field(default=bytes(OPCODE_SIZE))

    def __post_init__(self) -> None:
        if len(self.buffer) != OPCODE_SIZE:
            raise InvalidOpcodeError(
                f"Opcode must be {OPCODE_SIZE} bytes, got {len(self.buffer)}"
            )

    @classmethod
    def encode(
        cls,
        operation: int,
        swap_type: int = 0,
        fee_type: int = 0,
        liquidity_type: int = 0,
    ) -> Opcode:
        """Build an opcode from an operation and optional sub-parameters.

        No check is made that the target vault understands the operation.
        """
        buf = bytearray(OPCODE_SIZE)
        buf[OPERATION_INDEX] = _check_byte("operation", operation)
        buf[SWAP_TYPE_INDEX] = _check_byte("swap_type", swap_type)
        buf[FEE_TYPE_INDEX] = _check_byte("fee_type", fee_type)
        buf[LIQUIDITY_TYPE_INDEX] = _check_byte("liquidity_type", liquidity_type)
        return cls(bytes(buf))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | list[int]) -> Opcode:
        """Build an opcode from up to 16 raw bytes, zero-padded."""
        values = [_check_byte(f"byte {i}", b) for i, b in enumerate(data)]
        if len(values) > OPCODE_SIZE:
            raise InvalidOpcodeError(f"Opcode holds at most {OPCODE_SIZE} bytes")
        return cls(bytes(values) + bytes(OPCODE_SIZE - len(values)))

    @classmethod
    def from_hex(cls, hex_str: str) -> Opcode:
        """Parse a 32-character hex string (optional 0x prefix)."""
        clean = hex_str[2:] if hex_str.startswith(("0x", "0X")) else hex_str
        if len(clean) != OPCODE_SIZE * 2:
            raise InvalidOpcodeError(
                f"Opcode hex must be {OPCODE_SIZE * 2} characters, got {len(clean)}"
            )
        try:
            return cls(bytes.fromhex(clean))
        except ValueError as e:
            raise InvalidOpcodeError(f"Invalid opcode hex: {hex_str}") from e

    def to_hex(self) -> str:
        return self.buffer.hex()

    def to_clarity_hex(self) -> str:
        """Serialize as a Clarity `(some (buff 16))` value."""
        from dexterity.clarity import serialize_some_buffer

        return serialize_some_buffer(self.buffer)

    def decode(self) -> dict[str, Any]:
        """Split the buffer into its operation and sub-parameters."""
        return {
            "operation": self.operation,
            "params": {
                "swap_type": self.swap_type,
                "fee_type": self.fee_type,
                "liquidity_type": self.liquidity_type,
            },
        }

    @property
    def operation(self) -> int:
        return self.buffer[OPERATION_INDEX]

    @property
    def swap_type(self) -> int:
        return self.buffer[SWAP_TYPE_INDEX]

    @property
    def fee_type(self) -> int:
        return self.buffer[FEE_TYPE_INDEX]

    @property
    def liquidity_type(self) -> int:
        return self.buffer[LIQUIDITY_TYPE_INDEX]

    def with_operation(self, operation: int) -> Opcode:
        """Return a copy with a different operation byte."""
        buf = bytearray(self.buffer)
        buf[OPERATION_INDEX] = _check_byte("operation", operation)
        return Opcode(bytes(buf))

    # Common presets

    @classmethod
    def swap_exact_a_for_b(cls) -> Opcode:
        return cls.encode(OperationType.SWAP_A_TO_B, SwapType.EXACT_INPUT, FeeType.REDUCE_INPUT)

    @classmethod
    def swap_exact_b_for_a(cls) -> Opcode:
        return cls.encode(OperationType.SWAP_B_TO_A, SwapType.EXACT_INPUT, FeeType.REDUCE_INPUT)

    @classmethod
    def add_balanced_liquidity(cls) -> Opcode:
        return cls.encode(
            OperationType.ADD_LIQUIDITY,
            fee_type=FeeType.REDUCE_INPUT,
            liquidity_type=LiquidityType.BALANCED,
        )

    @classmethod
    def remove_liquidity(cls) -> Opcode:
        return cls.encode(OperationType.REMOVE_LIQUIDITY, liquidity_type=LiquidityType.BALANCED)

    @classmethod
    def lookup_reserves(cls) -> Opcode:
        return cls.encode(OperationType.LOOKUP_RESERVES)

    @classmethod
    def for_swap(cls, token_in_id: str, token_a_id: str) -> Opcode:
        """Pick the swap direction for a hop.

        Args:
            token_in_id: Token being sold on this hop
            token_a_id: The vault's first leg

        Returns:
            SWAP_A_TO_B if the input is the first leg, SWAP_B_TO_A otherwise
        """
        if token_in_id == token_a_id:
            return cls.swap_exact_a_for_b()
        return cls.swap_exact_b_for_a()


def encode(operation: int, **params: int) -> bytes:
    """Encode an operation into a 16-byte buffer."""
    return Opcode.encode(operation, **params).buffer


def decode(buffer: bytes) -> dict[str, Any]:
    """Decode a 16-byte buffer into its operation and parameters."""
    return Opcode(bytes(buffer)).decode()


def to_hex(buffer: bytes) -> str:
    return Opcode(bytes(buffer)).to_hex()


def from_hex(hex_str: str) -> bytes:
    return Opcode.from_hex(hex_str).buffer


__all__ = [
    "Opcode",
    "OperationType",
    "SwapType",
    "FeeType",
    "LiquidityType",
    "encode",
    "decode",
    "to_hex",
    "from_hex",
]
