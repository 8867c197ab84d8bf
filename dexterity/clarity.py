"""Minimal Clarity value codec for read-only contract calls.

Only the types that vault quotes need are supported: unsigned/signed
integers, buffers, booleans, optionals, responses, lists, tuples and
ASCII/UTF-8 strings. Principals are not decoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Clarity type prefixes
TYPE_INT = 0x00
TYPE_UINT = 0x01
TYPE_BUFFER = 0x02
TYPE_TRUE = 0x03
TYPE_FALSE = 0x04
TYPE_RESPONSE_OK = 0x07
TYPE_RESPONSE_ERR = 0x08
TYPE_NONE = 0x09
TYPE_SOME = 0x0A
TYPE_LIST = 0x0B
TYPE_TUPLE = 0x0C
TYPE_STRING_ASCII = 0x0D
TYPE_STRING_UTF8 = 0x0E

UINT128_MAX = 2**128 - 1


@dataclass(frozen=True)
class ClarityResponse:
    """A decoded `(ok ...)` or `(err ...)` value."""

    ok: bool
    value: Any


def serialize_uint(value: int) -> str:
    """Serialize a uint128 as a 0x-prefixed hex string."""
    if value < 0 or value > UINT128_MAX:
        raise ValueError(f"uint128 out of range: {value}")
    return "0x" + (bytes([TYPE_UINT]) + value.to_bytes(16, "big")).hex()


def serialize_some_buffer(data: bytes) -> str:
    """Serialize `(some (buff N))` as a 0x-prefixed hex string."""
    payload = bytes([TYPE_SOME, TYPE_BUFFER]) + len(data).to_bytes(4, "big") + data
    return "0x" + payload.hex()


def deserialize(hex_str: str) -> Any:
    """Decode a hex-encoded Clarity value.

    Raises:
        ValueError: On truncated input, trailing bytes or unsupported types
    """
    clean = hex_str[2:] if hex_str.startswith("0x") else hex_str
    data = bytes.fromhex(clean)
    value, offset = _read_value(data, 0)
    if offset != len(data):
        raise ValueError(f"Trailing bytes after Clarity value at offset {offset}")
    return value


def _take(data: bytes, offset: int, size: int) -> tuple[bytes, int]:
    end = offset + size
    if end > len(data):
        raise ValueError("Truncated Clarity value")
    return data[offset:end], end


def _read_value(data: bytes, offset: int) -> tuple[Any, int]:
    prefix, offset = _take(data, offset, 1)
    type_id = prefix[0]

    if type_id == TYPE_UINT:
        raw, offset = _take(data, offset, 16)
        return int.from_bytes(raw, "big"), offset
    if type_id == TYPE_INT:
        raw, offset = _take(data, offset, 16)
        return int.from_bytes(raw, "big", signed=True), offset
    if type_id == TYPE_TRUE:
        return True, offset
    if type_id == TYPE_FALSE:
        return False, offset
    if type_id == TYPE_NONE:
        return None, offset
    if type_id == TYPE_SOME:
        return _read_value(data, offset)
    if type_id in (TYPE_RESPONSE_OK, TYPE_RESPONSE_ERR):
        inner, offset = _read_value(data, offset)
        return ClarityResponse(ok=type_id == TYPE_RESPONSE_OK, value=inner), offset
    if type_id in (TYPE_BUFFER, TYPE_STRING_ASCII, TYPE_STRING_UTF8):
        raw_len, offset = _take(data, offset, 4)
        raw, offset = _take(data, offset, int.from_bytes(raw_len, "big"))
        if type_id == TYPE_BUFFER:
            return raw, offset
        return raw.decode("ascii" if type_id == TYPE_STRING_ASCII else "utf-8"), offset
    if type_id == TYPE_LIST:
        raw_len, offset = _take(data, offset, 4)
        items = []
        for _ in range(int.from_bytes(raw_len, "big")):
            item, offset = _read_value(data, offset)
            items.append(item)
        return items, offset
    if type_id == TYPE_TUPLE:
        raw_len, offset = _take(data, offset, 4)
        fields: dict[str, Any] = {}
        for _ in range(int.from_bytes(raw_len, "big")):
            name_len, offset = _take(data, offset, 1)
            name, offset = _take(data, offset, name_len[0])
            value, offset = _read_value(data, offset)
            fields[name.decode("ascii")] = value
        return fields, offset

    raise ValueError(f"Unsupported Clarity type 0x{type_id:02x}")


__all__ = ["ClarityResponse", "serialize_uint", "serialize_some_buffer", "deserialize"]
