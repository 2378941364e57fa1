from __future__ import annotations

from datetime import datetime, timezone

from eth_utils import keccak

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256.
    return keccak(data)


def strip_0x(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def is_hex(value: str) -> bool:
    return all(c in HEX_DIGITS for c in value)


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(strip_0x(value))


def to_0x_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def hex_quantity_to_int(value: str) -> int:
    return int(value, 16)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
