from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional


class SecretBytes:
    """
    Mutable buffer for key material that can be zeroed in place.

    Python gives no destructor guarantees, so wiping is explicit: call
    ``wipe()`` or use the buffer as a context manager.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: bytes):
        self._buf = bytearray(data)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        state = "wiped" if self.is_wiped else f"{len(self._buf)} bytes"
        return f"SecretBytes(<{state}>)"

    def __enter__(self) -> "SecretBytes":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    @property
    def is_wiped(self) -> bool:
        return not any(self._buf)

    def wipe(self) -> None:
        for i in range(len(self._buf)):
            self._buf[i] = 0


@dataclass(frozen=True)
class WalletAccount:
    """
    A derived account.

    Attributes:
        address: EIP-55 checksummed address
        private_key: 32-byte secp256k1 scalar
        public_key: 65-byte uncompressed public key (0x04 prefix)
        derivation_path: BIP-44 path the key was derived on
        index: Address index within the path
    """
    address: str
    private_key: bytes = field(repr=False)
    public_key: bytes
    derivation_path: str
    index: int


_OUTPUT_KEYS: dict[str, str] = {
    "gas_price": "gasPrice",
    "gas_limit": "gasLimit",
    "chain_id": "chainId",
    "raw_transaction": "rawTransaction",
}


def _render(value: Any) -> Any:
    # ints cross serialization boundaries as decimal strings
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


@dataclass(frozen=True)
class UnsignedTransaction:
    """
    Legacy (EIP-155) transaction fields.

    ``to`` is the empty string for contract creation; ``data`` is always
    0x-prefixed hex.
    """
    nonce: int
    gas_price: int
    gas_limit: int
    to: str
    value: int
    data: str
    chain_id: int

    def to_dict(self) -> dict[str, Any]:
        return {_OUTPUT_KEYS.get(f.name, f.name): _render(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class SignedTransaction(UnsignedTransaction):
    v: int = 0
    r: int = 0
    s: int = 0
    hash: str = ""
    raw_transaction: str = ""

    def unsigned(self) -> UnsignedTransaction:
        return UnsignedTransaction(
            nonce=self.nonce,
            gas_price=self.gas_price,
            gas_limit=self.gas_limit,
            to=self.to,
            value=self.value,
            data=self.data,
            chain_id=self.chain_id,
        )


@dataclass
class ProviderEndpoint:
    """JSON-RPC endpoint with a health hint (lower priority is tried first)."""
    url: str
    name: str
    priority: int
    is_healthy: bool = True
    last_error: Optional[datetime] = None
