"""
Transaction builder.

Collects and validates legacy transaction fields one at a time, then
produces an immutable ``UnsignedTransaction``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..errors import ErrorCode, WalletError
from ..models import UnsignedTransaction
from ..validation import (
    IntInput,
    normalize_hex_data,
    validate_address,
    validate_chain_id,
    validate_gas_limit,
    validate_gas_price,
    validate_nonce,
    validate_wei_amount,
)

REQUIRED_FIELDS = ("to", "value", "nonce", "gas_price", "gas_limit", "chain_id")

# Facade input keys -> builder fields
_PARAM_KEYS: dict[str, str] = {
    "to": "to",
    "value": "value",
    "nonce": "nonce",
    "gasPrice": "gas_price",
    "gas_price": "gas_price",
    "gasLimit": "gas_limit",
    "gas_limit": "gas_limit",
    "chainId": "chain_id",
    "chain_id": "chain_id",
    "data": "data",
}


class TransactionBuilder:
    """
    Fluent builder for unsigned transactions.

    Every setter validates its input immediately and returns ``self``::

        tx = (
            TransactionBuilder()
            .set_to("0x70997970C51812dc3A010C7d01b50e0d17dc79C8")
            .set_value("0.1")
            .set_nonce(0)
            .set_gas_price("20000000000")
            .set_gas_limit(21000)
            .set_chain_id(1)
            .build()
        )
    """

    def __init__(self) -> None:
        self._to: Optional[str] = None
        self._value: Optional[int] = None
        self._nonce: Optional[int] = None
        self._gas_price: Optional[int] = None
        self._gas_limit: Optional[int] = None
        self._chain_id: Optional[int] = None
        self._data: str = "0x"

    def set_to(self, address: str) -> "TransactionBuilder":
        # Empty recipient means contract creation
        self._to = "" if address == "" else validate_address(address)
        return self

    def set_value(self, value: IntInput, unit: Optional[str] = None) -> "TransactionBuilder":
        self._value = validate_wei_amount(value, unit)
        return self

    def set_nonce(self, nonce: IntInput) -> "TransactionBuilder":
        self._nonce = validate_nonce(nonce)
        return self

    def set_gas_price(self, gas_price: IntInput) -> "TransactionBuilder":
        self._gas_price = validate_gas_price(gas_price)
        return self

    def set_gas_limit(self, gas_limit: IntInput) -> "TransactionBuilder":
        self._gas_limit = validate_gas_limit(gas_limit)
        return self

    def set_chain_id(self, chain_id: IntInput) -> "TransactionBuilder":
        self._chain_id = validate_chain_id(chain_id)
        return self

    def set_data(self, data: str) -> "TransactionBuilder":
        self._data = normalize_hex_data(data)
        return self

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, f"_{name}") is None]

    def build(self) -> UnsignedTransaction:
        """
        Raises:
            WalletError: MISSING_FIELDS naming every unset required field
        """
        missing = self.missing_fields()
        if missing:
            raise WalletError(
                f"Missing required fields: {', '.join(missing)}",
                ErrorCode.MISSING_FIELDS,
            )

        return UnsignedTransaction(
            nonce=self._nonce,
            gas_price=self._gas_price,
            gas_limit=self._gas_limit,
            to=self._to,
            value=self._value,
            data=self._data,
            chain_id=self._chain_id,
        )

    @classmethod
    def from_params(cls, params: Mapping[str, Any], unit: Optional[str] = None) -> UnsignedTransaction:
        """
        Build from a flat mapping such as the facade input.

        Both camelCase (``gasPrice``) and snake_case (``gas_price``) keys are
        accepted; unknown keys (``mnemonic``, ``broadcast``...) are ignored.
        """
        values: dict[str, Any] = {}
        for key, value in params.items():
            name = _PARAM_KEYS.get(key)
            if name is not None and value is not None:
                values[name] = value

        builder = cls()
        if "to" in values:
            builder.set_to(values["to"])
        if "value" in values:
            builder.set_value(values["value"], unit)
        if "nonce" in values:
            builder.set_nonce(values["nonce"])
        if "gas_price" in values:
            builder.set_gas_price(values["gas_price"])
        if "gas_limit" in values:
            builder.set_gas_limit(values["gas_limit"])
        if "chain_id" in values:
            builder.set_chain_id(values["chain_id"])
        if "data" in values:
            builder.set_data(values["data"])
        return builder.build()
