"""Unit tests for the transaction builder."""

from __future__ import annotations

import pytest

from evmwallet.errors import ErrorCode, WalletError
from evmwallet.models import UnsignedTransaction
from evmwallet.pneuma.tx import TransactionBuilder

RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

PARAMS = {
    "to": RECIPIENT.lower(),
    "value": "0.5",
    "nonce": "3",
    "gasPrice": "20000000000",
    "gasLimit": "21000",
    "chainId": "11155111",
}


class TestTransactionBuilder:
    """Tests for the fluent builder."""

    def test_build_complete(self) -> None:
        tx = (
            TransactionBuilder()
            .set_to(RECIPIENT)
            .set_value("1")
            .set_nonce("0")
            .set_gas_price("1000000000")
            .set_gas_limit("21000")
            .set_chain_id("1")
            .build()
        )
        assert tx == UnsignedTransaction(
            nonce=0,
            gas_price=1_000_000_000,
            gas_limit=21_000,
            to=RECIPIENT,
            value=10**18,
            data="0x",
            chain_id=1,
        )

    def test_missing_fields_all_named(self) -> None:
        with pytest.raises(WalletError) as exc_info:
            TransactionBuilder().set_to(RECIPIENT).set_nonce(1).build()
        assert exc_info.value.code == ErrorCode.MISSING_FIELDS
        message = str(exc_info.value)
        for name in ("value", "gas_price", "gas_limit", "chain_id"):
            assert name in message
        assert "nonce" not in message

    def test_empty_builder_reports_every_field(self) -> None:
        assert TransactionBuilder().missing_fields() == [
            "to", "value", "nonce", "gas_price", "gas_limit", "chain_id",
        ]

    def test_contract_creation_allowed(self) -> None:
        builder = TransactionBuilder().set_to("")
        assert "to" not in builder.missing_fields()

    def test_setter_validates_immediately(self) -> None:
        with pytest.raises(WalletError) as exc_info:
            TransactionBuilder().set_gas_limit("100")
        assert exc_info.value.code == ErrorCode.GAS_LIMIT_TOO_LOW

    def test_failed_setter_leaves_field_unset(self) -> None:
        builder = TransactionBuilder()
        with pytest.raises(WalletError):
            builder.set_nonce("-1")
        assert "nonce" in builder.missing_fields()

    def test_data_prefixed(self) -> None:
        builder = TransactionBuilder().set_data("abcd")
        assert builder._data == "0xabcd"

    def test_value_unit(self) -> None:
        builder = TransactionBuilder().set_value("1", unit="wei")
        assert builder._value == 1


class TestFromParams:
    """Tests for TransactionBuilder.from_params."""

    def test_camel_case(self) -> None:
        tx = TransactionBuilder.from_params(PARAMS)
        assert tx.to == RECIPIENT
        assert tx.value == 5 * 10**17
        assert tx.nonce == 3
        assert tx.gas_price == 20_000_000_000
        assert tx.gas_limit == 21_000
        assert tx.chain_id == 11155111
        assert tx.data == "0x"

    def test_snake_case(self) -> None:
        params = {
            "to": RECIPIENT,
            "value": "1",
            "nonce": 0,
            "gas_price": 1,
            "gas_limit": 21000,
            "chain_id": 1,
            "data": "0x1234",
        }
        tx = TransactionBuilder.from_params(params)
        assert tx.gas_price == 1
        assert tx.data == "0x1234"

    def test_extra_keys_ignored(self) -> None:
        tx = TransactionBuilder.from_params({**PARAMS, "mnemonic": "x", "broadcast": True, "accountIndex": 2})
        assert tx.nonce == 3

    def test_missing_reported(self) -> None:
        params = dict(PARAMS)
        del params["gasPrice"]
        del params["chainId"]
        with pytest.raises(WalletError) as exc_info:
            TransactionBuilder.from_params(params)
        assert exc_info.value.code == ErrorCode.MISSING_FIELDS
        assert "gas_price" in str(exc_info.value)
        assert "chain_id" in str(exc_info.value)

    def test_to_dict_renders_strings(self) -> None:
        out = TransactionBuilder.from_params(PARAMS).to_dict()
        assert out == {
            "nonce": "3",
            "gasPrice": "20000000000",
            "gasLimit": "21000",
            "to": RECIPIENT,
            "value": "500000000000000000",
            "data": "0x",
            "chainId": "11155111",
        }
