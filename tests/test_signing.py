"""Unit tests for EIP-155 signing, decoding and sender recovery."""

from __future__ import annotations

import pytest
import rlp
from eth_account import Account

from evmwallet.errors import ErrorCode, WalletError
from evmwallet.models import UnsignedTransaction
from evmwallet.pneuma.tx import TransactionBuilder
from evmwallet.sigil.signing import (
    HALF_N,
    SECP256K1_N,
    EIP155Signer,
    decode_raw_transaction,
    recover_sender,
)
from evmwallet.utils import hex_to_bytes, keccak256

PRIVATE_KEY = bytes.fromhex("ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80")
SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def make_tx(**overrides) -> UnsignedTransaction:
    fields = dict(
        nonce=0,
        gas_price=20_000_000_000,
        gas_limit=21_000,
        to=RECIPIENT,
        value=10**18,
        data="0x",
        chain_id=1,
    )
    fields.update(overrides)
    return UnsignedTransaction(**fields)


@pytest.fixture()
def signer() -> EIP155Signer:
    return EIP155Signer()


class TestSignTransaction:
    """Tests for EIP155Signer.sign_transaction."""

    @pytest.mark.parametrize("chain_id", [1, 137, 42161, 11155111])
    def test_v_encodes_chain_id(self, signer: EIP155Signer, chain_id: int) -> None:
        signed = signer.sign_transaction(make_tx(chain_id=chain_id), PRIVATE_KEY)
        assert signed.v in (chain_id * 2 + 35, chain_id * 2 + 36)

    @pytest.mark.parametrize("chain_id", [1, 11155111])
    def test_recovers_to_signer(self, signer: EIP155Signer, chain_id: int) -> None:
        signed = signer.sign_transaction(make_tx(chain_id=chain_id), PRIVATE_KEY)
        assert Account.recover_transaction(signed.raw_transaction) == SENDER
        assert recover_sender(signed) == SENDER

    def test_low_s(self, signer: EIP155Signer) -> None:
        for nonce in range(5):
            signed = signer.sign_transaction(make_tx(nonce=nonce), PRIVATE_KEY)
            assert 0 < signed.s <= HALF_N
            assert 0 < signed.r < SECP256K1_N

    def test_hedged_signatures_differ_but_verify(self, signer: EIP155Signer) -> None:
        tx = make_tx()
        first = signer.sign_transaction(tx, PRIVATE_KEY)
        second = signer.sign_transaction(tx, PRIVATE_KEY)
        assert (first.r, first.s) != (second.r, second.s)
        assert recover_sender(first) == recover_sender(second) == SENDER

    def test_hash_is_keccak_of_raw(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(), PRIVATE_KEY)
        assert signed.hash == "0x" + keccak256(hex_to_bytes(signed.raw_transaction)).hex()
        assert len(signed.hash) == 66

    def test_raw_is_nine_item_rlp(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(nonce=0, value=0), PRIVATE_KEY)
        items = rlp.decode(hex_to_bytes(signed.raw_transaction))
        assert len(items) == 9
        # zero encodes as the empty string
        assert items[0] == b""
        assert items[4] == b""
        assert items[3] == hex_to_bytes(RECIPIENT)

    def test_hex_private_key(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(), "0x" + PRIVATE_KEY.hex())
        assert recover_sender(signed) == SENDER

    def test_contract_creation(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(to="", data="0x6080", gas_limit=100_000), PRIVATE_KEY)
        assert Account.recover_transaction(signed.raw_transaction) == SENDER
        assert decode_raw_transaction(signed.raw_transaction).to == ""

    def test_signed_keeps_unsigned_fields(self, signer: EIP155Signer) -> None:
        tx = make_tx(data="0xdeadbeef", gas_limit=50_000)
        signed = signer.sign_transaction(tx, PRIVATE_KEY)
        assert signed.unsigned() == tx


class TestSignerRejections:
    """Tests for input checks performed before signing."""

    @pytest.mark.parametrize(
        "key",
        [b"\x00" * 32, b"\x01" * 31, SECP256K1_N.to_bytes(32, "big"), "0x1234", "zz" * 32, 12345],
    )
    def test_invalid_private_key(self, signer: EIP155Signer, key) -> None:
        with pytest.raises(WalletError) as exc_info:
            signer.sign_transaction(make_tx(), key)
        assert exc_info.value.code == ErrorCode.INVALID_PRIVATE_KEY

    @pytest.mark.parametrize(
        "overrides, code",
        [
            ({"to": "0x1234"}, ErrorCode.INVALID_ADDRESS),
            ({"gas_limit": 20_999}, ErrorCode.INVALID_GAS_LIMIT),
            ({"gas_limit": 30_000_001}, ErrorCode.INVALID_GAS_LIMIT),
            ({"value": -1}, ErrorCode.INVALID_VALUE),
            ({"gas_price": -1}, ErrorCode.INVALID_GAS_PRICE),
            ({"nonce": -1}, ErrorCode.INVALID_NONCE),
            ({"chain_id": 0}, ErrorCode.INVALID_CHAIN_ID),
            ({"data": "0xabc"}, ErrorCode.INVALID_DATA),
        ],
    )
    def test_invalid_fields(self, signer: EIP155Signer, overrides: dict, code: ErrorCode) -> None:
        with pytest.raises(WalletError) as exc_info:
            signer.sign_transaction(make_tx(**overrides), PRIVATE_KEY)
        assert exc_info.value.code == code


class TestDecodeRawTransaction:
    """Tests for decode_raw_transaction."""

    def test_round_trip(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(nonce=9, data="0xcafe", chain_id=11155111), PRIVATE_KEY)
        assert decode_raw_transaction(signed.raw_transaction) == signed

    def test_uppercase_calldata_round_trips(self, signer: EIP155Signer) -> None:
        tx = (
            TransactionBuilder()
            .set_to(RECIPIENT)
            .set_value(0)
            .set_nonce(0)
            .set_gas_price(1)
            .set_gas_limit(50_000)
            .set_chain_id(1)
            .set_data("0xCAFEBABE")
            .build()
        )
        decoded = decode_raw_transaction(signer.sign_transaction(tx, PRIVATE_KEY).raw_transaction)
        assert decoded.data == tx.data == "0xcafebabe"

    def test_recover_sender_from_raw(self, signer: EIP155Signer) -> None:
        signed = signer.sign_transaction(make_tx(chain_id=137), PRIVATE_KEY)
        assert recover_sender(signed.raw_transaction) == SENDER

    @pytest.mark.parametrize("raw", ["0x", "0xzz", "0xc0", "0x" + rlp.encode([b"\x01"] * 9).hex()])
    def test_rejects_malformed(self, raw: str) -> None:
        with pytest.raises(WalletError) as exc_info:
            decode_raw_transaction(raw)
        assert exc_info.value.code == ErrorCode.INVALID_TRANSACTION
