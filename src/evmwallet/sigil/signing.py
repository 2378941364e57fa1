"""
EIP-155 legacy transaction signing.

Signing uses hedged ECDSA: the RFC 6979 deterministic nonce is mixed with
32 bytes of fresh randomness, so two signatures over the same payload differ
but both verify.  Signatures are normalized to low-s (EIP-2).

Dependencies: ecdsa (signing), eth-keys (public-key recovery), rlp
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Union

import rlp
from ecdsa import SECP256k1, SigningKey
from eth_keys import keys
from eth_keys.exceptions import BadSignature

from ..errors import ErrorCode, WalletError
from ..models import SecretBytes, SignedTransaction, UnsignedTransaction
from ..utils import hex_to_bytes, is_hex, keccak256, strip_0x, to_0x_hex
from ..validation import ADDRESS_RE, MAX_GAS_LIMIT, MIN_GAS_LIMIT, to_checksum_address
from .keys import public_key_to_address

logger = logging.getLogger(__name__)

SECP256K1_N = SECP256k1.order
HALF_N = SECP256K1_N // 2

PrivateKeyInput = Union[bytes, bytearray, SecretBytes, str]


def _sigencode_rs(r: int, s: int, order: int) -> tuple[int, int]:
    return r, s


def _is_uint(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _signing_fields(tx: UnsignedTransaction) -> list:
    to = hex_to_bytes(tx.to) if tx.to else b""
    data = hex_to_bytes(tx.data) if tx.data else b""
    return [tx.nonce, tx.gas_price, tx.gas_limit, to, tx.value, data]


def signing_hash(tx: UnsignedTransaction) -> bytes:
    """keccak256 of ``rlp([nonce, gasPrice, gasLimit, to, value, data, chainId, 0, 0])``."""
    return keccak256(rlp.encode(_signing_fields(tx) + [tx.chain_id, 0, 0]))


def _normalize_private_key(private_key: PrivateKeyInput) -> bytes:
    if isinstance(private_key, str):
        body = strip_0x(private_key.strip())
        if len(body) != 64 or not is_hex(body):
            raise WalletError("Invalid private key", ErrorCode.INVALID_PRIVATE_KEY)
        key = bytes.fromhex(body)
    elif isinstance(private_key, (bytes, bytearray, SecretBytes)):
        key = bytes(private_key)
    else:
        raise WalletError("Invalid private key", ErrorCode.INVALID_PRIVATE_KEY)

    if len(key) != 32:
        raise WalletError("Invalid private key length", ErrorCode.INVALID_PRIVATE_KEY)
    scalar = int.from_bytes(key, "big")
    if not 1 <= scalar < SECP256K1_N:
        raise WalletError("Private key out of range", ErrorCode.INVALID_PRIVATE_KEY)
    return key


def _validate_transaction(tx: UnsignedTransaction) -> None:
    if not isinstance(tx.to, str) or (tx.to and not ADDRESS_RE.match(tx.to)):
        raise WalletError("Invalid recipient address", ErrorCode.INVALID_ADDRESS, "to")
    if not _is_uint(tx.gas_limit) or not MIN_GAS_LIMIT <= tx.gas_limit <= MAX_GAS_LIMIT:
        raise WalletError("Gas limit out of range", ErrorCode.INVALID_GAS_LIMIT, "gasLimit")
    if not _is_uint(tx.value):
        raise WalletError("Value must be non-negative", ErrorCode.INVALID_VALUE, "value")
    if not _is_uint(tx.gas_price):
        raise WalletError("Gas price must be non-negative", ErrorCode.INVALID_GAS_PRICE, "gasPrice")
    if not _is_uint(tx.nonce):
        raise WalletError("Nonce must be non-negative", ErrorCode.INVALID_NONCE, "nonce")
    if not _is_uint(tx.chain_id) or tx.chain_id == 0:
        raise WalletError("Chain ID must be positive", ErrorCode.INVALID_CHAIN_ID, "chainId")

    if not isinstance(tx.data, str) or not is_hex(strip_0x(tx.data)) or len(strip_0x(tx.data)) % 2:
        raise WalletError("Invalid transaction data", ErrorCode.INVALID_DATA, "data")


def _recovery_id(digest: bytes, r: int, s: int, public_key: bytes) -> int:
    for rec in (0, 1):
        try:
            candidate = keys.Signature(vrs=(rec, r, s)).recover_public_key_from_msg_hash(digest)
        except BadSignature:
            continue
        if candidate.to_bytes() == public_key:
            return rec
    raise WalletError("Could not determine recovery id", ErrorCode.SIGNING_FAILED)


class EIP155Signer:
    """Signs legacy transactions with replay protection for ``chain_id``."""

    def sign_transaction(
        self,
        tx: UnsignedTransaction,
        private_key: PrivateKeyInput,
    ) -> SignedTransaction:
        """
        Sign an unsigned transaction.

        Args:
            tx: Transaction to sign
            private_key: 32-byte key as bytes or 0x-prefixed hex

        Returns:
            SignedTransaction with v/r/s, hash and raw RLP hex

        Raises:
            WalletError: INVALID_* for bad inputs, SIGNING_FAILED otherwise
        """
        key = _normalize_private_key(private_key)
        _validate_transaction(tx)

        try:
            digest = signing_hash(tx)
            r, s = SigningKey.from_string(key, curve=SECP256k1).sign_digest_deterministic(
                digest,
                hashfunc=hashlib.sha256,
                sigencode=_sigencode_rs,
                extra_entropy=os.urandom(32),
            )
            if s > HALF_N:
                s = SECP256K1_N - s

            public_key = keys.PrivateKey(key).public_key.to_bytes()
            v = tx.chain_id * 2 + 35 + _recovery_id(digest, r, s, public_key)

            raw = rlp.encode(_signing_fields(tx) + [v, r, s])
        except WalletError:
            raise
        except Exception as e:
            raise WalletError(f"Transaction signing failed: {e}", ErrorCode.SIGNING_FAILED) from e

        tx_hash = to_0x_hex(keccak256(raw))
        logger.debug("Signed transaction %s on chain %d", tx_hash, tx.chain_id)

        return SignedTransaction(
            nonce=tx.nonce,
            gas_price=tx.gas_price,
            gas_limit=tx.gas_limit,
            to=tx.to,
            value=tx.value,
            data=tx.data or "0x",
            chain_id=tx.chain_id,
            v=v,
            r=r,
            s=s,
            hash=tx_hash,
            raw_transaction=to_0x_hex(raw),
        )


def decode_raw_transaction(raw: Union[str, bytes]) -> SignedTransaction:
    """
    Decode a signed legacy EIP-155 transaction.

    Raises:
        WalletError: INVALID_TRANSACTION if the payload is not a 9-item RLP
                     list with an EIP-155 ``v``
    """
    try:
        raw_bytes = hex_to_bytes(raw) if isinstance(raw, str) else bytes(raw)
        items = rlp.decode(raw_bytes)
    except (ValueError, rlp.DecodingError) as e:
        raise WalletError(f"Malformed transaction: {e}", ErrorCode.INVALID_TRANSACTION) from e

    if not isinstance(items, list) or len(items) != 9 or any(isinstance(i, list) for i in items):
        raise WalletError("Not a legacy transaction", ErrorCode.INVALID_TRANSACTION)

    nonce, gas_price, gas_limit, value, v, r, s = (
        int.from_bytes(items[i], "big") for i in (0, 1, 2, 4, 6, 7, 8)
    )
    if v < 35:
        raise WalletError("Transaction has no EIP-155 chain id", ErrorCode.INVALID_TRANSACTION)

    to = to_checksum_address(items[3].hex()) if items[3] else ""
    return SignedTransaction(
        nonce=nonce,
        gas_price=gas_price,
        gas_limit=gas_limit,
        to=to,
        value=value,
        data=to_0x_hex(items[5]),
        chain_id=(v - 35) // 2,
        v=v,
        r=r,
        s=s,
        hash=to_0x_hex(keccak256(raw_bytes)),
        raw_transaction=to_0x_hex(raw_bytes),
    )


def recover_sender(signed: Union[SignedTransaction, str]) -> str:
    """Return the checksummed address that signed ``signed``."""
    if isinstance(signed, str):
        signed = decode_raw_transaction(signed)

    recovery_id = signed.v - signed.chain_id * 2 - 35
    digest = signing_hash(signed.unsigned())
    public_key = keys.Signature(vrs=(recovery_id, signed.r, signed.s)).recover_public_key_from_msg_hash(digest)
    return public_key_to_address(public_key.to_bytes())
