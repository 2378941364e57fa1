"""
BIP-39 / BIP-44 key derivation.

A ``KeyDerivationManager`` validates a mnemonic, turns it into a 64-byte seed
and derives accounts on the standard Ethereum path ``m/44'/60'/0'/0/{index}``.

The seed is the only long-lived secret.  It lives in a ``SecretBytes`` buffer
and is zeroed by ``dispose()`` (or on leaving a ``with`` block).

Dependencies: eth-account (BIP-39 wordlist, seed, HD derivation), eth-keys
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from eth_account.hdaccount import key_from_seed
from eth_account.hdaccount.mnemonic import Mnemonic
from eth_keys import keys

from ..errors import ErrorCode, WalletError
from ..models import SecretBytes, WalletAccount
from ..utils import keccak256
from ..validation import to_checksum_address

logger = logging.getLogger(__name__)

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)
ETH_DERIVATION_PREFIX = "m/44'/60'/0'/0"


class KeyManagerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISPOSED = "disposed"


def derivation_path(index: int) -> str:
    return f"{ETH_DERIVATION_PREFIX}/{index}"


def public_key_to_address(public_key: bytes) -> str:
    """
    Derive the checksummed address for a secp256k1 public key.

    Args:
        public_key: 65-byte uncompressed key (0x04 prefix) or the bare 64 bytes

    Returns:
        EIP-55 address of the last 20 bytes of keccak256(x || y)
    """
    if len(public_key) == 65 and public_key[0] == 4:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError(f"Expected uncompressed public key, got {len(public_key)} bytes")
    return to_checksum_address(keccak256(bytes(public_key))[-20:].hex())


def _normalize_words(mnemonic: str) -> list[str]:
    return mnemonic.strip().lower().split()


def validate_mnemonic(mnemonic: str) -> str:
    """
    Validate a BIP-39 English mnemonic.

    Returns:
        The normalized phrase (single-spaced, lower-case)

    Raises:
        WalletError: INVALID_MNEMONIC_LENGTH, INVALID_MNEMONIC_WORDS or
                     INVALID_MNEMONIC_CHECKSUM
    """
    if not isinstance(mnemonic, str):
        raise WalletError("Mnemonic must be a string", ErrorCode.INVALID_MNEMONIC_LENGTH)

    words = _normalize_words(mnemonic)
    if len(words) not in VALID_WORD_COUNTS:
        raise WalletError(
            f"Invalid mnemonic length: expected 12, 15, 18, 21, or 24 words, got {len(words)}",
            ErrorCode.INVALID_MNEMONIC_LENGTH,
        )

    bip39 = Mnemonic()
    wordlist = set(bip39.wordlist)
    unknown = [w for w in words if w not in wordlist]
    if unknown:
        raise WalletError(
            f"Invalid words in mnemonic: {', '.join(unknown)}",
            ErrorCode.INVALID_MNEMONIC_WORDS,
        )

    phrase = " ".join(words)
    if not bip39.is_mnemonic_valid(phrase):
        raise WalletError("Invalid mnemonic checksum", ErrorCode.INVALID_MNEMONIC_CHECKSUM)
    return phrase


class KeyDerivationManager:
    """
    Derives Ethereum accounts from a mnemonic.

    Usage::

        with KeyDerivationManager(mnemonic) as km:
            account = km.derive_account(0)
    """

    def __init__(self, mnemonic: str, passphrase: str = ""):
        self._seed: Optional[SecretBytes] = None
        self._state = KeyManagerState.UNINITIALIZED

        phrase = validate_mnemonic(mnemonic)
        try:
            seed = Mnemonic.to_seed(phrase, passphrase)
        except Exception as e:
            raise WalletError(
                f"Failed to initialize key manager: {e}",
                ErrorCode.KEY_INITIALIZATION_FAILED,
            ) from e

        self._seed = SecretBytes(seed)
        self._state = KeyManagerState.INITIALIZED
        logger.debug("Key manager initialized (%d-word mnemonic)", len(phrase.split()))

    def __enter__(self) -> "KeyDerivationManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    @property
    def state(self) -> KeyManagerState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is KeyManagerState.INITIALIZED

    def derive_account(self, index: int = 0) -> WalletAccount:
        """
        Derive the account at ``m/44'/60'/0'/0/{index}``.

        Raises:
            WalletError: NOT_INITIALIZED after dispose, DERIVATION_FAILED for a
                         bad index or a derivation error
        """
        if not self.is_initialized or self._seed is None:
            raise WalletError("Key manager not initialized", ErrorCode.NOT_INITIALIZED)

        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise WalletError(
                f"Invalid account index: {index!r}",
                ErrorCode.DERIVATION_FAILED,
            )

        path = derivation_path(index)
        try:
            private_key = key_from_seed(bytes(self._seed), path)
            public_key = b"\x04" + keys.PrivateKey(private_key).public_key.to_bytes()
        except Exception as e:
            raise WalletError(
                f"Failed to derive account {index}: {e}",
                ErrorCode.DERIVATION_FAILED,
            ) from e

        return WalletAccount(
            address=public_key_to_address(public_key),
            private_key=private_key,
            public_key=public_key,
            derivation_path=path,
            index=index,
        )

    def dispose(self) -> None:
        """Zero the seed and refuse further derivation.  Safe to call twice."""
        if self._seed is not None:
            self._seed.wipe()
            self._seed = None
        if self._state is not KeyManagerState.DISPOSED:
            self._state = KeyManagerState.DISPOSED
            logger.debug("Key manager disposed")
