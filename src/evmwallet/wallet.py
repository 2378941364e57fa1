"""
High-level wallet API.

``Wallet`` wires key derivation, building, signing and broadcasting
together; ``SimpleWallet`` adds the one-call build + sign (+ broadcast)
flow used by the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .errors import ErrorCode, WalletError
from .models import SignedTransaction, UnsignedTransaction, WalletAccount
from .pneuma.broadcast import TransactionBroadcaster
from .pneuma.tx import TransactionBuilder
from .sigil.keys import KeyDerivationManager
from .sigil.signing import EIP155Signer
from .validation import IntInput, validate_account_index, validate_address, validate_wei_amount

logger = logging.getLogger(__name__)

# Well-known development mnemonic (Hardhat / Anvil default accounts)
DEMO_MNEMONIC = "test test test test test test test test test test test junk"


class Wallet:
    """
    Mnemonic-backed wallet.

    Usage::

        with Wallet() as wallet:
            wallet.create_from_mnemonic(mnemonic)
            tx = wallet.build_transaction({...})
            signed = wallet.sign_transaction(tx)
    """

    def __init__(
        self,
        broadcaster: Optional[TransactionBroadcaster] = None,
        signer: Optional[EIP155Signer] = None,
    ):
        self._key_manager: Optional[KeyDerivationManager] = None
        self._signer = signer or EIP155Signer()
        self._broadcaster = broadcaster or TransactionBroadcaster()

    def __enter__(self) -> "Wallet":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    @property
    def is_initialized(self) -> bool:
        return self._key_manager is not None and self._key_manager.is_initialized

    @property
    def broadcaster(self) -> TransactionBroadcaster:
        return self._broadcaster

    def create_from_mnemonic(self, mnemonic: str, passphrase: str = "") -> None:
        """Load a mnemonic, disposing of any previously loaded one."""
        if self._key_manager is not None:
            self._key_manager.dispose()
            self._key_manager = None
        self._key_manager = KeyDerivationManager(mnemonic, passphrase)

    def derive_account(self, index: int = 0) -> WalletAccount:
        if self._key_manager is None:
            raise WalletError(
                "Wallet not initialized. Call create_from_mnemonic first.",
                ErrorCode.WALLET_NOT_INITIALIZED,
            )
        return self._key_manager.derive_account(index)

    def get_address(self, index: int = 0) -> str:
        return self.derive_account(index).address

    def build_transaction(self, params: Mapping[str, Any], unit: Optional[str] = None) -> UnsignedTransaction:
        return TransactionBuilder.from_params(params, unit)

    def sign_transaction(self, tx: UnsignedTransaction, index: int = 0) -> SignedTransaction:
        account = self.derive_account(index)
        return self._signer.sign_transaction(tx, account.private_key)

    def broadcast_transaction(self, signed: Union[SignedTransaction, str]) -> str:
        return self._broadcaster.broadcast_transaction(signed)

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self._broadcaster.get_transaction_receipt(tx_hash)

    def validate_address(self, address: str) -> str:
        return validate_address(address)

    def convert_to_wei(self, amount: IntInput, unit: Optional[str] = None) -> int:
        return validate_wei_amount(amount, unit)

    def dispose(self) -> None:
        if self._key_manager is not None:
            self._key_manager.dispose()
            self._key_manager = None


def create_demo_wallet(broadcaster: Optional[TransactionBroadcaster] = None) -> Wallet:
    """Wallet loaded with the public development mnemonic.  Never hold funds on it."""
    wallet = Wallet(broadcaster=broadcaster)
    wallet.create_from_mnemonic(DEMO_MNEMONIC)
    return wallet


@dataclass(frozen=True)
class TransactionResult:
    signed: SignedTransaction
    tx_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"signed": self.signed.to_dict()}
        if self.tx_hash is not None:
            result["txHash"] = self.tx_hash
        return result


class SimpleWallet:
    """
    One-call wallet API.

    Args:
        mnemonic: Mnemonic to load (default: the development mnemonic)
        broadcaster: Broadcaster used when ``broadcast`` is requested
    """

    def __init__(
        self,
        mnemonic: Optional[str] = None,
        broadcaster: Optional[TransactionBroadcaster] = None,
    ):
        self._wallet = Wallet(broadcaster=broadcaster)
        if mnemonic is None:
            logger.warning("No mnemonic given, using the public development mnemonic")
            mnemonic = DEMO_MNEMONIC
        self._wallet.create_from_mnemonic(mnemonic)

    def __enter__(self) -> "SimpleWallet":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def create_signed_transaction(
        self,
        params: Mapping[str, Any],
        unit: Optional[str] = None,
    ) -> TransactionResult:
        """
        Build, sign and optionally broadcast a transaction.

        Args:
            params: ``to, value, nonce, gasPrice, gasLimit, chainId`` plus
                    optional ``data``, ``accountIndex`` and ``broadcast``
                    (only a real ``True`` broadcasts)
            unit: Unit of ``value`` (see ``validate_wei_amount``)

        Returns:
            TransactionResult with the signed transaction and, when broadcast,
            the provider-reported hash
        """
        tx = self._wallet.build_transaction(params, unit)
        index = params.get("accountIndex", params.get("account_index"))
        index = 0 if index is None else validate_account_index(index)
        signed = self._wallet.sign_transaction(tx, index)

        tx_hash = None
        if params.get("broadcast") is True:
            tx_hash = self._wallet.broadcast_transaction(signed)
        return TransactionResult(signed=signed, tx_hash=tx_hash)

    def get_address(self, index: int = 0) -> str:
        return self._wallet.get_address(index)

    def validate_address(self, address: str) -> str:
        return self._wallet.validate_address(address)

    def convert_to_wei(self, amount: IntInput, unit: Optional[str] = None) -> int:
        return self._wallet.convert_to_wei(amount, unit)

    def dispose(self) -> None:
        self._wallet.dispose()
