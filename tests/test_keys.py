"""Unit tests for BIP-39 / BIP-44 key derivation."""

from __future__ import annotations

import pytest

from evmwallet.errors import ErrorCode, WalletError
from evmwallet.models import SecretBytes
from evmwallet.sigil.keys import (
    KeyDerivationManager,
    KeyManagerState,
    public_key_to_address,
    validate_mnemonic,
)

TEST_MNEMONIC = "test test test test test test test test test test test junk"

# Hardhat / Anvil default accounts
EXPECTED = {
    0: (
        "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80",
    ),
    1: (
        "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
        "59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d",
    ),
    2: (
        "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
        "5de4111afa1a4b94908f83103eb1f1706367c2e68ca870fc3fb9a804cdab365a",
    ),
}


@pytest.fixture()
def km():
    with KeyDerivationManager(TEST_MNEMONIC) as manager:
        yield manager


class TestMnemonicValidation:
    """Tests for mnemonic checks performed on construction."""

    def test_valid_mnemonic_normalized(self) -> None:
        assert validate_mnemonic("  TEST test  test test test test test test test test test JUNK ") == TEST_MNEMONIC

    @pytest.mark.parametrize("count", [11, 13, 23, 25])
    def test_wrong_word_count(self, count: int) -> None:
        with pytest.raises(WalletError) as exc_info:
            KeyDerivationManager(" ".join(["test"] * count))
        assert exc_info.value.code == ErrorCode.INVALID_MNEMONIC_LENGTH

    def test_unknown_words_listed(self) -> None:
        phrase = "test test test test test test test test test test foobar junk"
        with pytest.raises(WalletError) as exc_info:
            KeyDerivationManager(phrase)
        assert exc_info.value.code == ErrorCode.INVALID_MNEMONIC_WORDS
        assert "foobar" in str(exc_info.value)

    def test_bad_checksum(self) -> None:
        with pytest.raises(WalletError) as exc_info:
            KeyDerivationManager(" ".join(["abandon"] * 12))
        assert exc_info.value.code == ErrorCode.INVALID_MNEMONIC_CHECKSUM

    def test_valid_24_words(self) -> None:
        phrase = " ".join(["abandon"] * 23 + ["art"])
        with KeyDerivationManager(phrase) as manager:
            assert manager.is_initialized


class TestDeriveAccount:
    """Tests for deterministic account derivation."""

    @pytest.mark.parametrize("index", sorted(EXPECTED))
    def test_known_accounts(self, km: KeyDerivationManager, index: int) -> None:
        address, private_key = EXPECTED[index]
        account = km.derive_account(index)
        assert account.address == address
        assert account.private_key.hex() == private_key
        assert account.derivation_path == f"m/44'/60'/0'/0/{index}"
        assert account.index == index

    def test_public_key_shape(self, km: KeyDerivationManager) -> None:
        account = km.derive_account(0)
        assert len(account.public_key) == 65
        assert account.public_key[0] == 0x04
        assert public_key_to_address(account.public_key) == account.address
        assert public_key_to_address(account.public_key[1:]) == account.address

    def test_derivation_is_deterministic(self, km: KeyDerivationManager) -> None:
        with KeyDerivationManager(TEST_MNEMONIC) as other:
            assert other.derive_account(5) == km.derive_account(5)

    def test_passphrase_changes_accounts(self, km: KeyDerivationManager) -> None:
        with KeyDerivationManager(TEST_MNEMONIC, passphrase="secret") as other:
            assert other.derive_account(0).address != km.derive_account(0).address

    def test_repr_hides_private_key(self, km: KeyDerivationManager) -> None:
        account = km.derive_account(0)
        assert EXPECTED[0][1] not in repr(account)
        assert "private_key" not in repr(account)

    @pytest.mark.parametrize("index", [-1, 1.5, "0", True])
    def test_invalid_index(self, km: KeyDerivationManager, index) -> None:
        with pytest.raises(WalletError) as exc_info:
            km.derive_account(index)
        assert exc_info.value.code == ErrorCode.DERIVATION_FAILED


class TestLifecycle:
    """Tests for state transitions and seed wiping."""

    def test_initial_state(self) -> None:
        manager = KeyDerivationManager(TEST_MNEMONIC)
        assert manager.state is KeyManagerState.INITIALIZED
        manager.dispose()

    def test_dispose_blocks_derivation(self) -> None:
        manager = KeyDerivationManager(TEST_MNEMONIC)
        manager.dispose()
        assert manager.state is KeyManagerState.DISPOSED
        with pytest.raises(WalletError) as exc_info:
            manager.derive_account(0)
        assert exc_info.value.code == ErrorCode.NOT_INITIALIZED

    def test_dispose_is_idempotent(self) -> None:
        manager = KeyDerivationManager(TEST_MNEMONIC)
        manager.dispose()
        manager.dispose()
        assert manager.state is KeyManagerState.DISPOSED

    def test_dispose_wipes_seed(self) -> None:
        manager = KeyDerivationManager(TEST_MNEMONIC)
        seed = manager._seed
        assert seed is not None and not seed.is_wiped
        manager.dispose()
        assert seed.is_wiped
        assert len(seed) == 64

    def test_context_manager_disposes(self) -> None:
        with KeyDerivationManager(TEST_MNEMONIC) as manager:
            manager.derive_account(0)
        assert not manager.is_initialized


class TestSecretBytes:
    """Tests for the wipeable secret buffer."""

    def test_wipe_zeroes_in_place(self) -> None:
        secret = SecretBytes(b"\x01\x02\x03")
        secret.wipe()
        assert bytes(secret) == b"\x00\x00\x00"
        assert secret.is_wiped

    def test_wipe_twice(self) -> None:
        secret = SecretBytes(b"\xff")
        secret.wipe()
        secret.wipe()
        assert secret.is_wiped

    def test_context_manager(self) -> None:
        with SecretBytes(b"\xaa" * 4) as secret:
            assert not secret.is_wiped
        assert secret.is_wiped

    def test_repr_redacted(self) -> None:
        assert "aa" not in repr(SecretBytes(b"\xaa" * 4))
