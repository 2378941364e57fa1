"""Unit tests for the network registry."""

from __future__ import annotations

from evmwallet.networks import (
    NETWORKS,
    explorer_tx_url,
    get_network,
    get_network_by_chain_id,
    get_network_names,
    get_supported_chain_ids,
    is_valid_chain_id,
)


class TestNetworkRegistry:
    """Tests for registry lookups."""

    def test_names(self) -> None:
        assert get_network_names() == ["mainnet", "sepolia"]

    def test_chain_ids(self) -> None:
        assert get_supported_chain_ids() == [1, 11155111]

    def test_lookup_by_key(self) -> None:
        assert get_network("Sepolia") is NETWORKS["sepolia"]
        assert get_network("goerli") is None

    def test_lookup_by_chain_id(self) -> None:
        network = get_network_by_chain_id(1)
        assert network is not None
        assert network.name == "Ethereum Mainnet"
        assert network.symbol == "ETH"
        assert network.decimals == 18
        assert get_network_by_chain_id(137) is None

    def test_is_valid_chain_id(self) -> None:
        assert is_valid_chain_id(11155111)
        assert not is_valid_chain_id(5)

    def test_explorer_url(self) -> None:
        tx_hash = "0x" + "ab" * 32
        assert explorer_tx_url(11155111, tx_hash) == f"https://sepolia.etherscan.io/tx/{tx_hash}"
        assert explorer_tx_url(42161, tx_hash) is None
