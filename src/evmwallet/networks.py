"""
Network registry.

Static table of supported networks keyed by short name.  Pure lookup;
RPC overrides from the environment are applied by ``config``, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NetworkConfig:
    """
    Attributes:
        name: Display name
        chain_id: EIP-155 chain id
        rpc_url: Canonical JSON-RPC endpoint
        explorer: Block explorer base URL
        symbol: Native asset symbol
        decimals: Native asset decimals
    """
    name: str
    chain_id: int
    rpc_url: str
    explorer: str
    symbol: str = "ETH"
    decimals: int = 18


NETWORKS: dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        name="Ethereum Mainnet",
        chain_id=1,
        rpc_url="https://eth.llamarpc.com",
        explorer="https://etherscan.io",
    ),
    "sepolia": NetworkConfig(
        name="Sepolia Testnet",
        chain_id=11155111,
        rpc_url="https://sepolia.gateway.tenderly.co",
        explorer="https://sepolia.etherscan.io",
    ),
}


def get_network(key: str) -> Optional[NetworkConfig]:
    """Look up a network by its short name (e.g. ``"sepolia"``)."""
    return NETWORKS.get(key.strip().lower())


def get_network_by_chain_id(chain_id: int) -> Optional[NetworkConfig]:
    for network in NETWORKS.values():
        if network.chain_id == chain_id:
            return network
    return None


def is_valid_chain_id(chain_id: int) -> bool:
    return get_network_by_chain_id(chain_id) is not None


def get_supported_chain_ids() -> list[int]:
    return [network.chain_id for network in NETWORKS.values()]


def get_network_names() -> list[str]:
    return list(NETWORKS.keys())


def explorer_tx_url(chain_id: int, tx_hash: str) -> Optional[str]:
    """Explorer link for a transaction, or None for unregistered chains."""
    network = get_network_by_chain_id(chain_id)
    if network is None:
        return None
    return f"{network.explorer}/tx/{tx_hash}"
