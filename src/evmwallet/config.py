"""
Runtime configuration.

Settings come from the process environment, optionally seeded from
``~/.evmwallet/.env``.  Variables already present in the environment win
over the file.

Recognized variables:
    EVMWALLET_RPC_TIMEOUT    Per-request timeout in seconds (default 10)
    EVMWALLET_PROVIDERS      Broadcast pool, ``name=url`` pairs separated by commas
    EVMWALLET_RPC_<NETWORK>  RPC override for a registered network (e.g. EVMWALLET_RPC_SEPOLIA)
    EVMWALLET_LOG_LEVEL      DEBUG / INFO / WARNING / ERROR (default WARNING)
    EVMWALLET_MNEMONIC       Default mnemonic for the CLI
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import httpx
from dotenv import load_dotenv

from .models import ProviderEndpoint
from .networks import NETWORKS, get_network
from .pneuma.broadcast import DEFAULT_PROVIDERS, TransactionBroadcaster

# Default config directory
EVMWALLET_DIR = Path.home() / ".evmwallet"
EVMWALLET_ENV = EVMWALLET_DIR / ".env"

DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    provider_urls: tuple[tuple[str, str], ...] = tuple((name, url) for name, url, _ in DEFAULT_PROVIDERS)
    network_rpc: Mapping[str, str] = field(default_factory=dict)
    log_level: str = DEFAULT_LOG_LEVEL
    mnemonic: Optional[str] = field(default=None, repr=False)

    def provider_endpoints(self) -> list[ProviderEndpoint]:
        """Broadcast pool, prioritized in the order the providers were listed."""
        return [
            ProviderEndpoint(url=url, name=name, priority=i)
            for i, (name, url) in enumerate(self.provider_urls, start=1)
        ]

    def rpc_url(self, network_key: str) -> Optional[str]:
        """Configured RPC for a network, falling back to the registry URL."""
        network = get_network(network_key)
        if network is None:
            return None
        return self.network_rpc.get(network_key.strip().lower(), network.rpc_url)

    def rpc_overrides(self) -> dict[int, str]:
        """chain id -> RPC URL for every network with an override."""
        return {NETWORKS[key].chain_id: url for key, url in self.network_rpc.items() if key in NETWORKS}

    def make_broadcaster(self, client: Optional[httpx.Client] = None) -> TransactionBroadcaster:
        return TransactionBroadcaster(
            providers=self.provider_endpoints(),
            timeout=self.rpc_timeout,
            client=client,
            rpc_overrides=self.rpc_overrides(),
        )


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"EVMWALLET_RPC_TIMEOUT must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ValueError(f"EVMWALLET_RPC_TIMEOUT must be positive, got {raw!r}")
    return timeout


def _parse_providers(raw: str) -> tuple[tuple[str, str], ...]:
    providers = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, url = entry.partition("=")
        if not sep or not name.strip() or not url.strip().startswith(("http://", "https://")):
            raise ValueError(f"EVMWALLET_PROVIDERS entries must look like name=https://..., got {entry!r}")
        providers.append((name.strip(), url.strip()))
    if not providers:
        raise ValueError("EVMWALLET_PROVIDERS is set but lists no providers")
    return tuple(providers)


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from environment (and the .env file if present).

    Args:
        env_path: Path to .env file (default: ~/.evmwallet/.env)

    Raises:
        ValueError: If a variable is malformed (the message names it)
    """
    env_path = env_path or EVMWALLET_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    kwargs: dict = {}

    raw_timeout = os.environ.get("EVMWALLET_RPC_TIMEOUT")
    if raw_timeout:
        kwargs["rpc_timeout"] = _parse_timeout(raw_timeout)

    raw_providers = os.environ.get("EVMWALLET_PROVIDERS")
    if raw_providers:
        kwargs["provider_urls"] = _parse_providers(raw_providers)

    network_rpc = {}
    for key in NETWORKS:
        url = os.environ.get(f"EVMWALLET_RPC_{key.upper()}")
        if url:
            network_rpc[key] = url.strip()
    kwargs["network_rpc"] = network_rpc

    raw_level = os.environ.get("EVMWALLET_LOG_LEVEL")
    if raw_level:
        level = raw_level.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"EVMWALLET_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw_level!r}")
        kwargs["log_level"] = level

    mnemonic = os.environ.get("EVMWALLET_MNEMONIC")
    if mnemonic:
        kwargs["mnemonic"] = mnemonic.strip()

    return Settings(**kwargs)
