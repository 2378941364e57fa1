"""
Multi-provider transaction broadcaster.

Providers are tried one after another in priority order.  Retriable
failures (rate limits, timeouts, generic provider errors) move on to the
next provider; anything else is raised at once.  Health flags are a hint
only and are owned by the broadcaster instance.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Iterable, Mapping, Optional, Union

import httpx

from ..errors import ErrorCode, WalletError, classify_provider_error, should_retry_error
from ..models import ProviderEndpoint, SignedTransaction
from ..networks import get_network_by_chain_id
from ..utils import utc_now
from .rpc import DEFAULT_TIMEOUT, RpcClient, RpcError

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS: tuple[tuple[str, str, int], ...] = (
    ("BlastAPI", "https://eth-mainnet.public.blastapi.io", 1),
    ("Cloudflare", "https://cloudflare-eth.com", 2),
    ("Ankr", "https://rpc.ankr.com/eth", 3),
)


def default_providers() -> list[ProviderEndpoint]:
    return [ProviderEndpoint(url=url, name=name, priority=prio) for name, url, prio in DEFAULT_PROVIDERS]


class TransactionBroadcaster:
    """
    Broadcast signed transactions with failover.

    Args:
        providers: Generic provider pool (default: BlastAPI, Cloudflare, Ankr)
        timeout: Per-request timeout in seconds
        client: Shared ``httpx.Client`` (e.g. one with a MockTransport)
        rpc_overrides: chain id -> RPC URL, replacing the registry URL used
                       when a transaction's chain is a registered network
    """

    def __init__(
        self,
        providers: Optional[Iterable[ProviderEndpoint]] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
        rpc_overrides: Optional[Mapping[int, str]] = None,
    ):
        pool = default_providers() if providers is None else providers
        self._providers = [replace(p) for p in pool]
        self.timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        self._client = client
        self._rpc_overrides = dict(rpc_overrides or {})
        self._lock = threading.Lock()

    @property
    def providers(self) -> list[ProviderEndpoint]:
        """Snapshot of the generic pool; mutating it does not affect the broadcaster."""
        with self._lock:
            return [replace(p) for p in self._providers]

    def reset_health(self) -> None:
        with self._lock:
            for provider in self._providers:
                provider.is_healthy = True
                provider.last_error = None

    def _mark_healthy(self, provider: ProviderEndpoint) -> None:
        with self._lock:
            provider.is_healthy = True
            provider.last_error = None

    def _mark_unhealthy(self, provider: ProviderEndpoint) -> None:
        with self._lock:
            provider.is_healthy = False
            provider.last_error = utc_now()

    def _pool_for(self, signed: Union[SignedTransaction, str]) -> list[ProviderEndpoint]:
        if isinstance(signed, SignedTransaction):
            network = get_network_by_chain_id(signed.chain_id)
            if network is not None:
                url = self._rpc_overrides.get(network.chain_id, network.rpc_url)
                return [ProviderEndpoint(url=url, name=network.name, priority=1)]
        return self._providers

    def broadcast_transaction(self, signed: Union[SignedTransaction, str]) -> str:
        """
        Send a signed transaction, failing over between providers.

        Args:
            signed: SignedTransaction, or 0x-prefixed raw transaction hex

        Returns:
            Transaction hash reported by the first provider that accepts it

        Raises:
            WalletError: NO_PROVIDERS, a non-retriable classified error, or
                         ALL_PROVIDERS_FAILED
        """
        raw = signed.raw_transaction if isinstance(signed, SignedTransaction) else signed

        pool = self._pool_for(signed)
        with self._lock:
            candidates = sorted((p for p in pool if p.is_healthy), key=lambda p: p.priority)
        if not candidates:
            raise WalletError("No healthy providers available", ErrorCode.NO_PROVIDERS)

        for provider in candidates:
            rpc = RpcClient(provider.url, timeout=self.timeout, client=self._client)
            try:
                tx_hash = rpc.send_raw_transaction(raw)
            except (httpx.HTTPError, RpcError) as e:
                error = classify_provider_error(e, provider.name)
                self._mark_unhealthy(provider)
                if not should_retry_error(error):
                    logger.warning("Broadcast via %s rejected: %s", provider.name, error.message)
                    raise error from e
                logger.warning("Broadcast via %s failed, trying next provider: %s", provider.name, error.message)
                continue

            self._mark_healthy(provider)
            logger.info("Broadcast via %s accepted: %s", provider.name, tx_hash)
            return tx_hash

        raise WalletError("All providers failed to broadcast transaction", ErrorCode.ALL_PROVIDERS_FAILED)

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        """
        Look up a receipt on the healthy generic providers.

        Per-provider failures are skipped and health is left untouched.

        Returns:
            The first non-null receipt, or None
        """
        with self._lock:
            candidates = sorted((p for p in self._providers if p.is_healthy), key=lambda p: p.priority)

        for provider in candidates:
            rpc = RpcClient(provider.url, timeout=self.timeout, client=self._client)
            try:
                receipt = rpc.get_transaction_receipt(tx_hash)
            except (httpx.HTTPError, RpcError) as e:
                logger.debug("Receipt lookup via %s failed: %s", provider.name, e)
                continue
            if receipt:
                return receipt
        return None
