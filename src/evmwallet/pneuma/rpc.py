"""
JSON-RPC client.

Lightweight alternative to web3.py: plain httpx POSTs carrying JSON-RPC 2.0
envelopes.  Also hosts the network-info helpers used by ``evmwallet status``.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..errors import ErrorCode, WalletError, classify_provider_error
from ..networks import NetworkConfig, get_network_by_chain_id
from ..utils import hex_quantity_to_int
from ..validation import validate_address

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RpcError(Exception):
    """
    JSON-RPC error object returned by a node.

    Attributes:
        code: JSON-RPC error code (None when the node sent no code)
        message: Error message
        data: Optional ``data`` member of the error object
    """

    def __init__(self, code: Optional[int], message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"RPC error {self.code}: {self.message}"


class RpcClient:
    """
    Minimal JSON-RPC client for one endpoint.

    Pass ``client`` to reuse a connection pool (or to inject an
    ``httpx.MockTransport`` in tests); otherwise each call opens its own.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client
        self._ids = itertools.count(1)

    def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_gasPrice")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            httpx.HTTPError: Transport failure, timeout or non-2xx status
            RpcError: The node answered with an error object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

        if self._client is not None:
            response = self._client.post(self.url, json=payload, timeout=self.timeout)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json=payload)
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise RpcError(-32700, f"Invalid JSON response from {self.url}") from e
        if not isinstance(data, dict):
            raise RpcError(-32600, f"Unexpected response from {self.url}")

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                code = error.get("code")
                raise RpcError(
                    code if isinstance(code, int) else None,
                    str(error.get("message") or "Unknown error"),
                    error.get("data"),
                )
            raise RpcError(None, str(error))

        return data.get("result")

    # ------------------------------------------------------------------
    # eth_* wrappers
    # ------------------------------------------------------------------

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction and return its hash."""
        result = self.call("eth_sendRawTransaction", [raw_tx])
        if not result:
            raise RpcError(None, "Empty result from eth_sendRawTransaction")
        return result

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def _quantity(self, method: str, params: Optional[list] = None) -> int:
        result = self.call(method, params)
        if not isinstance(result, str):
            raise RpcError(None, f"Empty result from {method}")
        try:
            return hex_quantity_to_int(result)
        except ValueError:
            raise RpcError(None, f"Malformed quantity from {method}: {result!r}") from None

    def gas_price(self) -> int:
        return self._quantity("eth_gasPrice")

    def get_transaction_count(self, address: str, block: str = "latest") -> int:
        return self._quantity("eth_getTransactionCount", [address, block])

    def get_balance(self, address: str, block: str = "latest") -> int:
        return self._quantity("eth_getBalance", [address, block])

    def block_number(self) -> int:
        return self._quantity("eth_blockNumber")

    def chain_id(self) -> int:
        return self._quantity("eth_chainId")

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Poll until a receipt is available.

        Raises:
            TimeoutError: If receipt not found within timeout
        """
        start = time.monotonic()
        while time.monotonic() - start < timeout:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            time.sleep(poll_interval)

        raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")


# ---------------------------------------------------------------------------
# Network info
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NetworkStatus:
    name: str
    chain_id: int
    rpc_url: str
    connected: bool
    gas_price: Optional[int] = None
    block_number: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AccountInfo:
    address: str
    nonce: int
    balance: int


def _resolve_network(chain_id: int) -> NetworkConfig:
    network = get_network_by_chain_id(chain_id)
    if network is None:
        raise WalletError(f"Unsupported chain ID: {chain_id}", ErrorCode.INVALID_CHAIN_ID, "chainId")
    return network


def get_network_status(
    chain_id: int,
    rpc_url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.Client] = None,
) -> NetworkStatus:
    """
    Probe a registered network.

    Connection failures are reported in the result, not raised.

    Raises:
        WalletError: INVALID_CHAIN_ID for an unregistered chain
    """
    network = _resolve_network(chain_id)
    url = rpc_url or network.rpc_url
    rpc = RpcClient(url, timeout=timeout, client=client)

    try:
        block_number = rpc.block_number()
        gas_price = rpc.gas_price()
    except (httpx.HTTPError, RpcError) as e:
        logger.warning("Network %s unreachable at %s: %s", network.name, url, e)
        return NetworkStatus(
            name=network.name,
            chain_id=network.chain_id,
            rpc_url=url,
            connected=False,
            error=str(classify_provider_error(e, network.name)),
        )

    return NetworkStatus(
        name=network.name,
        chain_id=network.chain_id,
        rpc_url=url,
        connected=True,
        gas_price=gas_price,
        block_number=block_number,
    )


def get_account_info(
    address: str,
    chain_id: int,
    rpc_url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.Client] = None,
) -> AccountInfo:
    """
    Fetch nonce and balance for an address.

    Raises:
        WalletError: Invalid address / chain, or the classified provider failure
    """
    checksummed = validate_address(address)
    network = _resolve_network(chain_id)
    rpc = RpcClient(rpc_url or network.rpc_url, timeout=timeout, client=client)

    try:
        nonce = rpc.get_transaction_count(checksummed)
        balance = rpc.get_balance(checksummed)
    except (httpx.HTTPError, RpcError) as e:
        raise classify_provider_error(e, network.name) from e

    return AccountInfo(address=checksummed, nonce=nonce, balance=balance)
