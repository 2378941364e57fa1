__version__ = "0.1.0"

__all__ = [
    # Models
    "SecretBytes",
    "WalletAccount",
    "UnsignedTransaction",
    "SignedTransaction",
    "ProviderEndpoint",
    # Errors
    "ErrorCode",
    "WalletError",
    "classify_provider_error",
    "should_retry_error",
    "format_error_for_display",
    "ERROR_MESSAGES",
    # Networks
    "NetworkConfig",
    "NETWORKS",
    "get_network",
    "get_network_by_chain_id",
    "is_valid_chain_id",
    "get_supported_chain_ids",
    "get_network_names",
    "explorer_tx_url",
    # Validation
    "to_checksum_address",
    "validate_address",
    "validate_wei_amount",
    "eth_to_wei",
    "validate_gas_limit",
    "validate_gas_price",
    "validate_nonce",
    "validate_chain_id",
    "normalize_hex_data",
    "validate_account_index",
    # Keys & signing
    "KeyDerivationManager",
    "KeyManagerState",
    "public_key_to_address",
    "EIP155Signer",
    "decode_raw_transaction",
    "recover_sender",
    # Transactions & RPC
    "TransactionBuilder",
    "TransactionBroadcaster",
    "RpcClient",
    "RpcError",
    "get_network_status",
    "get_account_info",
    # Wallet
    "Wallet",
    "SimpleWallet",
    "TransactionResult",
    "create_demo_wallet",
    # Config
    "Settings",
    "load_settings",
    "configure_logging",
]

from .errors import (
    ERROR_MESSAGES,
    ErrorCode,
    WalletError,
    classify_provider_error,
    format_error_for_display,
    should_retry_error,
)
from .models import ProviderEndpoint, SecretBytes, SignedTransaction, UnsignedTransaction, WalletAccount
from .networks import (
    NETWORKS,
    NetworkConfig,
    explorer_tx_url,
    get_network,
    get_network_by_chain_id,
    get_network_names,
    get_supported_chain_ids,
    is_valid_chain_id,
)
from .validation import (
    eth_to_wei,
    normalize_hex_data,
    to_checksum_address,
    validate_account_index,
    validate_address,
    validate_chain_id,
    validate_gas_limit,
    validate_gas_price,
    validate_nonce,
    validate_wei_amount,
)
from .sigil.keys import KeyDerivationManager, KeyManagerState, public_key_to_address
from .sigil.signing import EIP155Signer, decode_raw_transaction, recover_sender
from .pneuma.tx import TransactionBuilder
from .pneuma.broadcast import TransactionBroadcaster
from .pneuma.rpc import RpcClient, RpcError, get_account_info, get_network_status
from .wallet import SimpleWallet, TransactionResult, Wallet, create_demo_wallet
from .config import Settings, load_settings
from .logging_utils import configure_logging
