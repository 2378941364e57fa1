"""
Wallet error taxonomy.

Every failure surfaced by the core is a ``WalletError`` carrying a closed
``ErrorCode``.  Provider-side failures are funnelled through a single
classifier (``classify_provider_error``) backed by a pure-data table so the
mapping can be tested without a network.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

import httpx


class ErrorCode(str, Enum):
    """Error codes for programmatic handling."""

    # Mnemonic / key management
    INVALID_MNEMONIC_LENGTH = "INVALID_MNEMONIC_LENGTH"
    INVALID_MNEMONIC_WORDS = "INVALID_MNEMONIC_WORDS"
    INVALID_MNEMONIC_CHECKSUM = "INVALID_MNEMONIC_CHECKSUM"
    KEY_INITIALIZATION_FAILED = "KEY_INITIALIZATION_FAILED"
    NOT_INITIALIZED = "NOT_INITIALIZED"
    WALLET_NOT_INITIALIZED = "WALLET_NOT_INITIALIZED"
    DERIVATION_FAILED = "DERIVATION_FAILED"

    # Input validation
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_ADDRESS_CHECKSUM = "INVALID_ADDRESS_CHECKSUM"
    NEGATIVE_VALUE = "NEGATIVE_VALUE"
    INVALID_VALUE = "INVALID_VALUE"
    GAS_LIMIT_TOO_LOW = "GAS_LIMIT_TOO_LOW"
    GAS_LIMIT_TOO_HIGH = "GAS_LIMIT_TOO_HIGH"
    INVALID_GAS_LIMIT = "INVALID_GAS_LIMIT"
    NEGATIVE_GAS_PRICE = "NEGATIVE_GAS_PRICE"
    INVALID_GAS_PRICE = "INVALID_GAS_PRICE"
    NEGATIVE_NONCE = "NEGATIVE_NONCE"
    INVALID_NONCE = "INVALID_NONCE"
    INVALID_CHAIN_ID = "INVALID_CHAIN_ID"
    INVALID_DATA = "INVALID_DATA"
    MISSING_FIELDS = "MISSING_FIELDS"

    # Signing
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    SIGNING_FAILED = "SIGNING_FAILED"

    # Provider side
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    NONCE_TOO_LOW = "NONCE_TOO_LOW"
    INVALID_TRANSACTION = "INVALID_TRANSACTION"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_UNAVAILABLE = "RESOURCE_UNAVAILABLE"
    TRANSACTION_REJECTED = "TRANSACTION_REJECTED"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NO_PROVIDERS = "NO_PROVIDERS"
    ALL_PROVIDERS_FAILED = "ALL_PROVIDERS_FAILED"


class WalletError(Exception):
    """
    Base exception for all wallet errors.

    Attributes:
        message: Human-readable error message
        code: ErrorCode (or a raw string for codes outside the taxonomy)
        field: Name of the offending input field, if any
    """

    def __init__(
        self,
        message: str,
        code: Union[ErrorCode, str],
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = _coerce_code(code)
        self.field = field

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        code = self.code.value if isinstance(self.code, ErrorCode) else self.code
        return f"{self.__class__.__name__}(code={code}, message={self.message!r})"

    @property
    def retriable(self) -> bool:
        """Whether another provider may succeed where this one failed."""
        return self.code in RETRIABLE_CODES


def _coerce_code(code: Union[ErrorCode, str]) -> Union[ErrorCode, str]:
    if isinstance(code, ErrorCode):
        return code
    try:
        return ErrorCode(code)
    except ValueError:
        return code


# ============ Provider Error Classification ============

# JSON-RPC error code -> taxonomy entry
RPC_ERROR_CODES: dict[int, ErrorCode] = {
    -32000: ErrorCode.INVALID_TRANSACTION,
    -32001: ErrorCode.RESOURCE_NOT_FOUND,
    -32002: ErrorCode.RESOURCE_UNAVAILABLE,
    -32003: ErrorCode.TRANSACTION_REJECTED,
    -32005: ErrorCode.RATE_LIMITED,
}

RETRIABLE_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.RATE_LIMITED,
        ErrorCode.RESOURCE_UNAVAILABLE,
        ErrorCode.NETWORK_TIMEOUT,
        ErrorCode.PROVIDER_ERROR,
    }
)

# Matched case-insensitively against the provider message, before the code table
MESSAGE_PATTERNS: tuple[tuple[str, ErrorCode, str], ...] = (
    ("insufficient funds", ErrorCode.INSUFFICIENT_FUNDS, "Insufficient funds for gas * price + value"),
    ("nonce too low", ErrorCode.NONCE_TOO_LOW, "Nonce too low"),
)

_CODE_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.RESOURCE_NOT_FOUND: "Resource not found",
    ErrorCode.RESOURCE_UNAVAILABLE: "Resource unavailable",
    ErrorCode.TRANSACTION_REJECTED: "Transaction rejected",
}


def _extract_code_and_message(error: Any) -> tuple[Optional[int], Optional[str]]:
    """Pull a JSON-RPC style ``code``/``message`` out of whatever was raised."""
    if isinstance(error, dict):
        nested = error.get("error")
        if isinstance(nested, dict) and "code" not in error:
            error = nested
        code = error.get("code")
        message = error.get("message")
        return (code if isinstance(code, int) else None), message
    if isinstance(error, BaseException):
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error) or None
        return (code if isinstance(code, int) and not isinstance(code, bool) else None), message
    return None, None


def classify_provider_error(error: Any, provider: str) -> WalletError:
    """
    Map a provider failure onto the error taxonomy.

    Args:
        error: Exception raised while talking to the provider, or a raw
               JSON-RPC error object (``{"code": ..., "message": ...}``)
        provider: Provider display name (used in rate-limit messages)

    Returns:
        WalletError with a taxonomy code
    """
    if isinstance(error, WalletError):
        return error

    if isinstance(error, httpx.TimeoutException):
        return WalletError(
            f"Request to {provider} timed out",
            ErrorCode.NETWORK_TIMEOUT,
        )

    code, message = _extract_code_and_message(error)
    lowered = (message or "").lower()

    for needle, error_code, text in MESSAGE_PATTERNS:
        if needle in lowered:
            return WalletError(text, error_code)

    mapped = RPC_ERROR_CODES.get(code) if code is not None else None
    if mapped is ErrorCode.INVALID_TRANSACTION:
        return WalletError(
            "Invalid transaction: " + (message or "Unknown error"),
            mapped,
        )
    if mapped is ErrorCode.RATE_LIMITED:
        return WalletError("Request limit exceeded for " + provider, mapped)
    if mapped is not None:
        return WalletError(_CODE_MESSAGES[mapped], mapped)

    return WalletError(message or "Unknown provider error", ErrorCode.PROVIDER_ERROR)


def should_retry_error(error: WalletError) -> bool:
    """Return True when the broadcast should move on to the next provider."""
    return error.code in RETRIABLE_CODES


# ============ User-facing Formatting ============

ERROR_MESSAGES: dict[ErrorCode, dict[str, str]] = {
    ErrorCode.INVALID_MNEMONIC_LENGTH: {
        "title": "Incorrect Word Count",
        "message": "Recovery phrases must contain exactly 12, 15, 18, 21, or 24 words.",
        "action": "Please check your backup and enter the complete recovery phrase.",
        "severity": "error",
    },
    ErrorCode.INVALID_MNEMONIC_WORDS: {
        "title": "Unrecognized Words",
        "message": "Some words are not in the BIP39 wordlist.",
        "action": "Check spelling or try selecting from suggested words.",
        "severity": "error",
    },
    ErrorCode.INVALID_MNEMONIC_CHECKSUM: {
        "title": "Invalid Recovery Phrase",
        "message": "The recovery phrase checksum is invalid.",
        "action": "Verify the word order and spelling. Each word must be exactly as written.",
        "severity": "error",
    },
    ErrorCode.INVALID_ADDRESS: {
        "title": "Invalid Address",
        "message": "The Ethereum address format is incorrect.",
        "action": "Ensure the address starts with 0x and contains 40 hexadecimal characters.",
        "severity": "error",
    },
    ErrorCode.INVALID_VALUE: {
        "title": "Invalid Amount",
        "message": "The transaction value is invalid.",
        "action": "Enter a valid amount in ETH or Wei.",
        "severity": "error",
    },
    ErrorCode.GAS_LIMIT_TOO_LOW: {
        "title": "Gas Limit Too Low",
        "message": "The gas limit is below the minimum required.",
        "action": "Set gas limit to at least 21000.",
        "severity": "error",
    },
    ErrorCode.NETWORK_TIMEOUT: {
        "title": "Network Timeout",
        "message": "The request timed out.",
        "action": "Check your internet connection and try again.",
        "severity": "error",
    },
    ErrorCode.ALL_PROVIDERS_FAILED: {
        "title": "Connection Failed",
        "message": "Unable to connect to any Ethereum node.",
        "action": "Please try again later or check network status.",
        "severity": "error",
    },
}


def format_error_for_display(error: WalletError) -> str:
    """Render a WalletError as ``title: message`` plus a suggested action."""
    template = ERROR_MESSAGES.get(error.code) if isinstance(error.code, ErrorCode) else None
    if template:
        return f"{template['title']}: {template['message']}\n{template['action']}"
    return f"Error: {error.message}"
