"""
Input validation and normalization.

Turns untyped (usually string) user input into canonical typed values:
checksummed addresses and integer base-unit quantities.  Every failure is a
field-tagged ``WalletError``; nothing here touches the network.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from .errors import ErrorCode, WalletError
from .utils import is_hex, keccak256, strip_0x, to_0x_hex

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$", re.IGNORECASE)
_DIGITS_RE = re.compile(r"[0-9]+")

MIN_GAS_LIMIT = 21_000
MAX_GAS_LIMIT = 30_000_000
GWEI = 10**9
ETHER = 10**18
HIGH_GAS_PRICE_WEI = 1000 * GWEI

# Whole numbers below this are read as ETH when no unit is given
ETH_HEURISTIC_THRESHOLD = 10**15

UNIT_DECIMALS: dict[str, int] = {
    "wei": 0,
    "gwei": 9,
    "ether": 18,
    "eth": 18,
}

IntInput = Union[str, int]


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    body = strip_0x(address).lower()
    addr_hash = keccak256(body.encode("ascii")).hex()
    result = "0x"
    for i, c in enumerate(body):
        if c in "abcdef" and int(addr_hash[i], 16) >= 8:
            result += c.upper()
        else:
            result += c
    return result


def validate_address(address: str) -> str:
    """
    Validate an address and return its EIP-55 form.

    All-lowercase input is accepted as unchecksummed; any other casing must
    match the checksum exactly.

    Raises:
        WalletError: INVALID_ADDRESS or INVALID_ADDRESS_CHECKSUM
    """
    if not isinstance(address, str) or not ADDRESS_RE.match(address):
        raise WalletError("Invalid Ethereum address format", ErrorCode.INVALID_ADDRESS, "to")

    checksummed = to_checksum_address(address)
    if address != address.lower() and address != checksummed:
        raise WalletError("Invalid address checksum", ErrorCode.INVALID_ADDRESS_CHECKSUM, "to")

    return checksummed


def _parse_uint(
    value: IntInput,
    field: str,
    invalid: ErrorCode,
    negative: Optional[ErrorCode] = None,
    label: str = "value",
) -> int:
    if isinstance(value, bool):
        raise WalletError(f"Invalid {label}", invalid, field)

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        clean = value.strip()
        if clean.startswith("-") and _DIGITS_RE.fullmatch(clean[1:]):
            number = -int(clean[1:])
        elif _DIGITS_RE.fullmatch(clean):
            number = int(clean)
        else:
            raise WalletError(f"Invalid {label}", invalid, field)
    else:
        raise WalletError(f"Invalid {label}", invalid, field)

    if number < 0:
        if negative is not None:
            raise WalletError(f"{label.capitalize()} cannot be negative", negative, field)
        raise WalletError(f"Invalid {label}", invalid, field)
    return number


def eth_to_wei(amount: str, decimals: int = 18) -> int:
    """
    Convert a decimal string to base units without floating point.

    The fractional part is right-padded (or truncated) to ``decimals`` digits
    and concatenated with the integer part.

    Raises:
        WalletError: INVALID_VALUE on malformed input
    """
    clean = amount.strip()
    if clean.startswith("-"):
        raise WalletError("Value cannot be negative", ErrorCode.NEGATIVE_VALUE, "value")

    parts = clean.split(".")
    if len(parts) > 2:
        raise WalletError("Invalid decimal format", ErrorCode.INVALID_VALUE, "value")

    whole = parts[0] or "0"
    fraction = parts[1] if len(parts) == 2 else ""
    if not _DIGITS_RE.fullmatch(whole) or (fraction and not _DIGITS_RE.fullmatch(fraction)):
        raise WalletError("Invalid Wei amount", ErrorCode.INVALID_VALUE, "value")

    if not fraction:
        return int(whole) * 10**decimals
    return int(whole + fraction.ljust(decimals, "0")[:decimals])


def validate_wei_amount(amount: IntInput, unit: Optional[str] = None) -> int:
    """
    Validate an amount and return it in Wei.

    Args:
        amount: Decimal string (or int, already in ``unit``/Wei)
        unit: ``"wei"``, ``"gwei"`` or ``"ether"``.  When omitted, strings with
              a decimal point or whole numbers below 10**15 are read as ETH and
              everything else as Wei.

    Raises:
        WalletError: NEGATIVE_VALUE or INVALID_VALUE
    """
    decimals: Optional[int] = None
    if unit is not None:
        decimals = UNIT_DECIMALS.get(unit.strip().lower())
        if decimals is None:
            raise WalletError(f"Unknown unit: {unit}", ErrorCode.INVALID_VALUE, "value")

    if isinstance(amount, int) and not isinstance(amount, bool):
        if amount < 0:
            raise WalletError("Value cannot be negative", ErrorCode.NEGATIVE_VALUE, "value")
        return amount * 10 ** (decimals or 0)

    if not isinstance(amount, str) or not amount.strip():
        raise WalletError("Invalid Wei amount", ErrorCode.INVALID_VALUE, "value")

    clean = amount.strip()
    if clean.startswith("-"):
        raise WalletError("Value cannot be negative", ErrorCode.NEGATIVE_VALUE, "value")

    if decimals is not None:
        return eth_to_wei(clean, decimals)

    if "." in clean:
        return eth_to_wei(clean)

    whole = _parse_uint(clean, "value", ErrorCode.INVALID_VALUE, label="Wei amount")
    if whole < ETH_HEURISTIC_THRESHOLD:
        return whole * ETHER
    return whole


def validate_gas_limit(gas_limit: IntInput) -> int:
    """Validate gas limit against ``[21000, 30000000]``."""
    gas = _parse_uint(gas_limit, "gasLimit", ErrorCode.INVALID_GAS_LIMIT, label="gas limit")
    if gas < MIN_GAS_LIMIT:
        raise WalletError(
            f"Gas limit too low (minimum {MIN_GAS_LIMIT})",
            ErrorCode.GAS_LIMIT_TOO_LOW,
            "gasLimit",
        )
    if gas > MAX_GAS_LIMIT:
        raise WalletError(
            f"Gas limit too high (maximum {MAX_GAS_LIMIT})",
            ErrorCode.GAS_LIMIT_TOO_HIGH,
            "gasLimit",
        )
    return gas


def validate_gas_price(gas_price: IntInput) -> int:
    """Validate gas price in Wei.  Prices above 1000 gwei only log a warning."""
    price = _parse_uint(
        gas_price,
        "gasPrice",
        ErrorCode.INVALID_GAS_PRICE,
        ErrorCode.NEGATIVE_GAS_PRICE,
        label="gas price",
    )
    if price > HIGH_GAS_PRICE_WEI:
        logger.warning("Gas price %d wei exceeds 1000 Gwei", price)
    return price


def validate_nonce(nonce: IntInput) -> int:
    return _parse_uint(nonce, "nonce", ErrorCode.INVALID_NONCE, ErrorCode.NEGATIVE_NONCE, label="nonce")


def validate_chain_id(chain_id: IntInput) -> int:
    cid = _parse_uint(chain_id, "chainId", ErrorCode.INVALID_CHAIN_ID, label="chain ID")
    if cid == 0:
        raise WalletError("Invalid chain ID", ErrorCode.INVALID_CHAIN_ID, "chainId")
    return cid


def normalize_hex_data(data: Union[str, bytes]) -> str:
    """Return calldata as 0x-prefixed hex, adding the prefix when missing."""
    if isinstance(data, (bytes, bytearray)):
        return to_0x_hex(data)
    if not isinstance(data, str):
        raise WalletError("Invalid transaction data", ErrorCode.INVALID_DATA, "data")

    body = strip_0x(data.strip())
    if not is_hex(body) or len(body) % 2:
        raise WalletError("Transaction data must be even-length hex", ErrorCode.INVALID_DATA, "data")
    return "0x" + body.lower()


def validate_account_index(index: IntInput) -> int:
    """BIP-44 address index; decimal strings are accepted like the other numeric fields."""
    return _parse_uint(index, "accountIndex", ErrorCode.DERIVATION_FAILED, label="account index")
