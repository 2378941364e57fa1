"""
Theurgy Sign - Build and sign a legacy transaction.

Prints ``{"signed": {...}, "txHash": ...}`` with every integer rendered as
a decimal string.  With ``--broadcast`` the signed transaction is also sent
through the configured provider pool.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from ..errors import WalletError
from ..networks import get_network
from ..validation import UNIT_DECIMALS
from ..wallet import SimpleWallet
from .common import fail, get_settings, resolve_mnemonic, resolve_network_key


@click.command()
@click.option("--mnemonic", "-m", default=None, help="BIP-39 mnemonic (default: EVMWALLET_MNEMONIC)")
@click.option("--to", "to", required=True, help="Recipient address (empty string deploys a contract)")
@click.option("--value", required=True, help="Amount to send")
@click.option(
    "--unit",
    type=click.Choice(sorted(UNIT_DECIMALS), case_sensitive=False),
    default=None,
    help="Unit of --value (default: decimals and small numbers are ETH, large numbers Wei)",
)
@click.option("--nonce", required=True, help="Sender nonce")
@click.option("--gas-price", required=True, help="Gas price in Wei")
@click.option("--gas-limit", default="21000", show_default=True, help="Gas limit")
@click.option("--chain-id", default=None, help="EIP-155 chain id")
@click.option("--network", default=None, help="Registered network name (sets the chain id)")
@click.option("--data", default="0x", show_default=True, help="Calldata (hex)")
@click.option("--index", "-i", default=0, type=click.IntRange(min=0), help="Account index")
@click.option("--broadcast", is_flag=True, help="Broadcast after signing")
@click.pass_context
def sign(
    ctx: click.Context,
    mnemonic: Optional[str],
    to: str,
    value: str,
    unit: Optional[str],
    nonce: str,
    gas_price: str,
    gas_limit: str,
    chain_id: Optional[str],
    network: Optional[str],
    data: str,
    index: int,
    broadcast: bool,
) -> None:
    """Build and sign a transaction (optionally broadcast it)."""
    settings = get_settings(ctx)
    phrase = resolve_mnemonic(settings, mnemonic)

    if network is not None:
        chain_id = str(get_network(resolve_network_key(network)).chain_id)
    if chain_id is None:
        click.secho("ERROR: Pass --chain-id or --network.", fg="red", err=True)
        sys.exit(1)

    params = {
        "to": to,
        "value": value,
        "nonce": nonce,
        "gasPrice": gas_price,
        "gasLimit": gas_limit,
        "chainId": chain_id,
        "data": data,
        "accountIndex": index,
        "broadcast": broadcast,
    }

    try:
        with SimpleWallet(phrase, broadcaster=settings.make_broadcaster()) as wallet:
            result = wallet.create_signed_transaction(params, unit=unit)
    except WalletError as exc:
        fail(exc)

    click.echo(json.dumps(result.to_dict(), indent=2))
