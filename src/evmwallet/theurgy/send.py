"""
Theurgy Send - Broadcast raw transactions and look up receipts.
"""

from __future__ import annotations

import json

import click

from ..errors import WalletError
from ..networks import explorer_tx_url
from ..sigil.signing import decode_raw_transaction
from .common import fail, get_settings


@click.command()
@click.argument("raw_tx")
@click.pass_context
def broadcast(ctx: click.Context, raw_tx: str) -> None:
    """
    Broadcast a signed raw transaction.

    Transactions for a registered network go to that network's RPC;
    everything else goes through the configured provider pool.
    """
    settings = get_settings(ctx)

    try:
        signed = decode_raw_transaction(raw_tx.strip())
        tx_hash = settings.make_broadcaster().broadcast_transaction(signed)
    except WalletError as exc:
        fail(exc)

    click.echo(tx_hash)
    url = explorer_tx_url(signed.chain_id, tx_hash)
    if url:
        click.echo(click.style(f"  {url}", dim=True))


@click.command()
@click.argument("tx_hash")
@click.pass_context
def receipt(ctx: click.Context, tx_hash: str) -> None:
    """Look up a transaction receipt on the provider pool."""
    settings = get_settings(ctx)
    result = settings.make_broadcaster().get_transaction_receipt(tx_hash)

    if result is None:
        click.echo("Receipt not available (pending, dropped, or unknown).")
        return

    click.echo(json.dumps(result, indent=2))
