"""
Theurgy Derive - Show the accounts behind a mnemonic.

Derives ``m/44'/60'/0'/0/{index}`` for a range of indexes and prints the
checksummed addresses.  Private keys are never printed.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..errors import WalletError
from ..sigil.keys import KeyDerivationManager
from .common import fail, get_settings, resolve_mnemonic


@click.command("address")
@click.option("--mnemonic", "-m", default=None, help="BIP-39 mnemonic (default: EVMWALLET_MNEMONIC)")
@click.option("--passphrase", default="", help="Optional BIP-39 passphrase")
@click.option("--index", "-i", default=0, type=click.IntRange(min=0), help="First account index")
@click.option("--count", "-n", default=1, type=click.IntRange(min=1, max=100), help="Number of accounts")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text")
@click.pass_context
def address(
    ctx: click.Context,
    mnemonic: Optional[str],
    passphrase: str,
    index: int,
    count: int,
    as_json: bool,
) -> None:
    """Derive account addresses from a mnemonic."""
    settings = get_settings(ctx)
    phrase = resolve_mnemonic(settings, mnemonic)

    try:
        with KeyDerivationManager(phrase, passphrase) as km:
            accounts = [km.derive_account(i) for i in range(index, index + count)]
    except WalletError as exc:
        fail(exc)

    if as_json:
        click.echo(json.dumps(
            [
                {"index": a.index, "address": a.address, "path": a.derivation_path}
                for a in accounts
            ],
            indent=2,
        ))
        return

    for account in accounts:
        click.echo(
            click.style(f"  [{account.index}] ", dim=True)
            + click.style(account.address, fg="bright_white")
            + click.style(f"  {account.derivation_path}", dim=True)
        )
