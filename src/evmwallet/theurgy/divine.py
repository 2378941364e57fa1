"""
Theurgy Divine - Query network and account status.

Shows for a registered network:
- RPC endpoint in use and whether it answered
- Latest block and current gas price
- Optionally the nonce and balance of an address
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..errors import WalletError
from ..networks import get_network
from ..pneuma.rpc import get_account_info, get_network_status
from .common import fail, get_settings, resolve_network_key

GWEI = 10**9


def _format_ether(wei: int, decimals: int = 18) -> str:
    whole, frac = divmod(wei, 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)


@click.command()
@click.option("--network", "-n", default="mainnet", show_default=True, help="Registered network name")
@click.option("--address", "-a", default=None, help="Also show nonce and balance for this address")
@click.pass_context
def status(ctx: click.Context, network: str, address: Optional[str]) -> None:
    """Show network status (and optionally account state)."""
    settings = get_settings(ctx)
    key = resolve_network_key(network)
    config = get_network(key)
    rpc_url = settings.rpc_url(key)

    net = get_network_status(config.chain_id, rpc_url=rpc_url, timeout=settings.rpc_timeout)

    click.echo(f"=== {net.name} (chain {net.chain_id}) ===")
    click.echo(f"  RPC:        {net.rpc_url}")
    if not net.connected:
        click.secho(f"  Status:     unreachable ({net.error})", fg="red")
        sys.exit(1)

    click.secho("  Status:     connected", fg="green")
    click.echo(f"  Block:      {net.block_number}")
    click.echo(f"  Gas price:  {net.gas_price / GWEI:.2f} Gwei ({net.gas_price} wei)")

    if address is None:
        return

    try:
        account = get_account_info(address, config.chain_id, rpc_url=rpc_url, timeout=settings.rpc_timeout)
    except WalletError as exc:
        fail(exc)

    click.echo("")
    click.echo(f"  Address:    {account.address}")
    click.echo(f"  Nonce:      {account.nonce}")
    click.echo(f"  Balance:    {_format_ether(account.balance, config.decimals)} {config.symbol}")
