"""
evmwallet CLI

Command-line interface for the minimal EVM wallet: derive accounts from a
BIP-39 mnemonic, sign legacy EIP-155 transactions and broadcast them
through a pool of public JSON-RPC providers.

Commands:
  address    - Derive account addresses
  sign       - Build and sign a transaction (optionally broadcast)
  broadcast  - Broadcast a signed raw transaction
  receipt    - Look up a transaction receipt
  networks   - List registered networks
  status     - Query network / account status
"""

from __future__ import annotations

import sys

import click

from . import __version__
from .config import load_settings
from .logging_utils import configure_logging
from .networks import NETWORKS


# ============ Constants ============

VERSION = __version__


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        E V M W A L L E T", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── Mnemonic in, signed tx out ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="evmwallet")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """evmwallet: minimal EVM wallet."""
    try:
        settings = load_settings()
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)

    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.derive import address
from .theurgy.divine import status
from .theurgy.send import broadcast, receipt
from .theurgy.sign import sign

cli.add_command(address)
cli.add_command(sign)
cli.add_command(broadcast)
cli.add_command(receipt)
cli.add_command(status)


@cli.command()
def networks() -> None:
    """List registered networks."""
    for key, network in NETWORKS.items():
        click.echo(
            click.style(f"  {key:<10}", fg="bright_white", bold=True)
            + click.style(f"{network.name} ", dim=True)
            + click.style(f"(chain {network.chain_id})", fg="cyan")
        )
        click.echo(click.style(f"             rpc:      {network.rpc_url}", dim=True))
        click.echo(click.style(f"             explorer: {network.explorer}", dim=True))


# ============ Entry Points ============


def main() -> None:
    """evmwallet CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
