"""Helpers shared by the command modules."""

from __future__ import annotations

import sys
from typing import NoReturn, Optional

import click

from ..config import Settings, load_settings
from ..errors import WalletError, format_error_for_display
from ..networks import get_network, get_network_names


def get_settings(ctx: click.Context) -> Settings:
    """Settings loaded by the group callback (loaded here when invoked standalone)."""
    obj = ctx.find_object(dict)
    if obj is not None and "settings" in obj:
        return obj["settings"]
    return load_settings()


def fail(error: WalletError) -> NoReturn:
    click.secho(format_error_for_display(error), fg="red", err=True)
    sys.exit(1)


def resolve_mnemonic(settings: Settings, mnemonic: Optional[str]) -> str:
    mnemonic = mnemonic or settings.mnemonic
    if not mnemonic:
        click.secho(
            "ERROR: No mnemonic. Pass --mnemonic or set EVMWALLET_MNEMONIC.",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return mnemonic


def resolve_network_key(network: str) -> str:
    key = network.strip().lower()
    if get_network(key) is None:
        click.secho(
            f"ERROR: Unknown network '{network}'. Choose from: {', '.join(get_network_names())}",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return key
