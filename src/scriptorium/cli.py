"""
Scriptorium CLI

Command-line interface for a ledger node client.

Commands:
  keys      - Manage the encrypted key store (new / add / remove / list)
  state     - Show the node's current chain state
  account   - Show account information
  accounts-by-balance - Page through accounts within a balance range
  witnesses - Page through block producers
  transfer  - Sign and broadcast a transfer
"""

from __future__ import annotations

import logging
import sys

import click
from dotenv import load_dotenv

from .pneuma.rpc import DEFAULT_RPC_URL
from .sigil.keys import SCRIPTORIUM_ENV


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="scriptorium")
@click.option(
    "--rpc-url",
    envvar="SCRIPTORIUM_RPC_URL",
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="Node JSON-RPC endpoint",
)
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic to stderr")
@click.pass_context
def cli(ctx: click.Context, rpc_url: str, verbose: bool) -> None:
    """Scriptorium - ledger node client."""
    ctx.ensure_object(dict)
    ctx.obj["rpc_url"] = rpc_url
    ctx.obj.setdefault("transport", None)
    if verbose:
        _configure_logging(logging.DEBUG)


def _configure_logging(level: int) -> None:
    logger = logging.getLogger("scriptorium")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", "%Y-%m-%dT%H:%M:%S")
        )
        logger.addHandler(handler)


# ============ Commands ============

from .theurgy.keys import keys
from .theurgy.chain import account, accounts_by_balance, state, witnesses
from .theurgy.transfer import transfer

cli.add_command(keys)
cli.add_command(state)
cli.add_command(account)
cli.add_command(accounts_by_balance)
cli.add_command(witnesses)
cli.add_command(transfer)


# ============ Entry Points ============


def main() -> None:
    """Scriptorium CLI entry point."""
    if SCRIPTORIUM_ENV.exists():
        load_dotenv(SCRIPTORIUM_ENV)
    cli(obj={})


if __name__ == "__main__":
    main()
