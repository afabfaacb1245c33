"""
Transfer - Sign and broadcast a transfer from a key store account.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import httpx

from ..errors import PreconditionError
from ..pneuma.client import NodeClient
from ..pneuma.rpc import RpcError
from ..spec.operations import Transfer
from ..spec.schemas import SchemaValidationError
from .chain import fail_on_node_error, rpc_from_context
from .keys import keystore_options, open_store


@click.command()
@click.option("--from", "sender", required=True, help="Sending account (must be in the key store)")
@click.option("--to", "receiver", required=True, help="Receiving account")
@click.option("--amount", required=True, type=click.IntRange(min=0), help="Amount in base units")
@click.option("--memo", default="", help="Transfer memo")
@click.option("--no-wait", is_flag=True, help="Return once the node accepts delivery")
@keystore_options
@click.pass_context
def transfer(
    ctx: click.Context,
    sender: str,
    receiver: str,
    amount: int,
    memo: str,
    no_wait: bool,
    keystore_path: Path,
    password: str,
) -> None:
    """Transfer funds between accounts."""
    store = open_store(keystore_path, password)
    try:
        signing_key = store.get_key(sender)
    finally:
        store.close()

    click.echo(f"  From:   {sender}")
    click.echo(f"  To:     {receiver}")
    click.echo(f"  Amount: {amount}")
    if memo:
        click.echo(f"  Memo:   {memo}")
    click.echo("")

    with rpc_from_context(ctx) as rpc:
        client = NodeClient(rpc, signing_key)
        try:
            if no_wait:
                result = client.sign_and_broadcast(
                    [Transfer(sender, receiver, amount, memo)], wait_for_result=False
                )
            else:
                result = client.transfer(sender, receiver, amount, memo)
        except PreconditionError as exc:
            click.secho(f"ERROR: {exc} for account '{sender}'", fg="red")
            sys.exit(exc.exit_code)
        except (RpcError, httpx.HTTPError, SchemaValidationError) as exc:
            fail_on_node_error(exc)
            return
        except ValueError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)

    click.echo(json.dumps(result, indent=2, sort_keys=True))
