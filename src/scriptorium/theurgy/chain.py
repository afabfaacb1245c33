"""
Chain - Read-only queries against the node.

- state:               current head block and chain time
- account:             one account's information
- accounts-by-balance: accounts within a balance range, richest first
- witnesses:           block producers in name order
"""

from __future__ import annotations

import itertools
import json
import sys
from typing import Any, Iterable, Optional

import click
import httpx

from ..pneuma.client import NodeClient
from ..pneuma.rpc import NodeRpc, RpcError
from ..spec.schemas import SchemaValidationError
from ..utils import utc_rfc3339


def rpc_from_context(ctx: click.Context) -> NodeRpc:
    obj = ctx.find_object(dict) or {}
    return NodeRpc(obj.get("rpc_url"), transport=obj.get("transport"))


def fail_on_node_error(exc: Exception) -> None:
    if isinstance(exc, RpcError):
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    click.secho(f"ERROR: Node request failed: {exc}", fg="red")
    sys.exit(1)


def _take(items: Iterable[Any], limit: Optional[int]) -> Iterable[Any]:
    return items if limit is None else itertools.islice(items, limit)


@click.command()
@click.pass_context
def state(ctx: click.Context) -> None:
    """Show the node's current chain state."""
    with rpc_from_context(ctx) as rpc:
        try:
            snapshot = NodeClient(rpc).get_snapshot()
        except (RpcError, httpx.HTTPError, SchemaValidationError) as exc:
            fail_on_node_error(exc)
            return

    click.echo(f"  Head block:  #{snapshot.head_block_number}")
    click.echo(f"  Block ID:    {snapshot.head_block_id}")
    click.echo(f"  Chain time:  {utc_rfc3339(snapshot.time)}")


@click.command()
@click.argument("name")
@click.pass_context
def account(ctx: click.Context, name: str) -> None:
    """Show account information."""
    with rpc_from_context(ctx) as rpc:
        try:
            info = NodeClient(rpc).get_account_by_name(name)
        except (RpcError, httpx.HTTPError) as exc:
            fail_on_node_error(exc)
            return
    click.echo(json.dumps(info, indent=2, sort_keys=True))


@click.command("accounts-by-balance")
@click.option("--min", "min_balance", default=0, type=int, help="Minimum balance, inclusive")
@click.option("--max", "max_balance", required=True, type=int, help="Maximum balance, exclusive")
@click.option("--page-size", default=30, type=click.IntRange(min=1), help="Accounts per request")
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Stop after this many accounts")
@click.pass_context
def accounts_by_balance(
    ctx: click.Context, min_balance: int, max_balance: int, page_size: int, limit: Optional[int]
) -> None:
    """List accounts whose balance is within a range."""
    with rpc_from_context(ctx) as rpc:
        pager = NodeClient(rpc).get_account_list_by_balance(min_balance, max_balance, page_size)
        try:
            for item in _take(pager, limit):
                info = item.get("info", {})
                click.echo(f"  {info.get('name', '?')}  {info.get('balance', '?')}")
        except (RpcError, httpx.HTTPError) as exc:
            fail_on_node_error(exc)


@click.command()
@click.option("--page-size", default=30, type=click.IntRange(min=1), help="Producers per request")
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Stop after this many producers")
@click.pass_context
def witnesses(ctx: click.Context, page_size: int, limit: Optional[int]) -> None:
    """List block producers."""
    with rpc_from_context(ctx) as rpc:
        pager = NodeClient(rpc).get_witness_list(page_size)
        try:
            for item in _take(pager, limit):
                click.echo(f"  {item['owner']}")
        except (RpcError, httpx.HTTPError) as exc:
            fail_on_node_error(exc)
