"""
Keys - Manage the encrypted key store.

The store is opened for the duration of one command and closed again;
the password comes from ``--password``, ``SCRIPTORIUM_KEYSTORE_PASSWORD``,
or an interactive prompt.
"""

from __future__ import annotations

import functools
import sys
from pathlib import Path
from typing import Any, Callable

import click

from ..sigil.keys import DEFAULT_KEYSTORE_PATH, generate_key, get_address
from ..sigil.keystore import KeyStore, KeyStoreError


def keystore_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--keystore`` and ``--password`` options to a command."""

    @click.option(
        "--keystore",
        "keystore_path",
        type=click.Path(dir_okay=False, path_type=Path),
        envvar="SCRIPTORIUM_KEYSTORE",
        default=DEFAULT_KEYSTORE_PATH,
        show_default=True,
        help="Encrypted key store file",
    )
    @click.option(
        "--password",
        envvar="SCRIPTORIUM_KEYSTORE_PASSWORD",
        prompt="Key store password",
        hide_input=True,
        help="Key store password",
    )
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper


def open_store(keystore_path: Path, password: str) -> KeyStore:
    store = KeyStore()
    try:
        store.open(keystore_path, password)
    except KeyStoreError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    return store


@click.group()
def keys() -> None:
    """Manage the encrypted key store."""


@keys.command("new")
@click.option("--account", "account_name", required=True, help="Account name")
@keystore_options
def keys_new(account_name: str, keystore_path: Path, password: str) -> None:
    """Generate a new signing key for an account."""
    store = open_store(keystore_path, password)
    try:
        if store.get_key(account_name):
            click.secho(f"ERROR: A key for '{account_name}' already exists.", fg="red")
            sys.exit(1)
        private_key, address = generate_key()
        store.add_key(account_name, private_key)
    finally:
        store.close()
    click.echo(f"Account: {account_name}")
    click.echo(f"Address: {address}")


@keys.command("add")
@click.option("--account", "account_name", required=True, help="Account name")
@click.option(
    "--key",
    "private_key",
    prompt="Private key",
    hide_input=True,
    help="0x-prefixed hex private key",
)
@keystore_options
def keys_add(account_name: str, private_key: str, keystore_path: Path, password: str) -> None:
    """Import an existing signing key."""
    store = open_store(keystore_path, password)
    try:
        store.add_key(account_name, private_key)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    finally:
        store.close()
    click.echo(f"Added key for {account_name} ({get_address(private_key)})")


@keys.command("remove")
@click.option("--account", "account_name", required=True, help="Account name")
@keystore_options
def keys_remove(account_name: str, keystore_path: Path, password: str) -> None:
    """Remove an account's signing key."""
    store = open_store(keystore_path, password)
    try:
        store.remove_key(account_name)
    finally:
        store.close()
    click.echo(f"Removed {account_name}")


@keys.command("list")
@keystore_options
def keys_list(keystore_path: Path, password: str) -> None:
    """List accounts held in the key store."""
    store = open_store(keystore_path, password)
    try:
        accounts = store.list_accounts()
        rows = [(name, get_address(store.get_key(name))) for name in accounts]
    finally:
        store.close()

    if not rows:
        click.echo("No accounts.")
        return
    for name, address in rows:
        click.echo(f"  {name}  {address}")
