"""
secp256k1 Key Handling for Scriptorium.

Signing keys are 0x-prefixed 32-byte hex strings.  They are only ever
persisted inside the encrypted key store (see ``keystore.py``); this module
deals with generating, normalising and inspecting them in memory.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import re
import secrets
from pathlib import Path

from eth_account import Account
from eth_account.signers.local import LocalAccount


# Default config directory
SCRIPTORIUM_DIR = Path.home() / ".scriptorium"
SCRIPTORIUM_ENV = SCRIPTORIUM_DIR / ".env"
DEFAULT_KEYSTORE_PATH = SCRIPTORIUM_DIR / "keystore.json"

_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def generate_key() -> tuple[str, str]:
    """
    Generate a new secp256k1 signing key.

    Returns:
        Tuple of (private_key_hex, address)
        - private_key_hex: 0x-prefixed hex private key (66 chars)
        - address: 0x-prefixed checksummed address of the key (42 chars)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def normalize_key(private_key: str) -> str:
    """
    Validate a private key string and return it 0x-prefixed and lowercase.

    Raises:
        ValueError: If the string is not a 32-byte hex key
    """
    candidate = private_key.strip()
    if not _KEY_RE.match(candidate):
        raise ValueError("Signing key must be 32 bytes of hex (optionally 0x-prefixed).")
    if not candidate.startswith("0x"):
        candidate = "0x" + candidate
    return candidate.lower()


def get_account(private_key: str) -> LocalAccount:
    """Get an eth-account LocalAccount for signing."""
    return Account.from_key(normalize_key(private_key))


def get_address(private_key: str) -> str:
    """Get the checksummed address a signing key controls."""
    return get_account(private_key).address
