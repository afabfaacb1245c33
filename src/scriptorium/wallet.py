"""
Wallet - a node connection plus an encrypted key store.

``Wallet.account(name)`` hands out a ``NodeClient`` that signs with the
key stored for ``name``.  The key store methods are the store's own and
fail the same way when no store is open.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx

from .pneuma.client import NodeClient
from .pneuma.rpc import NodeRpc
from .sigil.crypto import DEFAULT_SIGNATURE_SCHEME
from .sigil.keystore import KeyStore
from .sigil.vault import Argon2Params


class Wallet:
    def __init__(
        self,
        rpc_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        kdf_params: Optional[Argon2Params] = None,
        scheme: int = DEFAULT_SIGNATURE_SCHEME,
    ) -> None:
        self.rpc = NodeRpc(rpc_url, timeout=timeout, transport=transport)
        self.keystore = KeyStore(kdf_params=kdf_params)
        self.scheme = scheme

    def close(self) -> None:
        self.keystore.close()
        self.rpc.close()

    def __enter__(self) -> "Wallet":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def client(self) -> NodeClient:
        """Read-only client (submitting through it fails: no signing key)."""
        return NodeClient(self.rpc, None, self.scheme)

    def account(self, name: str) -> NodeClient:
        """Client that signs with ``name``'s key, looked up now."""
        return NodeClient(self.rpc, self.keystore.get_key(name), self.scheme)

    # ============ Key store ============

    def open_keystore(self, path: Path | str, password: str) -> None:
        self.keystore.open(path, password)

    def get_key(self, account: str) -> Optional[str]:
        return self.keystore.get_key(account)

    def add_key(self, account: str, private_key: str) -> None:
        self.keystore.add_key(account, private_key)

    def remove_key(self, account: str) -> None:
        self.keystore.remove_key(account)

    def list_accounts(self) -> list[str]:
        return self.keystore.list_accounts()
