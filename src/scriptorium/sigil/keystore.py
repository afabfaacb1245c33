"""
Encrypted Key Store - account name to signing key, behind a password.

The store is a single JSON envelope on disk (see ``spec/schemas/keystore.schema.json``)
holding an AES-256-GCM ciphertext whose key is derived from the password
with Argon2id.  The plaintext is a JSON object ``{account_name: private_key_hex}``.

A ``KeyStore`` is either Closed or Open.  Only an Open store holds
decrypted keys; every read or write of that state happens under one lock.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import KeyStoreClosedError
from ..spec.schemas import (
    KEYSTORE_PLAINTEXT_SCHEMA,
    KEYSTORE_SCHEMA,
    SchemaRegistry,
    SchemaValidationError,
    dump_json,
)
from ..utils import atomic_write
from .keys import normalize_key
from .vault import Argon2Params, VaultDecryptError, VaultError, derive_key, new_salt, open_envelope, seal

logger = logging.getLogger(__name__)


class KeyStoreError(ValueError):
    exit_code: int = 3


class KeyStoreAuthError(KeyStoreError):
    pass


class KeyStoreFormatError(KeyStoreError):
    pass


@dataclass
class _OpenSession:
    path: Path
    key: bytes
    salt: bytes
    params: Argon2Params
    keys: dict[str, str] = field(default_factory=dict)


class KeyStore:
    """Password-protected mapping of account names to signing keys."""

    def __init__(
        self,
        kdf_params: Optional[Argon2Params] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._session: Optional[_OpenSession] = None
        self._kdf_params = kdf_params or Argon2Params()
        self._registry = registry or SchemaRegistry.default()

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._session is not None

    @property
    def path(self) -> Optional[Path]:
        with self._lock:
            return self._session.path if self._session else None

    def open(self, path: Path | str, password: str) -> None:
        """
        Decrypt the store at ``path``, creating an empty one if absent.

        Raises:
            KeyStoreAuthError: Wrong or empty password
            KeyStoreFormatError: File is not a valid key store

        On failure the store keeps whatever state it had before the call.
        """
        path = Path(path).expanduser()
        if not password:
            raise KeyStoreAuthError("Key store password cannot be empty.")

        with self._lock:
            if path.exists():
                session = self._load(path, password)
                logger.debug("opened keystore %s (%d accounts)", path, len(session.keys))
            else:
                salt = new_salt()
                session = _OpenSession(
                    path=path,
                    key=derive_key(password, salt, self._kdf_params),
                    salt=salt,
                    params=self._kdf_params,
                )
                self._persist(session)
                logger.debug("created keystore %s", path)
            self._wipe()
            self._session = session

    def close(self) -> None:
        with self._lock:
            self._wipe()

    def get_key(self, account: str) -> Optional[str]:
        with self._lock:
            if self._session is None:
                return None
            return self._session.keys.get(account)

    def add_key(self, account: str, private_key: str) -> None:
        if not account:
            raise ValueError("Account name cannot be empty.")
        normalized = normalize_key(private_key)
        with self._lock:
            session = self._require_open()
            previous = session.keys.get(account)
            session.keys[account] = normalized
            try:
                self._persist(session)
            except Exception:
                if previous is None:
                    session.keys.pop(account, None)
                else:
                    session.keys[account] = previous
                raise

    def remove_key(self, account: str) -> None:
        with self._lock:
            session = self._require_open()
            if account not in session.keys:
                return
            previous = session.keys.pop(account)
            try:
                self._persist(session)
            except Exception:
                session.keys[account] = previous
                raise

    def list_accounts(self) -> list[str]:
        with self._lock:
            return sorted(self._require_open().keys)

    # ------------------------------------------------------------------

    def _require_open(self) -> _OpenSession:
        if self._session is None:
            raise KeyStoreClosedError()
        return self._session

    def _wipe(self) -> None:
        if self._session is not None:
            self._session.keys.clear()
            self._session = None

    def _load(self, path: Path, password: str) -> _OpenSession:
        try:
            envelope = json.loads(path.read_bytes())
        except (OSError, ValueError) as exc:
            raise KeyStoreFormatError(f"Cannot read key store {path}: {exc}") from exc

        try:
            self._registry.validate_instance(envelope, KEYSTORE_SCHEMA)
        except SchemaValidationError as exc:
            raise KeyStoreFormatError(f"Malformed key store {path}: {'; '.join(exc.errors)}") from exc

        try:
            plaintext, key, params, salt = open_envelope(envelope, password)
        except VaultDecryptError as exc:
            raise KeyStoreAuthError("Wrong password or corrupted key store.") from exc
        except (VaultError, ValueError) as exc:
            raise KeyStoreFormatError(f"Malformed key store {path}: {exc}") from exc

        try:
            keys = json.loads(plaintext)
            self._registry.validate_instance(keys, KEYSTORE_PLAINTEXT_SCHEMA)
        except (ValueError, SchemaValidationError) as exc:
            raise KeyStoreFormatError(f"Key store {path} has invalid content.") from exc

        return _OpenSession(path=path, key=key, salt=salt, params=params, keys=dict(keys))

    def _persist(self, session: _OpenSession) -> None:
        plaintext = json.dumps(session.keys, sort_keys=True).encode("utf-8")
        envelope = seal(plaintext, session.key, session.salt, session.params)
        atomic_write(session.path, dump_json(envelope))
        # Set secure permissions on Unix
        if os.name != "nt":
            session.path.chmod(0o600)
