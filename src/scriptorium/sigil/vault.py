from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from argon2.exceptions import Argon2Error
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..utils import base64url_decode, base64url_encode

ENVELOPE_VERSION = 1
KDF_NAME = "argon2id"
AEAD_NAME = "aes-256-gcm"
SALT_LEN = 16
NONCE_LEN = 12
ASSOCIATED_DATA = b"scriptorium:keystore:v1"


class VaultError(ValueError):
    pass


class VaultDecryptError(VaultError):
    pass


@dataclass(frozen=True)
class Argon2Params:
    mem_kib: int = 65536
    iterations: int = 3
    parallelism: int = 1
    hash_len: int = 32

    def to_dict(self) -> dict[str, int]:
        return {
            "mem_kib": self.mem_kib,
            "iterations": self.iterations,
            "parallelism": self.parallelism,
            "hash_len": self.hash_len,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Argon2Params":
        return cls(
            mem_kib=int(payload["mem_kib"]),
            iterations=int(payload["iterations"]),
            parallelism=int(payload["parallelism"]),
            hash_len=int(payload["hash_len"]),
        )


def new_salt() -> bytes:
    return os.urandom(SALT_LEN)


def derive_key(password: str, salt: bytes, params: Argon2Params) -> bytes:
    if not password:
        raise VaultError("Password cannot be empty.")
    if len(salt) < SALT_LEN:
        raise VaultError(f"Salt must be at least {SALT_LEN} bytes.")
    if params.hash_len != 32:
        raise VaultError("Argon2id hash_len must be 32 bytes for AES-256-GCM.")
    try:
        return hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=salt,
            time_cost=params.iterations,
            memory_cost=params.mem_kib,
            parallelism=params.parallelism,
            hash_len=params.hash_len,
            type=Type.ID,
        )
    except (Argon2Error, MemoryError) as exc:
        raise VaultError(f"Argon2id rejected the KDF parameters: {exc}") from exc


def seal(plaintext: bytes, key: bytes, salt: bytes, params: Argon2Params) -> dict[str, Any]:
    """Encrypt ``plaintext`` and return the persisted envelope dict."""
    nonce = os.urandom(NONCE_LEN)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, ASSOCIATED_DATA)
    return {
        "version": ENVELOPE_VERSION,
        "kdf": KDF_NAME,
        "kdf_params": params.to_dict(),
        "salt": base64url_encode(salt),
        "aead": AEAD_NAME,
        "nonce": base64url_encode(nonce),
        "ciphertext": base64url_encode(ciphertext),
    }


def open_envelope(envelope: dict[str, Any], password: str) -> tuple[bytes, bytes, Argon2Params, bytes]:
    """Decrypt an envelope.

    Returns:
        Tuple of (plaintext, derived_key, kdf_params, salt) so the caller
        can re-seal without running the KDF again.

    Raises:
        VaultDecryptError: On a wrong password or tampered ciphertext.
    """
    params = Argon2Params.from_dict(envelope["kdf_params"])
    salt = base64url_decode(envelope["salt"])
    nonce = base64url_decode(envelope["nonce"])
    ciphertext = base64url_decode(envelope["ciphertext"])
    if len(nonce) != NONCE_LEN:
        raise VaultError(f"Nonce must be {NONCE_LEN} bytes.")
    key = derive_key(password, salt, params)
    try:
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, ASSOCIATED_DATA)
    except InvalidTag as exc:
        raise VaultDecryptError("Decryption failed: wrong password or corrupted data") from exc
    return plaintext, key, params, salt
