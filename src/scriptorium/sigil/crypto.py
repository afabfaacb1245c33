"""
Scriptorium Transaction Signing Primitives.

Provides:
- RFC 8785 JSON Canonicalization for deterministic signing payloads
- ECDSA/secp256k1 signatures (EIP-191) over ``scheme_tag || canonical_trx``
- Signer recovery for verification
- SHA-256 transaction IDs
"""

from __future__ import annotations

from typing import Any

import rfc8785
from eth_account import Account
from eth_account.messages import encode_defunct

from ..utils import hex_to_bytes, sha256_hex
from .keys import get_account

# Signature scheme selector mixed into every signing payload.  The node
# rejects signatures made under a different tag.
DEFAULT_SIGNATURE_SCHEME = 0


class CryptoError(ValueError):
    pass


class SignatureError(CryptoError):
    pass


def canonicalize(payload: dict[str, Any]) -> bytes:
    """Canonicalize a JSON-compatible dict using RFC 8785 JCS."""
    try:
        return rfc8785.dumps(payload)
    except rfc8785.CanonicalizationError as exc:
        raise CryptoError(f"Payload cannot be canonicalized: {exc}") from exc


def signing_payload(trx: dict[str, Any], scheme: int = DEFAULT_SIGNATURE_SCHEME) -> bytes:
    if scheme < 0 or scheme > 0xFFFFFFFF:
        raise CryptoError(f"Signature scheme out of range: {scheme}")
    return scheme.to_bytes(4, "big") + canonicalize(trx)


def transaction_id(trx: dict[str, Any]) -> str:
    return sha256_hex(canonicalize(trx))


def sign_transaction_payload(
    trx: dict[str, Any],
    private_key_hex: str,
    scheme: int = DEFAULT_SIGNATURE_SCHEME,
) -> dict[str, Any]:
    """Sign a transaction dict with ECDSA/secp256k1 (EIP-191 personal_sign).

    Args:
        trx: Wire form of the unsigned transaction.
        private_key_hex: 0x-prefixed hex ECDSA private key.
        scheme: Signature scheme selector.

    Returns:
        Signature object to embed into the signed transaction.
    """
    account = get_account(private_key_hex)
    signable = encode_defunct(primitive=signing_payload(trx, scheme))
    signed = account.sign_message(signable)
    return {
        "alg": "ecdsa_secp256k1_eip191",
        "scheme": scheme,
        "signer_address": account.address,
        "sig": "0x" + bytes(signed.signature).hex(),
    }


def recover_signer(trx: dict[str, Any], signature: dict[str, Any]) -> str:
    """Recover the address that produced ``signature`` over ``trx``.

    Raises:
        SignatureError: If the signature is malformed or does not recover.
    """
    sig_hex = signature.get("sig")
    if not isinstance(sig_hex, str) or not sig_hex:
        raise SignatureError("Transaction signature is incomplete.")
    scheme = int(signature.get("scheme", DEFAULT_SIGNATURE_SCHEME))
    signable = encode_defunct(primitive=signing_payload(trx, scheme))
    try:
        return Account.recover_message(signable, signature=hex_to_bytes(sig_hex))
    except Exception as exc:
        raise SignatureError("Invalid transaction signature.") from exc


def verify_transaction_signature(trx: dict[str, Any], signature: dict[str, Any]) -> None:
    """Check that ``signature`` recovers to its declared signer.

    Raises:
        SignatureError: If verification fails.
    """
    declared = signature.get("signer_address")
    if not isinstance(declared, str) or not declared:
        raise SignatureError("Transaction signature is missing signer_address.")
    recovered = recover_signer(trx, signature)
    if recovered.lower() != declared.lower():
        raise SignatureError("Recovered signer does not match declared signer_address.")
