"""
Transaction Pipeline - accumulate, bind, sign, and submit.

Order is fixed: key check -> chain snapshot -> sign -> broadcast.  A
missing key fails before the node is contacted at all.  Nothing is
retried or re-signed; after a failed submission the pipeline is spent and
a new one must be built, since its snapshot may be stale.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from ..errors import SigningKeyMissingError, TransactionSealedError
from ..sigil.crypto import DEFAULT_SIGNATURE_SCHEME
from ..spec.models import ChainStateSnapshot, SignedTransaction, Transaction
from ..spec.operations import Operation

logger = logging.getLogger(__name__)


class NodeConnection(Protocol):
    def get_chain_state(self) -> dict[str, Any]:
        ...

    def broadcast_trx(self, signed: SignedTransaction, only_deliver: bool) -> dict[str, Any]:
        ...


def fetch_snapshot(rpc: NodeConnection) -> ChainStateSnapshot:
    return ChainStateSnapshot.from_dict(rpc.get_chain_state())


class TransactionPipeline:
    """
    Drive one transaction from pending operations to a broadcast result.

    Args:
        rpc: Node connection (``NodeRpc`` or anything with the same two calls)
        signing_key: 0x-prefixed hex private key of the acting account
        scheme: Signature scheme selector
        transaction: Existing pending transaction to drive (default: new)
    """

    def __init__(
        self,
        rpc: NodeConnection,
        signing_key: Optional[str],
        *,
        scheme: int = DEFAULT_SIGNATURE_SCHEME,
        transaction: Optional[Transaction] = None,
    ) -> None:
        self._rpc = rpc
        self._signing_key = signing_key
        self.scheme = scheme
        self.transaction = transaction if transaction is not None else Transaction()
        self.submitted = False

    def add_operation(self, op: Operation) -> "TransactionPipeline":
        """Append an operation.  No network call."""
        if self.submitted:
            raise TransactionSealedError("Transaction has already been submitted.")
        self.transaction.add_operation(op)
        return self

    def finalize_and_submit(self, wait_for_result: bool = True) -> dict[str, Any]:
        """
        Snapshot, sign, and broadcast the pending transaction.

        Args:
            wait_for_result: Block until the node reports the processing
                outcome; if False, return once delivery is accepted

        Returns:
            The node's broadcast result, unmodified

        Raises:
            SigningKeyMissingError: No signing key (before any network call)
            TransactionSealedError: The pipeline was already submitted
            ValueError: No operations were added
        """
        if self.submitted or self.transaction.is_sealed:
            raise TransactionSealedError("Transaction has already been submitted.")
        if not self._signing_key:
            raise SigningKeyMissingError()
        if not self.transaction.operations:
            raise ValueError("Cannot submit a transaction without operations.")

        self.submitted = True

        snapshot = fetch_snapshot(self._rpc)
        self.transaction.bind_snapshot(snapshot)
        signed = self.transaction.sign(self._signing_key, self.scheme)
        logger.debug(
            "signed %s at block %d (%d ops)",
            signed.trx_id,
            snapshot.head_block_number,
            len(self.transaction.operations),
        )
        return self._rpc.broadcast_trx(signed, only_deliver=not wait_for_result)


def sign_transaction(
    rpc: NodeConnection,
    transaction: Transaction,
    signing_key: Optional[str],
    scheme: int = DEFAULT_SIGNATURE_SCHEME,
) -> SignedTransaction:
    """Bind ``transaction`` to the current chain state and sign it, without broadcasting."""
    if not signing_key:
        raise SigningKeyMissingError()
    transaction.bind_snapshot(fetch_snapshot(rpc))
    return transaction.sign(signing_key, scheme)
