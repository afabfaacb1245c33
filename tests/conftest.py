"""Shared fixtures: a scripted fake node and fast key store parameters."""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import pytest

from scriptorium.sigil.keys import generate_key
from scriptorium.sigil.vault import Argon2Params
from scriptorium.spec.models import SignedTransaction


def make_chain_state(head_block_number: int, time_seconds: int, block_id: Optional[str] = None) -> dict[str, Any]:
    """Build a ``getChainState`` result the way the node returns it."""
    if block_id is None:
        block_id = f"{head_block_number:016x}" + f"{head_block_number * 7919:016x}" + "ab" * 16
    return {
        "state": {
            "dgpo": {
                "head_block_number": head_block_number,
                "head_block_id": block_id,
                "time": time_seconds,
            }
        }
    }


class FakeNode:
    """
    In-memory stand-in for ``NodeRpc``.

    Each ``get_chain_state`` call advances to the next scripted state (the
    last one repeats).  Every remote interaction is recorded in ``calls``.
    """

    def __init__(
        self,
        states: Optional[list[dict[str, Any]]] = None,
        outcome_delay: float = 0.0,
        result: Optional[dict[str, Any]] = None,
        broadcast_error: Optional[Exception] = None,
    ) -> None:
        self.states = states or [make_chain_state(100, 1_700_000_000)]
        self.outcome_delay = outcome_delay
        self.result = result
        self.broadcast_error = broadcast_error
        self.calls: list[tuple[Any, ...]] = []
        self._state_index = 0

    def get_chain_state(self) -> dict[str, Any]:
        self.calls.append(("getChainState",))
        state = self.states[min(self._state_index, len(self.states) - 1)]
        self._state_index += 1
        return state

    def broadcast_trx(self, signed: SignedTransaction, only_deliver: bool) -> dict[str, Any]:
        self.calls.append(("broadcastTrx", signed, only_deliver))
        if self.broadcast_error is not None:
            raise self.broadcast_error
        if self.result is not None:
            return self.result
        if only_deliver:
            return {"status": "delivered", "trx_id": signed.trx_id}
        time.sleep(self.outcome_delay)
        return {"status": "processed", "trx_id": signed.trx_id, "invoice": {"status": 200}}

    def methods(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture()
def fake_node_factory() -> Callable[..., FakeNode]:
    return FakeNode


@pytest.fixture()
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def chain_state_factory() -> Callable[..., dict[str, Any]]:
    return make_chain_state


@pytest.fixture()
def fast_kdf() -> Argon2Params:
    """Cheap Argon2id settings so key store tests stay fast."""
    return Argon2Params(mem_kib=1024, iterations=1, parallelism=1)


@pytest.fixture()
def signing_key() -> tuple[str, str]:
    """A fresh (private_key_hex, address) pair."""
    return generate_key()
