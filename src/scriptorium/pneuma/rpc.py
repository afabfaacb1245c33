"""
JSON-RPC Client for a ledger node.

Thin transport over httpx: one POST per call, JSON-RPC 2.0 envelope.
Transport failures (``httpx.HTTPError``) propagate unchanged; a JSON-RPC
``error`` member becomes ``RpcError``.  Nothing here retries.
"""

from __future__ import annotations

import itertools
import logging
import os
from typing import Any, Optional

import httpx

from ..spec.models import SignedTransaction

logger = logging.getLogger(__name__)

# Default RPC endpoint (local node)
DEFAULT_RPC_URL = "http://127.0.0.1:8888"
DEFAULT_RPC_TIMEOUT = 30.0


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("SCRIPTORIUM_RPC_URL", DEFAULT_RPC_URL)


def get_rpc_timeout() -> float:
    """Get the RPC timeout (seconds) from environment or default."""
    return float(os.environ.get("SCRIPTORIUM_RPC_TIMEOUT", str(DEFAULT_RPC_TIMEOUT)))


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object."""

    exit_code: int = 4

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class NodeRpc:
    """
    Blocking JSON-RPC connection to one node.

    Args:
        url: Node endpoint (default: ``SCRIPTORIUM_RPC_URL`` or localhost)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url or get_rpc_url()
        self._client = httpx.Client(
            timeout=timeout if timeout is not None else get_rpc_timeout(),
            transport=transport,
        )
        self._ids = itertools.count(1)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NodeRpc":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def call(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "getChainState")
            params: Request object

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node returns an error object
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or {},
            "id": next(self._ids),
        }
        logger.debug("rpc %s -> %s", method, self.url)

        response = self._client.post(self.url, json=payload)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise RpcError(-1, "malformed response")

        if "error" in data and data["error"] is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(int(error.get("code", -1)), str(error.get("message", "")), error.get("data"))
            raise RpcError(-1, str(error))

        return data.get("result")

    def get_chain_state(self) -> dict[str, Any]:
        return self.call("getChainState")

    def broadcast_trx(self, signed: SignedTransaction, only_deliver: bool) -> dict[str, Any]:
        """
        Submit a signed transaction.

        Args:
            signed: The signed transaction
            only_deliver: Return once the node accepts delivery instead of
                waiting for the processing outcome
        """
        logger.debug("broadcast %s only_deliver=%s", signed.trx_id, only_deliver)
        return self.call(
            "broadcastTrx",
            {"transaction": signed.to_dict(), "only_deliver": only_deliver},
        )
