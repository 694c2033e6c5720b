"""
JSON-RPC client for GoChain and other Ethereum-compatible nodes.

Uses httpx for HTTP. Every accessor is a single JSON-RPC call; failures
are re-raised as RPCError with a prefix naming the operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

import httpx

from ..utils import (
    block_param,
    decode_hex,
    from_quantity,
    normalize_address,
    normalize_hash,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RPCError(RuntimeError):
    """A JSON-RPC call failed (node error or transport error)."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


class RPCConnectionError(RPCError):
    pass


class NotFoundError(RPCError):
    pass


@dataclass(frozen=True)
class ChainIdentity:
    """Identity of the network a node is serving."""

    network_id: Optional[int] = None
    chain_id: Optional[int] = None
    genesis_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "network_id": self.network_id,
            "chain_id": self.chain_id,
            "genesis_hash": self.genesis_hash,
        }


def _parse_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    text = str(value)
    if text[:2] in ("0x", "0X"):
        return int(text, 16)
    return int(text)


class RPCClient:
    """
    Connection handle: the endpoint URL plus an httpx transport.

    Use get_client() to construct one. Instances are context managers;
    closing releases the underlying connection pool.
    """

    def __init__(self, url: str, http: httpx.Client) -> None:
        self.url = url
        self._http = http
        self._request_id = 0

    def __enter__(self) -> "RPCClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RPCClient(url={self.url!r})"

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a raw JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RPCError: If the transport fails or the node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._next_id(),
        }
        logger.debug("rpc -> %s %s", method, payload["params"])

        try:
            response = self._http.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RPCError(f"{method}: {exc}") from exc
        except ValueError as exc:
            raise RPCError(f"{method}: invalid JSON response: {exc}") from exc

        if not isinstance(data, dict):
            raise RPCError(f"{method}: unexpected response {data!r}")

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RPCError(
                    error.get("message", str(error)),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RPCError(str(error))

        result = data.get("result")
        logger.debug("rpc <- %s %r", method, result)
        return result

    def _request(self, action: str, method: str, params: list) -> Any:
        try:
            return self.call(method, params)
        except RPCError as exc:
            raise RPCError(f"Cannot {action}: {exc}", code=exc.code, data=exc.data) from exc

    def _decoded(self, action: str, method: str, params: list, decode: Callable[[Any], Any]) -> Any:
        result = self._request(action, method, params)
        if result is None:
            raise RPCError(f"Cannot {action}: invalid result None")
        try:
            return decode(result)
        except (ValueError, TypeError) as exc:
            raise RPCError(f"Cannot {action}: invalid result {result!r}") from exc

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_balance(self, address: str, block_number: Optional[int] = None) -> int:
        """
        Get the balance of an address.

        Args:
            address: 0x-prefixed address
            block_number: Block to read at (default: latest)

        Returns:
            Balance in wei
        """
        return self._decoded(
            "get balance",
            "eth_getBalance",
            [normalize_address(address), block_param(block_number)],
            from_quantity,
        )

    def get_code(self, address: str, block_number: Optional[int] = None) -> bytes:
        """
        Get the contract code at an address.

        Returns:
            Runtime bytecode (empty for externally owned accounts)
        """
        return self._decoded(
            "get code",
            "eth_getCode",
            [normalize_address(address), block_param(block_number)],
            decode_hex,
        )

    def get_block_by_number(
        self, number: Optional[int] = None, full_transactions: bool = True
    ) -> dict:
        """
        Get a block by number.

        Args:
            number: Block number (default: latest)
            full_transactions: Include transaction objects rather than hashes

        Raises:
            NotFoundError: If the node has no such block
        """
        result = self._request(
            "get block",
            "eth_getBlockByNumber",
            [block_param(number), full_transactions],
        )
        if result is None:
            raise NotFoundError(f"Cannot get block: block {block_param(number)} not found")
        return result

    def get_transaction_by_hash(self, tx_hash: str) -> tuple[dict, bool]:
        """
        Get a transaction by hash.

        Returns:
            Tuple of (transaction, is_pending)

        Raises:
            NotFoundError: If the node does not know the transaction
        """
        tx_hash = normalize_hash(tx_hash)
        result = self._request(
            "get transaction", "eth_getTransactionByHash", [tx_hash]
        )
        if result is None:
            raise NotFoundError(f"Cannot get transaction: {tx_hash} not found")
        return result, result.get("blockNumber") is None

    def get_snapshot(self) -> dict:
        """Get the clique signer snapshot at the latest block."""
        result = self._request("get snapshot", "clique_getSnapshot", ["latest"])
        if result is None:
            raise NotFoundError("Cannot get snapshot: no snapshot returned")
        return result

    def get_id(self) -> ChainIdentity:
        """
        Get the network ID, chain ID and genesis hash.

        Each part is fetched independently. A failing part is logged and
        left as None.
        """
        network_id = chain_id = genesis_hash = None

        try:
            network_id = _parse_int(self.call("net_version"))
        except (RPCError, ValueError, TypeError) as exc:
            logger.warning("Failed to get network ID: %s", exc)

        try:
            chain_id = _parse_int(self.call("eth_chainId"))
        except (RPCError, ValueError, TypeError) as exc:
            logger.warning("Failed to get chain ID: %s", exc)

        try:
            genesis = self.get_block_by_number(0, full_transactions=False)
            genesis_hash = genesis.get("hash")
        except RPCError as exc:
            logger.warning("Failed to get genesis block: %s", exc)

        return ChainIdentity(
            network_id=network_id, chain_id=chain_id, genesis_hash=genesis_hash
        )

    def suggest_gas_price(self) -> int:
        """Get the node's suggested gas price in wei."""
        return self._decoded("get gas price", "eth_gasPrice", [], from_quantity)

    def pending_nonce_at(self, address: str) -> int:
        """Get the next nonce for an address, counting pending transactions."""
        return self._decoded(
            "get nonce",
            "eth_getTransactionCount",
            [normalize_address(address), "pending"],
            from_quantity,
        )

    def send_raw_transaction(self, raw_tx: Union[str, bytes]) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        if isinstance(raw_tx, (bytes, bytearray)):
            raw_tx = "0x" + bytes(raw_tx).hex()
        return self._request("send transaction", "eth_sendRawTransaction", [raw_tx])

    def transaction_receipt(self, tx_hash: str) -> dict:
        """
        Get the receipt of a mined transaction.

        Raises:
            NotFoundError: If the transaction is unknown or not mined yet
        """
        tx_hash = normalize_hash(tx_hash)
        result = self._request(
            "get receipt", "eth_getTransactionReceipt", [tx_hash]
        )
        if result is None:
            raise NotFoundError(f"receipt for {tx_hash} not found")
        return result


def get_client(
    rpc_url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> RPCClient:
    """
    Open a client for an RPC endpoint.

    Args:
        rpc_url: http(s) URL of the node
        timeout: Per-request timeout in seconds
        transport: Custom httpx transport (e.g., httpx.MockTransport)

    Raises:
        RPCConnectionError: If the URL is empty or not an http(s) URL
    """
    if not rpc_url:
        raise RPCConnectionError("Cannot connect to the network '': empty RPC URL")
    try:
        url = httpx.URL(rpc_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise RPCConnectionError(
            f"Cannot connect to the network {rpc_url!r}: {exc}"
        ) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise RPCConnectionError(
            f"Cannot connect to the network {rpc_url!r}: unsupported URL"
        )

    http = httpx.Client(timeout=timeout, transport=transport)
    logger.debug("connected to %s", rpc_url)
    return RPCClient(rpc_url, http)
