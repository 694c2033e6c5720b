"""Shared fixtures: an in-process fake JSON-RPC node behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable, Union

import httpx
import pytest

from goweb3.rpc.client import RPCClient, get_client

NODE_URL = "http://node.test:8545"

# Well-known test key (eth-account documentation)
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

GENESIS_HASH = "0x" + "ab" * 32
TX_HASH = "0x" + "11" * 32


class FakeNode:
    """Answers JSON-RPC requests from a method -> result table.

    A result may be a callable taking the params list. Methods listed in
    ``errors`` answer with a JSON-RPC error object instead.
    """

    def __init__(self) -> None:
        self.results: dict[str, Union[Any, Callable[[list], Any]]] = {}
        self.errors: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, list]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))

        if method in self.errors:
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]}
            )
        if method not in self.results:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32601, "message": f"the method {method} does not exist"},
                },
            )
        result = self.results[method]
        if callable(result):
            result = result(params)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def client(node: FakeNode) -> RPCClient:
    rpc = get_client(NODE_URL, transport=httpx.MockTransport(node))
    yield rpc
    rpc.close()
