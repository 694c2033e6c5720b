"""
Network name resolution.

Maps the well-known network names to public JSON-RPC endpoints.
An empty name selects mainnet.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

MAINNET_URL = "https://rpc.gochain.io"
TESTNET_URL = "https://testnet-rpc.gochain.io"
LOCALHOST_URL = "http://localhost:8545"

NETWORKS = MappingProxyType({
    "testnet": TESTNET_URL,
    "mainnet": MAINNET_URL,
    "localhost": LOCALHOST_URL,
    "ethereum": "https://main-rpc.linkpool.io",
    "ropsten": "https://ropsten-rpc.linkpool.io",
})


def network_url(network: str) -> str:
    """
    Resolve a network name to its RPC URL.

    Args:
        network: Network name (e.g., "testnet"). "" means mainnet.

    Returns:
        RPC URL, or "" for an unknown network
    """
    if network == "":
        return MAINNET_URL
    return NETWORKS.get(network, "")


def resolve_rpc_url(rpc_url: Optional[str] = None, network: Optional[str] = None) -> str:
    """
    Pick the RPC URL to connect to.

    An explicit URL wins; otherwise the network name is resolved.

    Raises:
        ValueError: If the network name is unknown
    """
    if rpc_url:
        return rpc_url
    url = network_url(network or "")
    if not url:
        raise ValueError(
            f"Unknown network {network!r}. "
            f"Known networks: {', '.join(NETWORKS)}"
        )
    return url
