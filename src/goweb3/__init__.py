__all__ = [
    # Networks
    "NETWORKS",
    "network_url",
    "resolve_rpc_url",
    # Client
    "ChainIdentity",
    "RPCClient",
    "get_client",
    # Transactions
    "SentTransaction",
    "deploy_contract",
    "wait_for_receipt",
    # Artifacts
    "build_deploy_data",
    "load_abi",
    "load_bytecode",
    # Keys
    "get_account",
    "load_private_key",
    # Errors
    "RPCError",
    "RPCConnectionError",
    "NotFoundError",
    "DeployError",
    "ReceiptTimeoutError",
    "WaitCancelledError",
]

__version__ = "0.1.0"

from .keys import get_account, load_private_key
from .rpc.artifacts import build_deploy_data, load_abi, load_bytecode
from .rpc.client import (
    ChainIdentity,
    NotFoundError,
    RPCClient,
    RPCConnectionError,
    RPCError,
    get_client,
)
from .rpc.networks import NETWORKS, network_url, resolve_rpc_url
from .rpc.tx import (
    DeployError,
    ReceiptTimeoutError,
    SentTransaction,
    WaitCancelledError,
    deploy_contract,
    wait_for_receipt,
)
