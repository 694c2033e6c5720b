"""
RPC layer: network resolution, the JSON-RPC client, artifact loading,
contract deployment and receipt polling.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
