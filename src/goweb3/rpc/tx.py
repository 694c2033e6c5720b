"""
Contract deployment and receipt polling.

Uses eth-account for signing and the httpx-based RPCClient for sending.
All gas is paid by the deploying key.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

from eth_account import Account

from ..utils import decode_hex, strip_0x
from .client import RPCClient, RPCError

logger = logging.getLogger(__name__)

DEPLOY_GAS_LIMIT = 2_000_000
RECEIPT_RETRIES = 5
RECEIPT_DELAY = 2.0


class DeployError(RPCError):
    pass


class ReceiptTimeoutError(RPCError):
    pass


class WaitCancelledError(RPCError):
    pass


@dataclass(frozen=True)
class SentTransaction:
    """A signed transaction that was accepted by the node."""

    hash: str
    raw_transaction: str
    sender: str
    nonce: int
    gas: int
    gas_price: int
    value: int
    data: str


def _as_deploy_error(exc: RPCError) -> DeployError:
    # the client message already names the step ("Cannot get nonce: ...")
    return DeployError(str(exc), code=exc.code, data=exc.data)


def deploy_contract(
    client: RPCClient,
    private_key_hex: str,
    contract_data: str,
    chain_id: Optional[int] = None,
) -> SentTransaction:
    """
    Sign and broadcast a contract creation transaction.

    Without chain_id the transaction carries a pre-EIP-155 signature.

    Args:
        client: Connected RPC client
        private_key_hex: Hex private key, with or without 0x
        contract_data: 0x-prefixed creation bytecode (with encoded constructor args)
        chain_id: Sign with EIP-155 replay protection for this chain

    Returns:
        The sent transaction

    Raises:
        DeployError: If any step fails; the message names the step
    """
    try:
        account = Account.from_key("0x" + strip_0x(private_key_hex))
    except (ValueError, TypeError) as exc:
        raise DeployError(f"Wrong private key: {exc}") from exc

    try:
        gas_price = client.suggest_gas_price()
    except RPCError as exc:
        raise _as_deploy_error(exc) from exc

    try:
        nonce = client.pending_nonce_at(account.address)
    except RPCError as exc:
        raise _as_deploy_error(exc) from exc

    try:
        code = decode_hex(contract_data)
    except ValueError as exc:
        raise DeployError(f"Cannot decode contract data: {exc}") from exc

    tx: dict[str, Any] = {
        "nonce": nonce,
        "value": 0,
        "gas": DEPLOY_GAS_LIMIT,
        "gasPrice": gas_price,
        "data": code,
    }
    if chain_id is not None:
        tx["chainId"] = chain_id

    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()
    tx_hash = "0x" + bytes(signed.hash).hex()

    try:
        sent_hash = client.send_raw_transaction(raw_tx)
    except RPCError as exc:
        raise _as_deploy_error(exc) from exc

    if sent_hash and str(sent_hash).lower() != tx_hash:
        logger.warning("Node reported hash %s, expected %s", sent_hash, tx_hash)

    logger.info("Sent contract creation %s from %s (nonce %d)", tx_hash, account.address, nonce)
    return SentTransaction(
        hash=tx_hash,
        raw_transaction=raw_tx,
        sender=account.address,
        nonce=nonce,
        gas=DEPLOY_GAS_LIMIT,
        gas_price=gas_price,
        value=0,
        data="0x" + code.hex(),
    )


def wait_for_receipt(
    client: RPCClient,
    tx: Union[SentTransaction, str],
    cancel: Optional[threading.Event] = None,
    retries: int = RECEIPT_RETRIES,
    delay: float = RECEIPT_DELAY,
) -> dict:
    """
    Poll for a transaction receipt.

    Args:
        client: Connected RPC client
        tx: Sent transaction or its hash
        cancel: Event that aborts the wait when set
        retries: Lookups after the first one before giving up
        delay: Seconds between lookups

    Returns:
        Transaction receipt dict

    Raises:
        ReceiptTimeoutError: If every lookup failed
        WaitCancelledError: If cancel was set
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")
    attempts = retries + 1
    tx_hash = tx.hash if isinstance(tx, SentTransaction) else tx

    last_error: Optional[RPCError] = None
    for attempt in range(1, attempts + 1):
        if cancel is not None and cancel.is_set():
            raise WaitCancelledError(f"Waiting for receipt of {tx_hash} cancelled")

        try:
            receipt = client.transaction_receipt(tx_hash)
        except RPCError as exc:
            last_error = exc
            logger.debug("Receipt attempt %d/%d for %s: %s", attempt, attempts, tx_hash, exc)
        else:
            logger.info("Got receipt for %s after %d attempt(s)", tx_hash, attempt)
            return receipt

        if attempt == attempts:
            break
        if cancel is not None:
            if cancel.wait(delay):
                raise WaitCancelledError(f"Waiting for receipt of {tx_hash} cancelled")
        else:
            time.sleep(delay)

    cause = last_error.__cause__ if isinstance(last_error.__cause__, RPCError) else last_error
    raise ReceiptTimeoutError(f"Cannot get the receipt: {cause}") from last_error
