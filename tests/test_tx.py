"""Tests for contract deployment and receipt polling."""

from __future__ import annotations

import threading

import pytest
from eth_account import Account

from conftest import ADDRESS, PRIVATE_KEY, TX_HASH, FakeNode
from goweb3.rpc.client import RPCClient
from goweb3.rpc.tx import (
    DEPLOY_GAS_LIMIT,
    DeployError,
    ReceiptTimeoutError,
    SentTransaction,
    WaitCancelledError,
    deploy_contract,
    wait_for_receipt,
)
from goweb3.utils import keccak256

CONTRACT_DATA = "0x6080604052348015600f57600080fd5b50"
RECEIPT = {"transactionHash": TX_HASH, "status": "0x1", "contractAddress": "0x" + "cd" * 20}


@pytest.fixture()
def deploy_node(node: FakeNode) -> FakeNode:
    node.results["eth_gasPrice"] = hex(2_000_000_000)
    node.results["eth_getTransactionCount"] = "0x3"
    node.results["eth_sendRawTransaction"] = lambda params: (
        "0x" + keccak256(bytes.fromhex(params[0][2:])).hex()
    )
    return node


class TestDeployContract:
    """Tests for deploy_contract."""

    def test_signs_and_sends(self, client: RPCClient, deploy_node: FakeNode) -> None:
        sent = deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)

        assert deploy_node.methods() == [
            "eth_gasPrice",
            "eth_getTransactionCount",
            "eth_sendRawTransaction",
        ]
        assert deploy_node.calls[1][1] == [ADDRESS.lower(), "pending"]
        assert deploy_node.calls[2][1] == [sent.raw_transaction]

        assert sent.sender == ADDRESS
        assert sent.nonce == 3
        assert sent.gas == DEPLOY_GAS_LIMIT == 2_000_000
        assert sent.gas_price == 2_000_000_000
        assert sent.value == 0
        assert sent.data == CONTRACT_DATA
        assert Account.recover_transaction(sent.raw_transaction) == ADDRESS
        assert sent.hash == "0x" + keccak256(bytes.fromhex(sent.raw_transaction[2:])).hex()

    def test_key_without_prefix(self, client: RPCClient, deploy_node: FakeNode) -> None:
        sent = deploy_contract(client, PRIVATE_KEY[2:], CONTRACT_DATA)
        assert sent.sender == ADDRESS

    def test_eip155_chain_id(self, client: RPCClient, deploy_node: FakeNode) -> None:
        homestead = deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)
        protected = deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA, chain_id=60)

        assert protected.raw_transaction != homestead.raw_transaction
        assert Account.recover_transaction(protected.raw_transaction) == ADDRESS

    def test_wrong_private_key(self, client: RPCClient, deploy_node: FakeNode) -> None:
        with pytest.raises(DeployError, match="^Wrong private key: "):
            deploy_contract(client, "0x1234", CONTRACT_DATA)
        assert deploy_node.calls == []

    def test_gas_price_failure(self, client: RPCClient, deploy_node: FakeNode) -> None:
        deploy_node.errors["eth_gasPrice"] = {"code": -32000, "message": "boom"}
        with pytest.raises(DeployError, match="^Cannot get gas price: boom$"):
            deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)

    def test_null_gas_price(self, client: RPCClient, deploy_node: FakeNode) -> None:
        deploy_node.results["eth_gasPrice"] = None
        with pytest.raises(DeployError, match="^Cannot get gas price: invalid result None$"):
            deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)
        assert "eth_sendRawTransaction" not in deploy_node.methods()

    def test_malformed_nonce(self, client: RPCClient, deploy_node: FakeNode) -> None:
        deploy_node.results["eth_getTransactionCount"] = "seven"
        with pytest.raises(DeployError, match="^Cannot get nonce: invalid result 'seven'"):
            deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)
        assert "eth_sendRawTransaction" not in deploy_node.methods()

    def test_non_hex_private_key(self, client: RPCClient, deploy_node: FakeNode) -> None:
        with pytest.raises(DeployError, match="^Wrong private key: "):
            deploy_contract(client, "0x" + "zz" * 32, CONTRACT_DATA)

    def test_nonce_failure(self, client: RPCClient, deploy_node: FakeNode) -> None:
        deploy_node.errors["eth_getTransactionCount"] = {"code": -32000, "message": "boom"}
        with pytest.raises(DeployError, match="^Cannot get nonce: "):
            deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)

    def test_bad_contract_data(self, client: RPCClient, deploy_node: FakeNode) -> None:
        with pytest.raises(DeployError, match="^Cannot decode contract data: "):
            deploy_contract(client, PRIVATE_KEY, "6080")
        assert "eth_sendRawTransaction" not in deploy_node.methods()

    def test_send_failure(self, client: RPCClient, deploy_node: FakeNode) -> None:
        deploy_node.errors["eth_sendRawTransaction"] = {
            "code": -32000,
            "message": "insufficient funds for gas * price + value",
        }
        with pytest.raises(DeployError, match="^Cannot send transaction: insufficient funds"):
            deploy_contract(client, PRIVATE_KEY, CONTRACT_DATA)


class TestWaitForReceipt:
    """Tests for wait_for_receipt."""

    @pytest.fixture(autouse=True)
    def no_sleep(self, monkeypatch: pytest.MonkeyPatch) -> list[float]:
        sleeps: list[float] = []
        monkeypatch.setattr("goweb3.rpc.tx.time.sleep", sleeps.append)
        return sleeps

    def test_immediate(self, client: RPCClient, node: FakeNode, no_sleep: list[float]) -> None:
        node.results["eth_getTransactionReceipt"] = RECEIPT
        assert wait_for_receipt(client, TX_HASH) == RECEIPT
        assert no_sleep == []

    def test_succeeds_after_retries(
        self, client: RPCClient, node: FakeNode, no_sleep: list[float]
    ) -> None:
        answers = [None, None, RECEIPT]
        node.results["eth_getTransactionReceipt"] = lambda params: answers.pop(0)

        assert wait_for_receipt(client, TX_HASH) == RECEIPT
        assert node.methods().count("eth_getTransactionReceipt") == 3
        assert no_sleep == [2.0, 2.0]

    def test_gives_up_after_five_retries(
        self, client: RPCClient, node: FakeNode, no_sleep: list[float]
    ) -> None:
        node.results["eth_getTransactionReceipt"] = None

        with pytest.raises(ReceiptTimeoutError, match="^Cannot get the receipt: .*not found"):
            wait_for_receipt(client, TX_HASH)

        assert node.methods().count("eth_getTransactionReceipt") == 6
        assert no_sleep == [2.0] * 5

    def test_node_errors_are_retried(
        self, client: RPCClient, node: FakeNode, no_sleep: list[float]
    ) -> None:
        node.errors["eth_getTransactionReceipt"] = {"code": -32000, "message": "busy"}
        with pytest.raises(ReceiptTimeoutError, match="busy"):
            wait_for_receipt(client, TX_HASH, retries=1, delay=0.5)
        assert no_sleep == [0.5]

    def test_accepts_sent_transaction(self, client: RPCClient, node: FakeNode) -> None:
        node.results["eth_getTransactionReceipt"] = RECEIPT
        sent = SentTransaction(
            hash=TX_HASH,
            raw_transaction="0x",
            sender=ADDRESS,
            nonce=0,
            gas=DEPLOY_GAS_LIMIT,
            gas_price=1,
            value=0,
            data="0x",
        )
        wait_for_receipt(client, sent)
        assert node.calls == [("eth_getTransactionReceipt", [TX_HASH])]

    def test_cancelled_before_start(self, client: RPCClient, node: FakeNode) -> None:
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(WaitCancelledError):
            wait_for_receipt(client, TX_HASH, cancel=cancel)
        assert node.calls == []

    def test_cancelled_while_waiting(self, client: RPCClient, node: FakeNode) -> None:
        cancel = threading.Event()

        def not_yet(params: list) -> None:
            cancel.set()
            return None

        node.results["eth_getTransactionReceipt"] = not_yet

        with pytest.raises(WaitCancelledError):
            wait_for_receipt(client, TX_HASH, cancel=cancel, delay=30.0)
        assert node.methods().count("eth_getTransactionReceipt") == 1

    def test_cancel_event_not_set(self, client: RPCClient, node: FakeNode) -> None:
        answers = [None, RECEIPT]
        node.results["eth_getTransactionReceipt"] = lambda params: answers.pop(0)
        assert wait_for_receipt(client, TX_HASH, cancel=threading.Event(), delay=0.01) == RECEIPT

    def test_retries_must_not_be_negative(self, client: RPCClient) -> None:
        with pytest.raises(ValueError):
            wait_for_receipt(client, TX_HASH, retries=-1)

    def test_no_retries(
        self, client: RPCClient, node: FakeNode, no_sleep: list[float]
    ) -> None:
        node.results["eth_getTransactionReceipt"] = None
        with pytest.raises(ReceiptTimeoutError):
            wait_for_receipt(client, TX_HASH, retries=0)
        assert node.methods().count("eth_getTransactionReceipt") == 1
        assert no_sleep == []
