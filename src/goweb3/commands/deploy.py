"""
Contract deployment and receipt commands.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..keys import PRIVATE_KEY_VAR
from ..rpc.artifacts import build_deploy_data, load_abi, load_bytecode
from ..rpc.client import RPCError
from ..rpc.tx import deploy_contract, wait_for_receipt
from ..utils import from_quantity
from . import echo_json, fail, open_client


def _print_receipt(receipt: dict) -> None:
    status = from_quantity(receipt.get("status"))
    click.echo(f"  Block:    {from_quantity(receipt.get('blockNumber'))}")
    click.echo(f"  Gas used: {from_quantity(receipt.get('gasUsed'))}")
    if receipt.get("contractAddress"):
        click.echo(f"  Contract: {receipt['contractAddress']}")
    if status == 1:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
    elif status == 0:
        click.secho("FAILED: Transaction reverted", fg="red")


@click.command()
@click.argument("bytecode_file", type=click.Path(dir_okay=False), required=False)
@click.option("--data", default=None, help="0x-prefixed creation bytecode")
@click.option("--abi", "abi_file", type=click.Path(dir_okay=False), default=None,
              help="ABI (or artifact) file for constructor args")
@click.option("--arg", "args", multiple=True, help="Constructor argument (repeatable)")
@click.option("--private-key", envvar=PRIVATE_KEY_VAR, default=None,
              help=f"Deployer private key [env: {PRIVATE_KEY_VAR}]")
@click.option("--chain-id", type=int, default=None,
              help="Sign with EIP-155 replay protection for this chain")
@click.option("--wait/--no-wait", default=True, show_default=True,
              help="Wait for the receipt")
@click.pass_context
def deploy(
    ctx: click.Context,
    bytecode_file: Optional[str],
    data: Optional[str],
    abi_file: Optional[str],
    args: tuple[str, ...],
    private_key: Optional[str],
    chain_id: Optional[int],
    wait: bool,
) -> None:
    """
    Deploy a contract.

    Takes creation bytecode from BYTECODE_FILE (.bin or JSON artifact)
    or --data. Gas is paid by the deployer key.
    """
    if bool(bytecode_file) == bool(data):
        fail("Pass exactly one of BYTECODE_FILE or --data")
    if not private_key:
        fail(f"A private key is required: pass --private-key or set {PRIVATE_KEY_VAR}")

    try:
        bytecode = load_bytecode(bytecode_file) if bytecode_file else data
        abi = None
        if args:
            abi_source = abi_file or (bytecode_file if bytecode_file and bytecode_file.endswith(".json") else None)
            if abi_source is None:
                fail("--abi is required with --arg")
            abi = load_abi(abi_source)
        deploy_data = build_deploy_data(bytecode, abi, list(args))
    except (OSError, ValueError) as exc:
        fail(str(exc))

    try:
        with open_client(ctx) as client:
            sent = deploy_contract(client, private_key, deploy_data, chain_id=chain_id)
            click.echo(f"  Sender: {sent.sender}")
            click.echo(f"  TX:     {sent.hash}")
            if not wait:
                return
            click.echo("  Waiting for receipt...")
            receipt = wait_for_receipt(client, sent)
    except RPCError as exc:
        fail(str(exc))

    _print_receipt(receipt)
    if from_quantity(receipt.get("status")) == 0:
        sys.exit(1)


@click.command()
@click.argument("tx_hash", metavar="HASH")
@click.option("--json", "as_json", is_flag=True, help="Print the full receipt as JSON")
@click.pass_context
def receipt(ctx: click.Context, tx_hash: str, as_json: bool) -> None:
    """Wait for the receipt of transaction HASH."""
    try:
        with open_client(ctx) as client:
            result = wait_for_receipt(client, tx_hash)
    except (RPCError, ValueError) as exc:
        fail(str(exc))

    if as_json:
        echo_json(result)
    else:
        _print_receipt(result)
