"""
Read-only queries against a node.

Thin wrappers over the RPCClient accessors: balance, code, block,
transaction, chain identity and clique snapshot.
"""

from __future__ import annotations

from typing import Optional

import click

from ..rpc.client import RPCError
from ..utils import from_quantity, to_checksum_address, wei_to_ether
from . import echo_json, fail, open_client

block_option = click.option(
    "--block", "block_number", type=int, default=None, help="Block number (default: latest)"
)


@click.command()
@click.argument("address")
@block_option
@click.option("--ether", is_flag=True, help="Show the balance in ether instead of wei")
@click.pass_context
def balance(ctx: click.Context, address: str, block_number: Optional[int], ether: bool) -> None:
    """Show the balance of ADDRESS."""
    try:
        with open_client(ctx) as client:
            wei = client.get_balance(address, block_number)
    except (RPCError, ValueError) as exc:
        fail(str(exc))

    if ether:
        click.echo(f"{wei_to_ether(wei)} ETH")
    else:
        click.echo(str(wei))


@click.command()
@click.argument("address")
@block_option
@click.pass_context
def code(ctx: click.Context, address: str, block_number: Optional[int]) -> None:
    """Show the contract code deployed at ADDRESS."""
    try:
        with open_client(ctx) as client:
            runtime = client.get_code(address, block_number)
    except (RPCError, ValueError) as exc:
        fail(str(exc))

    if not runtime:
        click.echo(f"No code at {to_checksum_address(address)}")
        return
    click.echo("0x" + runtime.hex())


@click.command()
@click.argument("number", type=int, required=False)
@click.option("--json", "as_json", is_flag=True, help="Print the full block as JSON")
@click.pass_context
def block(ctx: click.Context, number: Optional[int], as_json: bool) -> None:
    """Show block NUMBER (default: latest)."""
    try:
        with open_client(ctx) as client:
            result = client.get_block_by_number(number)
    except (RPCError, ValueError) as exc:
        fail(str(exc))

    if as_json:
        echo_json(result)
        return

    click.echo(f"  Number:       {from_quantity(result.get('number'))}")
    click.echo(f"  Hash:         {result.get('hash')}")
    click.echo(f"  Parent:       {result.get('parentHash')}")
    click.echo(f"  Timestamp:    {from_quantity(result.get('timestamp'))}")
    click.echo(f"  Miner:        {result.get('miner')}")
    click.echo(f"  Gas used:     {from_quantity(result.get('gasUsed'))}")
    click.echo(f"  Transactions: {len(result.get('transactions') or [])}")


@click.command()
@click.argument("tx_hash", metavar="HASH")
@click.pass_context
def tx(ctx: click.Context, tx_hash: str) -> None:
    """Show transaction HASH."""
    try:
        with open_client(ctx) as client:
            result, pending = client.get_transaction_by_hash(tx_hash)
    except (RPCError, ValueError) as exc:
        fail(str(exc))

    echo_json(result)
    if pending:
        click.secho("  (pending)", fg="yellow")


@click.command("id")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def chain_id(ctx: click.Context, as_json: bool) -> None:
    """Show network ID, chain ID and genesis hash."""
    with open_client(ctx) as client:
        identity = client.get_id()

    if as_json:
        echo_json(identity.to_dict())
        return

    click.echo(f"  Network ID:   {identity.network_id if identity.network_id is not None else '(unknown)'}")
    click.echo(f"  Chain ID:     {identity.chain_id if identity.chain_id is not None else '(unknown)'}")
    click.echo(f"  Genesis hash: {identity.genesis_hash or '(unknown)'}")


@click.command()
@click.pass_context
def snapshot(ctx: click.Context) -> None:
    """Show the clique signer snapshot at the latest block."""
    try:
        with open_client(ctx) as client:
            result = client.get_snapshot()
    except RPCError as exc:
        fail(str(exc))

    echo_json(result)
