"""
goweb3 CLI

Command-line interface for GoChain and Ethereum-compatible JSON-RPC nodes.

Commands:
  networks  - List known networks and their RPC URLs
  balance   - Show the balance of an address
  code      - Show the contract code at an address
  block     - Show a block
  tx        - Show a transaction
  id        - Show network ID, chain ID and genesis hash
  snapshot  - Show the clique signer snapshot
  deploy    - Deploy a contract
  receipt   - Wait for a transaction receipt
  whoami    - Show the address of the configured key
"""

from __future__ import annotations

import logging

import click

from . import __version__
from .commands import fail
from .keys import NETWORK_VAR, RPC_URL_VAR, get_account, load_env, load_private_key
from .rpc.networks import NETWORKS


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="goweb3")
@click.option(
    "--network",
    "-n",
    envvar=NETWORK_VAR,
    default="mainnet",
    show_default=True,
    help="Network name (see 'goweb3 networks')",
)
@click.option(
    "--rpc-url",
    envvar=RPC_URL_VAR,
    default=None,
    help="RPC URL (overrides --network)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic")
@click.pass_context
def cli(ctx: click.Context, network: str, rpc_url: str, verbose: bool) -> None:
    """goweb3 - talk to GoChain and Ethereum nodes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["network"] = network
    ctx.obj["rpc_url"] = rpc_url
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.query import balance, block, code, chain_id, snapshot, tx
from .commands.deploy import deploy, receipt

cli.add_command(balance)
cli.add_command(code)
cli.add_command(block)
cli.add_command(tx)
cli.add_command(chain_id)
cli.add_command(snapshot)
cli.add_command(deploy)
cli.add_command(receipt)


@cli.command()
def networks() -> None:
    """List known networks."""
    width = max(len(name) for name in NETWORKS)
    for name, url in NETWORKS.items():
        click.echo(f"  {name.ljust(width)}  {url}")


@cli.command()
def whoami() -> None:
    """Show the address of the configured private key."""
    try:
        account = get_account(load_private_key())
    except ValueError as exc:
        fail(str(exc))
    click.echo(f"Address: {account.address}")


# ============ Entry Points ============


def main() -> None:
    """goweb3 CLI entry point."""
    load_env()
    cli()


if __name__ == "__main__":
    main()
