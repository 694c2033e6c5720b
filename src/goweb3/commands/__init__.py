"""
CLI command implementations.

Shared helpers for turning the group options into a connected client
and for printing results.
"""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click

from ..rpc.client import RPCClient, get_client
from ..rpc.networks import resolve_rpc_url


def fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def open_client(ctx: click.Context) -> RPCClient:
    """Connect to the node selected by --rpc-url / --network."""
    obj = ctx.find_root().obj or {}
    try:
        url = resolve_rpc_url(obj.get("rpc_url"), obj.get("network"))
        return get_client(url)
    except (ValueError, RuntimeError) as exc:
        fail(str(exc))


def echo_json(value: Any) -> None:
    click.echo(json.dumps(value, indent=2, sort_keys=True, default=str))
