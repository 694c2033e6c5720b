"""
Contract artifact loading.

Reads creation bytecode from compiler output: a plain hex file (solc --bin)
or a JSON artifact from solc / Foundry / Hardhat.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from eth_abi import encode
from eth_abi.exceptions import EncodingError

from ..utils import decode_hex, strip_0x


def _read_artifact(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)
    if not isinstance(artifact, dict):
        raise ValueError(f"Not a contract artifact: {path}")
    return artifact


def load_bytecode(path: Union[str, Path]) -> str:
    """
    Load creation bytecode from a compiled contract.

    Args:
        path: .bin/.hex text file or .json artifact

    Returns:
        0x-prefixed hex bytecode

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If no valid bytecode is found
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bytecode not found: {path}")

    if path.suffix == ".json":
        bytecode = _read_artifact(path).get("bytecode", "")
        # Foundry nests it: {"bytecode": {"object": "0x..."}}
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object", "")
    else:
        bytecode = path.read_text(encoding="utf-8").strip()

    if not bytecode or not strip_0x(bytecode):
        raise ValueError(f"No bytecode in {path}")

    bytecode = "0x" + strip_0x(bytecode)
    decode_hex(bytecode)
    return bytecode


def load_abi(path: Union[str, Path]) -> list[dict[str, Any]]:
    """Load an ABI from a .abi/.json file (bare list or artifact with "abi")."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ABI not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ValueError(f"No ABI in {path}")
    return data


def _coerce_arg(abi_type: str, value: Any) -> Any:
    """Convert a command-line string into the Python value eth-abi expects."""
    if not isinstance(value, str):
        return value
    if abi_type.endswith("]"):
        items = json.loads(value)
        inner = abi_type[: abi_type.rindex("[")]
        return [_coerce_arg(inner, item) for item in items]
    if abi_type.startswith(("uint", "int")):
        return int(value, 0)
    if abi_type == "bool":
        return value.lower() in ("1", "true", "yes")
    if abi_type == "bytes" or abi_type.startswith("bytes"):
        return decode_hex(value)
    return value


def encode_constructor_args(
    abi: list[dict[str, Any]], args: Optional[Sequence[Any]] = None
) -> str:
    """
    ABI-encode constructor arguments.

    Returns:
        Hex without 0x, ready to append to the bytecode ("" when there are no args)
    """
    if not args:
        return ""

    constructor = None
    for entry in abi:
        if entry.get("type") == "constructor":
            constructor = entry
            break

    if constructor is None:
        raise ValueError("Constructor not found in ABI, but constructor args were provided.")

    input_types = [inp["type"] for inp in constructor.get("inputs", [])]
    if len(input_types) != len(args):
        raise ValueError(
            f"Constructor takes {len(input_types)} argument(s), got {len(args)}"
        )
    values = [_coerce_arg(t, a) for t, a in zip(input_types, args)]
    try:
        return encode(input_types, values).hex()
    except EncodingError as exc:
        raise ValueError(f"Cannot encode constructor args: {exc}") from exc


def build_deploy_data(
    bytecode: str,
    abi: Optional[list[dict[str, Any]]] = None,
    args: Optional[Sequence[Any]] = None,
) -> str:
    """Bytecode with ABI-encoded constructor args appended."""
    deploy_data = "0x" + strip_0x(bytecode)
    if args:
        if abi is None:
            raise ValueError("An ABI is required to encode constructor arguments")
        deploy_data += encode_constructor_args(abi, args)
    return deploy_data
