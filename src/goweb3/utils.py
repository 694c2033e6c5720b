from __future__ import annotations

import re
from typing import Optional, Union

from eth_hash.auto import keccak

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def keccak256(data: bytes) -> bytes:
    return keccak(data)


def strip_0x(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def decode_hex(value: str) -> bytes:
    """Decode 0x-prefixed hex. The prefix is mandatory."""
    if not isinstance(value, str):
        raise ValueError(f"hex string expected, got {type(value).__name__}")
    if value[:2] not in ("0x", "0X"):
        raise ValueError("hex string without 0x prefix")
    body = value[2:]
    if len(body) % 2:
        raise ValueError("hex string of odd length")
    if not _HEX_RE.match(body):
        raise ValueError("invalid hex string")
    return bytes.fromhex(body)


def to_quantity(value: int) -> str:
    if value < 0:
        raise ValueError(f"Negative quantity: {value}")
    return hex(value)


def from_quantity(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return int(value, 16)


def block_param(block_number: Optional[int]) -> str:
    """JSON-RPC block parameter; None selects the latest block."""
    if block_number is None:
        return "latest"
    return to_quantity(block_number)


def _fixed_hex(value: str, size: int, what: str) -> str:
    body = strip_0x(value.strip())
    if len(body) != size * 2 or not _HEX_RE.match(body):
        raise ValueError(f"Invalid {what}: {value!r}")
    return "0x" + body.lower()


def normalize_address(address: str) -> str:
    return _fixed_hex(address, 20, "address")


def normalize_hash(value: Union[str, bytes]) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).hex()
    return _fixed_hex(value, 32, "hash")


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = normalize_address(address)[2:]
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def wei_to_ether(wei: int) -> str:
    whole, frac = divmod(wei, 10**18)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:018d}".rstrip("0")
