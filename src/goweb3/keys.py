"""
Private key and environment configuration.

Settings are read from the process environment, after loading
~/.goweb3/.env with python-dotenv. Variables already set in the
environment take precedence over the .env file.

Dependencies: eth-account (signing only, no full web3.py needed)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

GOWEB3_DIR = Path.home() / ".goweb3"
GOWEB3_ENV = GOWEB3_DIR / ".env"

PRIVATE_KEY_VAR = "WEB3_PRIVATE_KEY"
NETWORK_VAR = "WEB3_NETWORK"
RPC_URL_VAR = "WEB3_RPC_URL"


def load_env(env_path: Optional[Path] = None) -> Optional[Path]:
    """
    Load the .env file into the process environment if it exists.

    Returns:
        Path of the loaded file, or None
    """
    env_path = env_path or GOWEB3_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)
        return env_path
    return None


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the private key from the environment or .env file.

    Args:
        env_path: Path to .env file (default: ~/.goweb3/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If WEB3_PRIVATE_KEY is not set
    """
    env_path = env_path or GOWEB3_ENV
    load_env(env_path)

    private_key = os.environ.get(PRIVATE_KEY_VAR)
    if not private_key:
        raise ValueError(
            f"{PRIVATE_KEY_VAR} not found. Pass --private-key or set "
            f"{PRIVATE_KEY_VAR} in {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: Hex private key. If None, loads from the environment.
    """
    if private_key is None:
        private_key = load_private_key()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return Account.from_key(private_key)
