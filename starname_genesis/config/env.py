"""
Environment variable loading for starname-genesis.

- STARNAME_HOME: node home; genesis is written to $STARNAME_HOME/config/genesis.json
- STARNAME_BINARY: chain binary used to collect gentxs (default: starnamed)
- STARNAME_CHAIN_ID: chain id of the target genesis (selects the network patch)
- LEGACY_EXPLORER_URL: legacy explorer tx query endpoint (indicative sends)
- LEGACY_RPC_URL: legacy chain RPC genesis endpoint
- REQUEST_TIMEOUT / GENTX_TIMEOUT: seconds
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is starname_genesis/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_HOME = Path.home() / ".starnamed"
DEFAULT_BINARY = "starnamed"
DEFAULT_CHAIN_ID = "iov-mainnet-2"
DEFAULT_EXPLORER_URL = "https://explorer-api.cluster-mainnet.iov.one/api/txs/query"
DEFAULT_LEGACY_RPC_URL = "https://rpc-private-a-vip-mainnet.iov.one/genesis"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_GENTX_TIMEOUT = 300.0


def load_genesis_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_home() -> Path:
    """Return STARNAME_HOME or ~/.starnamed."""
    load_genesis_env()
    raw = (os.getenv("STARNAME_HOME") or "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_HOME


def get_binary() -> str:
    """Return the chain binary name/path used for collect-gentxs."""
    load_genesis_env()
    return (os.getenv("STARNAME_BINARY") or "").strip() or DEFAULT_BINARY


def get_chain_id() -> str:
    """Return STARNAME_CHAIN_ID. Default: iov-mainnet-2."""
    load_genesis_env()
    return (os.getenv("STARNAME_CHAIN_ID") or "").strip() or DEFAULT_CHAIN_ID


def get_explorer_url() -> str:
    load_genesis_env()
    return (os.getenv("LEGACY_EXPLORER_URL") or "").strip() or DEFAULT_EXPLORER_URL


def get_legacy_rpc_url() -> str:
    load_genesis_env()
    return (os.getenv("LEGACY_RPC_URL") or "").strip() or DEFAULT_LEGACY_RPC_URL


def get_request_timeout() -> float:
    """Seconds allowed per HTTP request to the legacy chain."""
    load_genesis_env()
    return _float_env("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)


def get_gentx_timeout() -> float:
    """Seconds allowed for the chain binary's collect-gentxs run."""
    load_genesis_env()
    return _float_env("GENTX_TIMEOUT", DEFAULT_GENTX_TIMEOUT)


def print_genesis_startup(script_name: str) -> None:
    """Print chain id, home and binary at script start."""
    load_genesis_env()
    print(f"[starname-genesis] {script_name} | chain_id={get_chain_id()} | home={get_home()} | binary={get_binary()}")
