"""
Loaders for legacy chain data: the state dump, the legacy genesis and the
indicative sends (transfers whose memo claims a star1 address).

Files are read as-is; network sources go through requests with a timeout and
bounded retries. Nothing here transforms data beyond unwrapping and
filtering.
"""

from __future__ import annotations

import json
import re
import time
from pathlib import Path
from typing import Any

import requests

from starname_genesis.config.env import get_explorer_url, get_legacy_rpc_url, get_request_timeout
from starname_genesis.core.exceptions import ExternalToolError, MalformedInputError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.utils.address_utils import RE_STAR1

logger = get_logger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_SEC = 2.0

DUMP_SECTIONS = ("cash", "username", "escrow")


def _read_json(path: str | Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _request_json(method: str, url: str, timeout: float | None = None, **kwargs: Any) -> Any:
    timeout = timeout if timeout is not None else get_request_timeout()
    for attempt in range(MAX_RETRIES):
        try:
            r = requests.request(method, url, timeout=timeout, **kwargs)
            if r.status_code == 429:
                logger.warning("legacy_rate_limited", url=url, attempt=attempt + 1, wait=RETRY_DELAY_SEC)
                time.sleep(RETRY_DELAY_SEC)
                continue
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.warning("legacy_request_error", url=url, attempt=attempt + 1, error=str(e))
            if attempt < MAX_RETRIES - 1:
                time.sleep(RETRY_DELAY_SEC)
    raise ExternalToolError(f"{method} {url} failed after {MAX_RETRIES} attempts.")


def validate_dump(dumped: Any) -> dict[str, Any]:
    if not isinstance(dumped, dict):
        raise MalformedInputError("Dumped state is not a JSON object.")
    for section in DUMP_SECTIONS:
        if not isinstance(dumped.get(section), list):
            raise MalformedInputError(f"Dumped state has no {section!r} list.")
    return dumped


def load_dumped_state(path: str | Path) -> dict[str, Any]:
    dumped = validate_dump(_read_json(path))
    logger.info(
        "load_dumped_state_done",
        path=str(path),
        height=dumped.get("height"),
        **{section: len(dumped[section]) for section in DUMP_SECTIONS},
    )
    return dumped


def unwrap_genesis(document: Any) -> dict[str, Any]:
    """Accept a bare genesis or an RPC response {"result": {"genesis": ...}}."""
    if isinstance(document, dict) and isinstance(document.get("result"), dict):
        document = document["result"].get("genesis")
    if not isinstance(document, dict) or not isinstance(document.get("app_state"), dict):
        raise MalformedInputError("Legacy genesis has no app_state.")
    return document


def read_legacy_genesis(path: str | Path) -> dict[str, Any]:
    return unwrap_genesis(_read_json(path))


def fetch_legacy_genesis(url: str | None = None, timeout: float | None = None) -> dict[str, Any]:
    url = url or get_legacy_rpc_url()
    genesis = unwrap_genesis(_request_json("GET", url, timeout=timeout))
    logger.info("fetch_legacy_genesis_done", url=url, chain_id=genesis.get("chain_id"))
    return genesis


def fetch_sends_to(recipient: str, url: str | None = None, timeout: float | None = None) -> list[dict[str, Any]]:
    """All sends to recipient, oldest block first."""
    url = url or get_explorer_url()
    txs = _request_json(
        "POST",
        url,
        timeout=timeout,
        data={"Destination": recipient},
        headers={"accept": "*/*", "content-type": "application/x-www-form-urlencoded"},
    )
    sends = [tx for tx in txs or [] if tx["message"]["details"].get("destination") == recipient]
    sends.sort(key=lambda tx: tx.get("block_height") or 0)
    logger.info("fetch_sends_to_done", recipient=recipient, sends=len(sends))
    return sends


def fetch_indicative_sends_to(
    recipient: str,
    pattern: str | re.Pattern[str] = RE_STAR1,
    url: str | None = None,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """Sends to recipient whose memo matches pattern (a star1 address by default)."""
    memo_re = re.compile(pattern) if isinstance(pattern, str) else pattern
    return [
        tx
        for tx in fetch_sends_to(recipient, url=url, timeout=timeout)
        if memo_re.search(tx["message"]["details"].get("memo") or "")
    ]


def load_indicatives(path: str | Path) -> list[dict[str, Any]]:
    """Indicative sends saved from fetch_indicative_sends_to()."""
    indicatives = _read_json(path)
    if not isinstance(indicatives, list):
        raise MalformedInputError(f"Indicatives file {path} is not a JSON list.")
    return indicatives
