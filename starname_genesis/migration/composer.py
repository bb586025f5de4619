"""
Genesis composer: merge converted records into the target genesis, run the
network patch and serialize deterministically.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import Conversion

logger = get_logger(__name__)

Patch = Callable[[dict[str, Any]], None]

GENESIS_RELPATH = Path("config") / "genesis.json"


def _section(genesis: dict[str, Any], *keys: str) -> list[Any]:
    node = genesis
    for key in keys[:-1]:
        node = node.setdefault(key, {})
    if node.get(keys[-1]) is None:
        node[keys[-1]] = []
    return node[keys[-1]]


def compose_genesis(
    genesis: dict[str, Any],
    conversion: Conversion,
    escrows: Mapping[str, dict[str, Any]] | Iterable[dict[str, Any]] = (),
) -> dict[str, Any]:
    """Append accounts (converted, then escrows), names and domains to genesis in place."""
    escrow_accounts = list(escrows.values()) if isinstance(escrows, Mapping) else list(escrows)

    accounts = _section(genesis, "app_state", "auth", "accounts")
    accounts.extend(conversion.accounts)
    accounts.extend(escrow_accounts)
    _section(genesis, "app_state", "starname", "accounts").extend(conversion.starnames)
    _section(genesis, "app_state", "starname", "domains").extend(conversion.domains)

    logger.info(
        "compose_genesis_done",
        accounts=len(conversion.accounts) + len(escrow_accounts),
        starnames=len(conversion.starnames),
        domains=len(conversion.domains),
    )
    return genesis


def apply_patch(genesis: dict[str, Any], patch: Patch | None) -> None:
    if patch is None:
        logger.info("apply_patch_skipped", chain_id=genesis.get("chain_id"))
        return
    patch(genesis)
    logger.info("apply_patch_done", chain_id=genesis.get("chain_id"), patch=patch.__name__)


def stringify(genesis: dict[str, Any]) -> str:
    """Byte-stable JSON: sorted keys, two-space indent, UTF-8 kept as-is, trailing newline."""
    return json.dumps(genesis, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def write_genesis(genesis: dict[str, Any], home: str | Path) -> Path:
    path = Path(home) / GENESIS_RELPATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(stringify(genesis), encoding="utf-8")
    logger.info("write_genesis_done", path=str(path))
    return path


def read_genesis(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)
