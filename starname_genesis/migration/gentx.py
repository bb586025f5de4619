"""
Gentx incorporator: run the chain binary's collect-gentxs against the written
genesis, then normalize its output.

The binary leaves node keys and default configs behind in home; they are
removed so a re-run starts from the same state.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from pathlib import Path

from starname_genesis.core.exceptions import ExternalToolError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.composer import GENESIS_RELPATH, read_genesis, write_genesis

logger = get_logger(__name__)

FAILURE_RE = re.compile(r"\b(error|panic)\b", re.IGNORECASE)

SCAFFOLD_FILES = (
    Path("config") / "node_key.json",
    Path("config") / "priv_validator_key.json",
    Path("config") / "app.toml",
    Path("config") / "config.toml",
)
SCAFFOLD_DIRS = (Path("data"),)


def has_gentxs(gentxs: str | Path | None) -> bool:
    if not gentxs:
        return False
    path = Path(gentxs)
    return path.is_dir() and any(path.iterdir())


def remove_scaffolding(home: str | Path) -> None:
    home = Path(home)
    for rel in SCAFFOLD_FILES:
        (home / rel).unlink(missing_ok=True)
    for rel in SCAFFOLD_DIRS:
        shutil.rmtree(home / rel, ignore_errors=True)


def add_gentxs(
    gentxs: str | Path | None,
    home: str | Path,
    binary: str = "starnamed",
    timeout: float = 300.0,
) -> bool:
    """
    Collect the gentxs in directory gentxs into home/config/genesis.json.

    Returns False (and does nothing) when gentxs is unset, missing or empty.
    Raises ExternalToolError when the binary can't run, times out, exits
    non-zero or reports an error/panic.
    """
    if not has_gentxs(gentxs):
        logger.info("add_gentxs_skipped", gentxs=str(gentxs) if gentxs else None)
        return False

    home = Path(home)
    cmd = [binary, "collect-gentxs", "--home", str(home), "--gentx-dir", str(gentxs)]
    logger.info("gentx_collect_start", cmd=" ".join(cmd), timeout=timeout)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise ExternalToolError(f"Chain binary {binary!r} not found.") from e
    except subprocess.TimeoutExpired as e:
        logger.error("gentx_collect_timeout", timeout=timeout)
        raise ExternalToolError(f"{binary} collect-gentxs timed out after {timeout}s.") from e

    output = (result.stdout or "") + (result.stderr or "")
    if result.returncode != 0 or FAILURE_RE.search(output):
        logger.error("gentx_collect_failed", returncode=result.returncode, output=output[-2000:])
        raise ExternalToolError(f"{binary} collect-gentxs failed (exit {result.returncode}).", output)

    remove_scaffolding(home)

    # collect-gentxs rewrites genesis.json in its own format
    genesis = read_genesis(home / GENESIS_RELPATH)
    write_genesis(genesis, home)
    logger.info("add_gentxs_done", gentxs=str(gentxs), home=str(home))
    return True
