"""
Build the starname genesis from the legacy IOV dump.

How to run:
    From project root (with .env configured):
        python -m starname_genesis.tools.build_genesis \
            --dump data/dump.json --genesis data/genesis.base.json \
            --indicatives data/indicatives.json --premiums data/premium.csv \
            --reserveds data/reserveds.csv --flammable iov1... --home ~/.starnamed

Env vars (see config/env.py):
    STARNAME_HOME, STARNAME_BINARY, STARNAME_CHAIN_ID, LEGACY_RPC_URL,
    REQUEST_TIMEOUT, GENTX_TIMEOUT

Without --legacy-genesis the legacy genesis is fetched from LEGACY_RPC_URL.
Exit code 0 on success, 1 on any migration failure (nothing is written).
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from starname_genesis.config import get_settings
from starname_genesis.config.env import load_genesis_env, print_genesis_startup
from starname_genesis.core.exceptions import MigrationError
from starname_genesis.genesis_logging import configure_structlog, get_logger
from starname_genesis.ingestion.datasets import filter_reserveds, read_premiums
from starname_genesis.ingestion.legacy_sources import (
    fetch_legacy_genesis,
    load_dumped_state,
    load_indicatives,
    read_legacy_genesis,
)
from starname_genesis.migration.composer import read_genesis
from starname_genesis.migration.pipeline import MigrationInputs, migrate

logger = get_logger(__name__)

# valid_domain_name of the starname configuration
DEFAULT_RESERVED_PATTERN = r"^[-_a-z0-9]{4,16}$"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrate the legacy IOV dump into a starname genesis.")
    parser.add_argument("--dump", type=Path, required=True, help="Legacy state dump (JSON)")
    parser.add_argument("--legacy-genesis", type=Path, default=None, help="Legacy genesis (JSON); fetched when omitted")
    parser.add_argument("--genesis", type=Path, required=True, help="Base starname genesis to extend (JSON)")
    parser.add_argument("--indicatives", type=Path, required=True, help="Indicative sends (JSON list)")
    parser.add_argument("--premiums", type=Path, default=None, help="Premium holders CSV: iov1,star1,name,...")
    parser.add_argument("--reserveds", type=Path, default=None, help="Reserved names CSV (first column, with header)")
    parser.add_argument("--reserved-pattern", default=DEFAULT_RESERVED_PATTERN, help="Regex a reserved name must match")
    parser.add_argument(
        "--flammable",
        action="append",
        default=[],
        metavar="IOV1",
        help="Legacy address whose balance is burned (repeatable)",
    )
    parser.add_argument("--home", type=Path, default=None, help="Node home (default: STARNAME_HOME)")
    parser.add_argument("--gentxs", type=Path, default=None, help="Directory of validator gentxs")
    parser.add_argument("--chain-id", default=None, help="Override the base genesis chain_id")
    parser.add_argument("--valid-until", default=None, help="Expiry (unix seconds) of migrated names")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_structlog(level=args.log_level)
    load_genesis_env()
    print_genesis_startup("build_genesis")

    settings = get_settings()
    if args.home is not None:
        settings = replace(settings, home=args.home)
    if args.chain_id:
        settings = replace(settings, chain_id=args.chain_id)

    try:
        genesis = read_genesis(args.genesis)
        if args.chain_id:
            genesis["chain_id"] = args.chain_id
        legacy_genesis = (
            read_legacy_genesis(args.legacy_genesis)
            if args.legacy_genesis
            else fetch_legacy_genesis(timeout=settings.request_timeout)
        )
        inputs = MigrationInputs(
            dumped=load_dumped_state(args.dump),
            legacy_genesis=legacy_genesis,
            genesis=genesis,
            indicatives=load_indicatives(args.indicatives),
            premiums=read_premiums(args.premiums) if args.premiums else {},
            reserveds=filter_reserveds(args.reserveds, args.reserved_pattern) if args.reserveds else [],
            flammable=list(args.flammable),
            home=settings.home,
            gentxs=args.gentxs,
            valid_until=args.valid_until,
        )
        migrate(inputs, settings)
    except (MigrationError, OSError, json.JSONDecodeError) as e:
        logger.exception("build_genesis_failed", error=str(e))
        return 1

    logger.info("build_genesis_done", home=str(settings.home), chain_id=genesis.get("chain_id"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
