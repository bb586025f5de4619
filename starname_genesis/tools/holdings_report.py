"""
Holdings report: who owns what in a composed genesis, keyed on legacy address.

How to run:
    python -m starname_genesis.tools.holdings_report ~/.starnamed/config/genesis.json > holdings.csv

One CSV row per legacy address: iov1, IOV, uiov, star1, starnames. Addresses
held by the custodian get a row with their custodied IOV and names and an
empty star1. Accounts without a //iov1 tag (consolidated escrows) and
reserved domains are not legacy holdings and are left out.
"""

from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any

import pandas as pd

from starname_genesis.config import get_settings
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.composer import read_genesis
from starname_genesis.migration.models import NO_STAR1_PREFIX, TAG_IOV, TAG_IOV1, custody_micro

logger = get_logger(__name__)

COLUMNS = ["iov1", "IOV", "uiov", "star1", "starnames"]


def build_holdings(
    genesis: dict[str, Any],
    custodian: str,
    exchange: str,
) -> list[dict[str, Any]]:
    app_state = genesis["app_state"]
    iov2coin: dict[str, tuple[Any, int]] = {}
    iov2star: dict[str, str] = {}
    star2iov: dict[str, str] = {}
    custodied: dict[str, list[Any]] = {}

    for account in app_state["auth"]["accounts"]:
        iov1 = account.get(TAG_IOV1)
        if not iov1:
            continue
        star1 = account["value"]["address"]
        coin = account["value"]["coins"][0]
        iov2coin[iov1] = (coin.get(TAG_IOV), int(coin["amount"]))
        iov2star[iov1] = star1
        star2iov[star1] = iov1
        if star1 == custodian:
            custodied = {
                key[len(NO_STAR1_PREFIX):]: list(value)
                for key, value in account.items()
                if key.startswith(NO_STAR1_PREFIX)
            }

    iov2names: dict[str, list[str]] = defaultdict(list)
    for domain in app_state["starname"]["domains"]:
        if domain["admin"] == exchange:
            continue
        iov1 = star2iov.get(domain["admin"])
        if not iov1 and domain.get(TAG_IOV1):
            iov1 = domain[TAG_IOV1]
            iov2star[iov1] = domain["admin"]
        if iov1:
            iov2names[iov1].append(domain["name"])
    for starname in app_state["starname"]["accounts"]:
        iov1 = star2iov.get(starname["owner"])
        if iov1:
            iov2names[iov1].append(f"{starname['name']}*{starname['domain']}")

    rows = []
    for iov1 in dict.fromkeys([*iov2coin, *iov2names]):
        iov, uiov = iov2coin.get(iov1, ("", ""))
        rows.append(
            {
                "iov1": iov1,
                "IOV": iov,
                "uiov": uiov,
                "star1": iov2star.get(iov1, ""),
                "starnames": " ".join(sorted(iov2names.get(iov1, []))),
            }
        )
    for iov1, entries in custodied.items():
        amounts = [e for e in entries if isinstance(e, dict)]
        names = [e for e in entries if isinstance(e, str)]
        rows.append(
            {
                "iov1": iov1,
                "IOV": sum(a["IOV"] for a in amounts) if amounts else "",
                "uiov": sum(custody_micro(a) for a in amounts) if amounts else "",
                "star1": "",
                "starnames": " ".join(names),
            }
        )

    logger.info("build_holdings_done", rows=len(rows), custodied=len(custodied))
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CSV of legacy holdings in a composed starname genesis.")
    parser.add_argument("genesis", type=Path, help="Path to genesis.json")
    args = parser.parse_args(argv)

    if not args.genesis.is_file():
        logger.error("holdings_report_missing_genesis", path=str(args.genesis))
        return 1

    settings = get_settings()
    rows = build_holdings(
        read_genesis(args.genesis),
        custodian=settings.multisigs[settings.custodian_iov1].star1,
        exchange=settings.reservation_admin,
    )
    pd.DataFrame(rows, columns=COLUMNS).to_csv(sys.stdout, index=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
