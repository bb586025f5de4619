"""
Auxiliary CSV datasets: premium starname holders and reserved domain names.
"""

from __future__ import annotations

import csv
import re
from pathlib import Path

import pandas as pd

from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import Premium
from starname_genesis.utils.address_utils import is_star1

logger = get_logger(__name__)


def read_premiums(path: str | Path) -> dict[str, Premium]:
    """
    Premium holders, keyed on iov1.

    Rows are "iov1,star1,name,name,...". The second cell is the new address
    only when it is a star1; any other non-empty second cell is a name.
    Rows with the same iov1 are merged, blank lines are ignored.
    """
    premiums: dict[str, Premium] = {}
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.reader(f):
            cells = [c.strip() for c in row]
            if not cells or not cells[0]:
                continue
            iov1, rest = cells[0], cells[1:]
            premium = premiums.setdefault(iov1, Premium())
            if rest and is_star1(rest[0]):
                if not premium.star1:
                    premium.star1 = rest[0]
                rest = rest[1:]
            premium.starnames.extend(n for n in rest if n)
    logger.info(
        "read_premiums_done",
        path=str(path),
        holders=len(premiums),
        starnames=sum(len(p.starnames) for p in premiums.values()),
    )
    return premiums


def filter_reserveds(path: str | Path, pattern: str) -> list[str]:
    """Lower-cased first column of the reserved CSV (header skipped), kept when pattern matches."""
    df = pd.read_csv(path, usecols=[0], dtype=str, keep_default_na=False, skip_blank_lines=True)
    domain_re = re.compile(pattern)
    names = df.iloc[:, 0].str.strip().str.lower()
    reserveds = [name for name in names if name and domain_re.search(name)]
    logger.info("filter_reserveds_done", path=str(path), rows=len(df), kept=len(reserveds))
    return reserveds
