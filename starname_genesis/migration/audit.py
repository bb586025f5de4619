"""
Supply audit: new accounts plus explicit burns must add up to the dump's
original supply, in exact micro-units.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from starname_genesis.core.exceptions import SupplyMismatchError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import format_micro, wallet_micro

logger = get_logger(__name__)


@dataclass
class SupplyReport:
    original: int
    accounts: int
    burned: int

    @property
    def delta(self) -> int:
        """Micro-units created (positive) or lost (negative) by the migration."""
        return self.accounts + self.burned - self.original

    @property
    def balanced(self) -> bool:
        return self.delta == 0

    def check(self) -> None:
        if not self.balanced:
            raise SupplyMismatchError(
                f"Supply not conserved: accounts {format_micro(self.accounts)} + burned "
                f"{format_micro(self.burned)} != original {format_micro(self.original)} "
                f"(delta {format_micro(self.delta)})."
            )


def total_legacy_supply(wallets: Iterable[dict[str, Any]], ticker: str = "IOV") -> int:
    """Micro-unit total of legacy wallets (a dump's cash, or a list of burned wallets)."""
    return sum(wallet_micro(w, ticker) for w in wallets)


def total_account_supply(accounts: Iterable[dict[str, Any]], denom: str = "uiov") -> int:
    return sum(
        int(coin["amount"])
        for account in accounts
        for coin in account["value"]["coins"]
        if coin.get("denom") == denom
    )


def audit_supply(
    original: int,
    accounts: Iterable[dict[str, Any]],
    burned: Iterable[dict[str, Any]],
    denom: str = "uiov",
    ticker: str = "IOV",
) -> SupplyReport:
    """Build the conservation report; call .check() to enforce it."""
    report = SupplyReport(
        original=original,
        accounts=total_account_supply(accounts, denom),
        burned=total_legacy_supply(burned, ticker),
    )
    log = logger.info if report.balanced else logger.error
    log(
        "audit_supply",
        original=str(report.original),
        accounts=str(report.accounts),
        burned=str(report.burned),
        delta=str(report.delta),
    )
    return report
