"""
Data models shared by the migration stages.

Legacy dump records and the target genesis stay plain JSON dicts (they are
read from and written back to JSON verbatim); the registries and datasets
that drive the migration are typed here. Amount helpers keep every persisted
amount in exact integer micro-units.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

ACCOUNT_TYPE = "cosmos-sdk/Account"

# weave fractional units per whole token, cosmos-sdk micro-units per whole token
FRACTIONAL_PER_WHOLE = 10**9
MICRO_PER_WHOLE = 10**6
FRACTIONAL_PER_MICRO = FRACTIONAL_PER_WHOLE // MICRO_PER_WHOLE

# Debug/provenance tag keys
TAG_ID = "//id"
TAG_IOV1 = "//iov1"
TAG_ALIAS = "//alias"
TAG_NOTE = "//note"
TAG_IOV = "//IOV"
NO_STAR1_PREFIX = "//no star1 "
RECOVERED_PREFIX = "//recovered "


@dataclass(frozen=True)
class MultisigAccount:
    """
    Legacy multisig (or governance) account with a pre-agreed new address.

    name: human label, copied into the //id tag.
    cond: legacy condition address (cond:multisig/usage/...), kept as //alias.
    star1: new-scheme address the balance migrates to.
    """

    name: str
    cond: str
    star1: str


@dataclass(frozen=True)
class EscrowTarget:
    """New-scheme account that receives every escrow of one legacy source."""

    label: str
    star1: str


@dataclass
class Premium:
    """Premium starname holder: optional claimed new address and domain names."""

    star1: str = ""
    starnames: list[str] = field(default_factory=list)


@dataclass
class Conversion:
    """Output of the account/name converter, ready to append to a genesis."""

    accounts: list[dict[str, Any]] = field(default_factory=list)
    starnames: list[dict[str, Any]] = field(default_factory=list)
    domains: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "accounts": self.accounts,
            "starnames": self.starnames,
            "domains": self.domains,
        }


def coin_to_micro(coin: dict[str, Any]) -> int:
    """Exact micro-unit amount of a weave coin {whole, fractional}."""
    whole = int(coin.get("whole") or 0)
    fractional = int(coin.get("fractional") or 0)
    return whole * MICRO_PER_WHOLE + fractional // FRACTIONAL_PER_MICRO


def coin_to_float(coin: dict[str, Any]) -> float:
    """Human-readable token amount; audit tags only."""
    return (coin.get("whole") or 0) + (coin.get("fractional") or 0) / FRACTIONAL_PER_WHOLE


def wallet_micro(wallet: dict[str, Any], ticker: str = "IOV") -> int:
    """Sum of a wallet's coins of the given ticker, in micro-units."""
    return sum(coin_to_micro(c) for c in wallet.get("coins") or [] if c.get("ticker", ticker) == ticker)


def wallet_float(wallet: dict[str, Any], ticker: str = "IOV") -> float:
    return sum(coin_to_float(c) for c in wallet.get("coins") or [] if c.get("ticker", ticker) == ticker)


def create_account(
    address: str = "",
    micro: int = 0,
    iov: float | None = None,
    denom: str = "uiov",
    id: Any = None,
    iov1: str | None = None,
) -> dict[str, Any]:
    """Build a cosmos-sdk account; amount is always an integer string."""
    coin: dict[str, Any] = {"denom": denom, "amount": str(int(micro))}
    if iov is not None:
        coin[TAG_IOV] = iov
    account: dict[str, Any] = {
        "type": ACCOUNT_TYPE,
        "value": {
            "address": address,
            "coins": [coin],
            "public_key": None,
            "account_number": "0",
            "sequence": "0",
        },
    }
    if id is not None:
        account[TAG_ID] = id
    if iov1:
        account[TAG_IOV1] = iov1
    return account


def account_micro(account: dict[str, Any]) -> int:
    return int(account["value"]["coins"][0]["amount"])


def add_account_micro(account: dict[str, Any], micro: int) -> None:
    """Add (or with a negative value, remove) micro-units on an account's first coin."""
    coin = account["value"]["coins"][0]
    coin["amount"] = str(int(coin["amount"]) + micro)


def format_micro(micro: int) -> str:
    """Micro-units as a plain decimal token string: 2347987000000 -> '2347987', 26500000 -> '26.5'."""
    return format(Decimal(int(micro)).scaleb(-6).normalize(), "f")


def custody_amount(micro: int, iov: float) -> dict[str, Any]:
    """Custodian provenance entry for a swept balance: exact uiov plus the audit IOV float."""
    return {"IOV": iov, "uiov": micro}


def custody_micro(entry: dict[str, Any]) -> int:
    return int(entry["uiov"])
