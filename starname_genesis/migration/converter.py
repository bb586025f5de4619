"""
Account/name converter: turn the normalized dump into cosmos-sdk accounts,
starname name records and domain records.

Order matters and is fixed:
  1. multisig wallets -> accounts at their registry address (wallets burned)
  2. remaining wallets, by descending balance -> accounts, or folded into the
     custodian when the owner has no star1 address
  3. username bindings, by name -> name records (custodian fallback)
  4. premium starnames -> closed domains (custodian fallback)
  5. reserved names not claimed as premium -> domains held by the
     reservation admin, released round-robin over the release dates

Everything routed to the custodian is recorded on the custodian account
under "//no star1 <iov1>" as a list of swept amounts ({"IOV", "uiov"}) and
starnames.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from starname_genesis.core.exceptions import NotFoundError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import (
    MICRO_PER_WHOLE,
    NO_STAR1_PREFIX,
    TAG_ALIAS,
    TAG_ID,
    TAG_IOV,
    TAG_IOV1,
    Conversion,
    MultisigAccount,
    Premium,
    account_micro,
    add_account_micro,
    create_account,
    custody_amount,
    wallet_float,
    wallet_micro,
)
from starname_genesis.migration.normalizer import burn_tokens, find_wallet
from starname_genesis.utils.address_utils import is_iov1

logger = get_logger(__name__)

DOMAIN_TYPE = "closed"


def record_custody(custodian: dict[str, Any], iov1: str, entry: dict[str, Any] | str) -> None:
    """Append an amount or starname to the custodian's provenance list for iov1."""
    custodian.setdefault(f"{NO_STAR1_PREFIX}{iov1}", []).append(entry)


def convert_multisigs(
    dumped: dict[str, Any],
    multisigs: Mapping[str, MultisigAccount],
    denom: str = "uiov",
) -> list[dict[str, Any]]:
    accounts = []
    for iov1, multisig in multisigs.items():
        wallet = find_wallet(dumped, iov1)
        account = create_account(
            address=multisig.star1,
            micro=wallet_micro(wallet),
            iov=wallet_float(wallet),
            denom=denom,
            id=multisig.name,
            iov1=iov1,
        )
        account[TAG_ALIAS] = multisig.cond
        # off dumped.cash before the ordinary wallets are walked
        burn_tokens(dumped, [iov1])
        accounts.append(account)
    return accounts


def convert_wallets(
    dumped: dict[str, Any],
    iov2star: Mapping[str, str | bool],
    custodian: dict[str, Any],
    denom: str = "uiov",
) -> list[dict[str, Any]]:
    """Convert every remaining wallet; unresolved balances are burned into the custodian."""
    accounts = []
    swept = 0
    # copy: burn_tokens() below mutates dumped["cash"]
    wallets = sorted(dumped["cash"], key=lambda w: (-wallet_micro(w), w["address"]))

    for wallet in wallets:
        iov1 = wallet["address"]
        star1 = iov2star.get(iov1)
        micro = wallet_micro(wallet)
        if star1:
            accounts.append(
                create_account(
                    address=star1,
                    micro=micro,
                    iov=wallet_float(wallet),
                    denom=denom,
                    id=wallet.get(TAG_ID),
                    iov1=iov1,
                )
            )
            continue
        burn_tokens(dumped, [iov1])
        add_account_micro(custodian, micro)
        record_custody(custodian, iov1, custody_amount(micro, wallet_float(wallet)))
        swept += 1

    custodian["value"]["coins"][0][TAG_IOV] = account_micro(custodian) / MICRO_PER_WHOLE
    logger.info("convert_wallets_done", accounts=len(accounts), custodied=swept)
    return accounts


def _resources(targets: Sequence[dict[str, Any]]) -> list[dict[str, str]] | None:
    # legacy iov1 targets point back at the old chain and are dropped
    resources = [
        {"uri": t["blockchain_id"], "resource": t["address"]}
        for t in targets
        if not is_iov1(t.get("address", ""))
    ]
    return resources or None


def convert_usernames(
    dumped: dict[str, Any],
    iov2star: Mapping[str, str | bool],
    custodian: dict[str, Any],
    valid_until: str,
) -> list[dict[str, Any]]:
    starnames = []
    custodian_star1 = custodian["value"]["address"]

    for username in sorted(dumped.get("username") or [], key=lambda u: u["Username"]):
        iov1 = username["Owner"]
        name, domain = username["Username"].split("*", 1)
        owner = iov2star.get(iov1)
        if not owner:
            owner = custodian_star1
            record_custody(custodian, iov1, username["Username"])
        starnames.append(
            {
                TAG_IOV1: iov1,
                "broker": None,
                "certificates": None,
                "domain": domain,
                "metadata_uri": "",
                "name": name,
                "owner": owner,
                "resources": _resources(username.get("Targets") or []),
                "valid_until": valid_until,
            }
        )
    return starnames


def create_domain(
    name: str,
    admin: str,
    valid_until: str,
    account_renew: str = "315576000",
    iov1: str | None = None,
) -> dict[str, Any]:
    domain: dict[str, Any] = {
        "account_renew": account_renew,
        "admin": admin,
        "broker": None,
        "name": name,
        "type": DOMAIN_TYPE,
        "valid_until": valid_until,
    }
    if iov1:
        domain[TAG_IOV1] = iov1
    return domain


def convert_premiums(
    premiums: Mapping[str, Premium],
    iov2star: Mapping[str, str | bool],
    custodian: dict[str, Any],
    valid_until: str,
    account_renew: str = "315576000",
) -> list[dict[str, Any]]:
    domains = []
    custodian_star1 = custodian["value"]["address"]

    for iov1, premium in premiums.items():
        admin = iov2star.get(iov1)
        for name in premium.starnames:
            if not admin:
                record_custody(custodian, iov1, name)
            domains.append(create_domain(name, admin or custodian_star1, valid_until, account_renew, iov1))
    return domains


def convert_reserveds(
    reserveds: Sequence[str],
    claimed: set[str],
    reservation_admin: str,
    releases: Sequence[int],
    account_renew: str = "315576000",
) -> list[dict[str, Any]]:
    """Reserved names not already claimed, each released on releases[i % len(releases)]."""
    if not releases:
        raise NotFoundError("No release dates for reserved domains.")
    return [
        create_domain(name, reservation_admin, str(releases[i % len(releases)]), account_renew)
        for i, name in enumerate(reserveds)
        if name not in claimed
    ]


def convert_to_cosmos_sdk(
    dumped: dict[str, Any],
    iov2star: Mapping[str, str | bool],
    multisigs: Mapping[str, MultisigAccount],
    premiums: Mapping[str, Premium],
    reserveds: Sequence[str],
    *,
    custodian_iov1: str,
    reservation_admin: str,
    releases: Sequence[int],
    valid_until: str,
    account_renew: str = "315576000",
    denom: str = "uiov",
) -> Conversion:
    """
    Convert the normalized dump (see module docstring for the order).

    Precondition: escrows are already consolidated and every multisig wallet
    (custodian included) is still in dumped["cash"].
    Postcondition: dumped["cash"] holds only wallets with a star1 address.
    """
    if custodian_iov1 not in multisigs:
        raise NotFoundError(f"Couldn't find custodian {custodian_iov1} in the multisig registry.")

    accounts = convert_multisigs(dumped, multisigs, denom)
    custodian = next(a for a in accounts if a[TAG_IOV1] == custodian_iov1)
    accounts.extend(convert_wallets(dumped, iov2star, custodian, denom))

    starnames = convert_usernames(dumped, iov2star, custodian, valid_until)

    domains = convert_premiums(premiums, iov2star, custodian, valid_until, account_renew)
    claimed = {d["name"] for d in domains}
    domains.extend(convert_reserveds(reserveds, claimed, reservation_admin, releases, account_renew))
    domains.sort(key=lambda d: d["name"])

    custodied = sum(1 for key in custodian if key.startswith(NO_STAR1_PREFIX))
    logger.info(
        "convert_to_cosmos_sdk_done",
        accounts=len(accounts),
        starnames=len(starnames),
        domains=len(domains),
        custodied=custodied,
        custodian_amount=custodian["value"]["coins"][0]["amount"],
    )
    return Conversion(accounts=accounts, starnames=starnames, domains=domains)
