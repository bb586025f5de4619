"""
Network-specific genesis patches.

A patch is a function (genesis) -> None that mutates the composed genesis in
place. Each one checks the genesis chain_id first so a patch can never be
applied to the wrong network.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

from starname_genesis.core.exceptions import (
    MalformedInputError,
    NetworkIdentityMismatchError,
    NotFoundError,
    SupplyMismatchError,
)
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.composer import Patch
from starname_genesis.migration.models import (
    MICRO_PER_WHOLE,
    NO_STAR1_PREFIX,
    RECOVERED_PREFIX,
    TAG_IOV,
    account_micro,
    add_account_micro,
    create_account,
    custody_micro,
)

logger = get_logger(__name__)

JESTNET = "jestnet"
MAINNET = "iov-mainnet-2"

# Holders without a star1 at migration time who proved ownership of their
# iov1 key afterwards: (iov1, star1)
LOST_KEYS_IN_CUSTODY: tuple[tuple[str, str], ...] = (
    ("iov1jq8z8xl9tqdwjsp44gtkd2c5rpq33e556kg0ft", "star1k9ktkefsdxtydga262re596agdklwjmrf9et90"),  # charlief
    ("iov153n95ekuw9rxfhzspgarqjdwnadmvdt0chcjs4", "star1keaxspy5rgw84azg5w640pp8zdla72ra0n5xh2"),  # gillesd
    ("iov14qk7zrz2ewhdmy7cjj68sk6jn3rst4vd7u930y", "star1lgh6ekcnkufs4742qr5znvtlz4vglul9g2p6xl"),  # misang
)

# Holders who lost the key of the star1 they claimed: (iov1, lost star1, replacement star1)
LOST_KEYS_WITH_STAR1: tuple[tuple[str, str, str], ...] = (
    (
        "iov1axxtqae3x9jtvv7wavg6fnjgpc27dx7a9jlp9r",  # de26
        "star1myg5g0uvsjdq20atrjv5t49ffflwz2m7d7u677",
        "star1xnzwj34e8zefm7g7vtgnphfj6x2qgnq723rq0j",
    ),
    (
        "iov1lfjspe4x5u404sskmv5md4q7u9jcz96zya8krw",  # jean501
        "star1alx5xdyws6hzeynewdzm4x5wg0v6tjl3wcq34g",
        "star1lsk9ckth2s870kjqcyl6x5af7gazj6eg7msluq",
    ),
    (
        "iov1ja0syy203qncn28cqmz5zh9kh2xl0xxt36m4qx",  # mam
        "star16yqeeqp26h64rldcql7cpsz0zte7rwx9jc8s6x",
        "star1f2jpr2guzq3y5yjv667axr26pl6qzyn2hzthfa",
    ),
)


def check_chain_id(genesis: dict[str, Any], expected: str) -> None:
    actual = genesis.get("chain_id")
    if actual != expected:
        raise NetworkIdentityMismatchError(f"Wrong chain_id: {actual} != {expected}.")


def _accounts(genesis: dict[str, Any]) -> list[dict[str, Any]]:
    return genesis["app_state"]["auth"]["accounts"]


def _starnames(genesis: dict[str, Any]) -> list[dict[str, Any]]:
    return genesis["app_state"]["starname"]["accounts"]


def _domains(genesis: dict[str, Any]) -> list[dict[str, Any]]:
    return genesis["app_state"]["starname"]["domains"]


def find_account(genesis: dict[str, Any], address: str) -> dict[str, Any]:
    for account in _accounts(genesis):
        if account["value"]["address"] == address:
            return account
    raise NotFoundError(f"Couldn't find account {address} in genesis.")


def recover_custodied(genesis: dict[str, Any], iov1: str, star1: str, custodian_star1: str) -> None:
    """Move everything the custodian holds for iov1 to star1."""
    custodian = find_account(genesis, custodian_star1)
    key = f"{NO_STAR1_PREFIX}{iov1}"
    if key not in custodian:
        raise NotFoundError(f"Couldn't find {key!r} on the custodian account.")
    provenance = custodian.pop(key)

    amounts = [entry for entry in provenance if isinstance(entry, dict)]
    names = {entry for entry in provenance if isinstance(entry, str)}
    if len(amounts) + len(names) != len(provenance):
        raise MalformedInputError(f"Custodied amounts of {iov1} carry no exact uiov: {provenance}.")

    micro = sum(custody_micro(amount) for amount in amounts)
    if micro > account_micro(custodian):
        raise SupplyMismatchError(
            f"Custodian holds {account_micro(custodian)} uiov, can't release {micro} uiov to {iov1}."
        )
    if micro:
        denom = custodian["value"]["coins"][0]["denom"]
        add_account_micro(custodian, -micro)
        custodian["value"]["coins"][0][TAG_IOV] = account_micro(custodian) / MICRO_PER_WHOLE
        _accounts(genesis).append(
            create_account(address=star1, micro=micro, iov=micro / MICRO_PER_WHOLE, denom=denom, iov1=iov1)
        )

    moved = 0
    for starname in _starnames(genesis):
        if starname["owner"] == custodian_star1 and f"{starname['name']}*{starname['domain']}" in names:
            starname["owner"] = star1
            moved += 1
    for domain in _domains(genesis):
        if domain["admin"] == custodian_star1 and domain["name"] in names:
            domain["admin"] = star1
            moved += 1
    if moved != len(names):
        raise NotFoundError(f"Couldn't find every custodied name of {iov1}: {sorted(names)}.")

    custodian[f"{RECOVERED_PREFIX}{iov1}"] = provenance
    logger.info("recover_custodied_done", iov1=iov1, star1=star1, amount=str(micro), names=moved)


def replace_lost_star1(genesis: dict[str, Any], iov1: str, lost: str, replacement: str) -> None:
    """Re-home the account, names, domains and resources of a lost star1."""
    account = find_account(genesis, lost)
    account["value"]["address"] = replacement

    moved = 0
    for starname in _starnames(genesis):
        if starname["owner"] == lost:
            starname["owner"] = replacement
            moved += 1
        for resource in starname.get("resources") or []:
            if resource["resource"] == lost:
                resource["resource"] = replacement
    for domain in _domains(genesis):
        if domain["admin"] == lost:
            domain["admin"] = replacement
            moved += 1

    logger.info("replace_lost_star1_done", iov1=iov1, lost=lost, replacement=replacement, names=moved)


def patch_jestnet(genesis: dict[str, Any]) -> None:
    """Short account renewal so the integration tests can exercise expiry."""
    check_chain_id(genesis, JESTNET)
    domains = _domains(genesis)
    if not domains:
        raise NotFoundError("Couldn't find any domain to patch in genesis.")
    domains[0]["account_renew"] = "3600"


def patch_mainnet(genesis: dict[str, Any], custodian_star1: str) -> None:
    """Manual key-recovery fixups agreed after the dump was taken."""
    check_chain_id(genesis, MAINNET)
    for iov1, star1 in LOST_KEYS_IN_CUSTODY:
        recover_custodied(genesis, iov1, star1, custodian_star1)
    for iov1, lost, replacement in LOST_KEYS_WITH_STAR1:
        replace_lost_star1(genesis, iov1, lost, replacement)


PATCHES: dict[str, Callable[..., None]] = {
    JESTNET: patch_jestnet,
    MAINNET: patch_mainnet,
}

# patches that move value held by the custodian account
CUSTODIAL_PATCHES = frozenset({MAINNET})


def get_patch(chain_id: str | None, custodian_star1: str | None = None) -> Patch | None:
    """Patch hook for chain_id, bound to the custodian address where it needs one."""
    patch = PATCHES.get(chain_id or "")
    if patch is None or chain_id not in CUSTODIAL_PATCHES:
        return patch
    if not custodian_star1:
        raise NotFoundError(f"The {chain_id} patch needs the custodian address.")
    return partial(patch, custodian_star1=custodian_star1)
