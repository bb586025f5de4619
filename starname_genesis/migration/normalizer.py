"""
Ledger normalizer: structural fixups applied to the raw dump before any
identity resolution or conversion.

Every operation mutates the dump in place and is total over its inputs: a
referenced wallet/record that is missing raises NotFoundError rather than
being skipped, since a silently skipped wallet would break supply
conservation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from starname_genesis.core.exceptions import NotFoundError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import TAG_ID, TAG_IOV1, MultisigAccount, wallet_float

logger = get_logger(__name__)


def _wallet_index(dumped: dict[str, Any], iov1: str) -> int:
    for i, wallet in enumerate(dumped["cash"]):
        if wallet.get("address") == iov1:
            return i
    raise NotFoundError(f"Couldn't find {iov1} in dumped.cash.")


def find_wallet(dumped: dict[str, Any], iov1: str) -> dict[str, Any]:
    """Return the dump wallet at iov1; NotFoundError if absent."""
    return dumped["cash"][_wallet_index(dumped, iov1)]


def burn_tokens(dumped: dict[str, Any], iov1s: Iterable[str]) -> list[dict[str, Any]]:
    """
    Remove exactly one wallet per address from dumped["cash"].

    Returns the removed wallets so callers can account for the burned value.
    """
    burned: list[dict[str, Any]] = []
    for iov1 in iov1s:
        burned.append(dumped["cash"].pop(_wallet_index(dumped, iov1)))
    if burned:
        logger.debug(
            "burn_tokens_done",
            count=len(burned),
            addresses=[w["address"] for w in burned],
            iov=sum(wallet_float(w) for w in burned),
        )
    return burned


def label_multisigs(dumped: dict[str, Any], multisigs: Mapping[str, MultisigAccount]) -> None:
    """Tag each registry wallet with its name (//id) and address (//iov1)."""
    for iov1, multisig in multisigs.items():
        wallet = find_wallet(dumped, iov1)
        wallet[TAG_ID] = multisig.name
        wallet[TAG_IOV1] = iov1
    logger.info("label_multisigs_done", count=len(multisigs))


def label_accounts(dumped: dict[str, Any], legacy_genesis: dict[str, Any]) -> None:
    """
    Copy the //id of the legacy genesis wallets onto the dump and tag every
    dump wallet with its own address.

    Legacy genesis addresses carry a scheme prefix (bech32:iov1...) so the
    match is by containment of the dump address.
    """
    labelled = 0
    for legacy in legacy_genesis.get("app_state", {}).get("cash") or []:
        legacy_address = legacy.get("address") or ""
        for wallet in dumped["cash"]:
            if wallet.get("address") and wallet["address"] in legacy_address:
                wallet[TAG_ID] = legacy.get(TAG_ID)
                labelled += 1
                break

    for wallet in dumped["cash"]:
        wallet[TAG_IOV1] = wallet["address"]

    logger.info("label_accounts_done", labelled=labelled, wallets=len(dumped["cash"]))


def fix_chain_ids(dumped: dict[str, Any], chain_ids: Mapping[str, str]) -> None:
    """Rewrite every username target's blockchain_id through chain_ids; unknown ids are left as-is."""
    fixed = 0
    for username in dumped.get("username") or []:
        for target in username.get("Targets") or []:
            replacement = chain_ids.get(target.get("blockchain_id"))
            if replacement:
                target["blockchain_id"] = replacement
                fixed += 1
    logger.info("fix_chain_ids_done", fixed=fixed)


# btc13*iov's holder upgraded its funds through a separate channel, so its
# indicative send must not be used for identity resolution.
UPGRADED_INDICATIVE_SOURCE = "iov1yhk8qqp3wsdg7tefd8u457n9zqsny4nqzp6960"

# ledger*iov was registered to the wrong owner; its rightful owner recovered it.
MISASSIGNED_USERNAME = "ledger*iov"
MISASSIGNED_USERNAME_OWNER = "iov1qnpaklxv4n6cam7v99hl0tg0dkmu97sh6007un"


def drop_upgraded_indicative(indicatives: list[dict[str, Any]]) -> None:
    for i, indicative in enumerate(indicatives):
        if indicative["message"]["details"]["source"] == UPGRADED_INDICATIVE_SOURCE:
            del indicatives[i]
            return
    raise NotFoundError(f"Couldn't find indicative send from {UPGRADED_INDICATIVE_SOURCE}.")


def reassign_misassigned_username(dumped: dict[str, Any]) -> None:
    for username in dumped.get("username") or []:
        if username.get("Username") == MISASSIGNED_USERNAME:
            username["Owner"] = MISASSIGNED_USERNAME_OWNER
            return
    raise NotFoundError(f"Couldn't find {MISASSIGNED_USERNAME} in dumped.username.")


def fix_errors(dumped: dict[str, Any], indicatives: list[dict[str, Any]]) -> None:
    """Apply the two known one-off corrections (mutates dumped and indicatives)."""
    drop_upgraded_indicative(indicatives)
    reassign_misassigned_username(dumped)
    logger.info(
        "fix_errors_done",
        dropped_indicative=UPGRADED_INDICATIVE_SOURCE,
        reassigned=MISASSIGNED_USERNAME,
        owner=MISASSIGNED_USERNAME_OWNER,
    )
