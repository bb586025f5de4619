"""
Identity resolver: map legacy iov1 addresses to new star1 addresses.

Four evidence sources, applied in fixed order:
  1. name-service targets (first star1 target of an owner's binding)
  2. multisig registry (authoritative, always overwrites)
  3. indicative sends (memo embeds a star1; disagreement is fatal)
  4. premium dataset (fills gaps only; disagreement is only a warning)

The result maps iov1 -> star1, or iov1 -> False when the address is known
but has no new address. An absent key means the address was never seen.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from starname_genesis.core.exceptions import ConflictingIdentityError, MalformedMemoError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import MultisigAccount, Premium
from starname_genesis.utils.address_utils import find_star1, is_star1

logger = get_logger(__name__)

IdentityMap = dict[str, str | bool]


def _from_usernames(iov2star: IdentityMap, usernames: Iterable[dict[str, Any]]) -> None:
    for username in usernames:
        owner = username["Owner"]
        target = next((t for t in username.get("Targets") or [] if is_star1(t.get("address", ""))), None)
        if not iov2star.get(owner):
            iov2star[owner] = target["address"] if target else False


def _from_multisigs(iov2star: IdentityMap, multisigs: Mapping[str, MultisigAccount]) -> None:
    for iov1, multisig in multisigs.items():
        iov2star[iov1] = multisig.star1


def _from_indicatives(iov2star: IdentityMap, indicatives: Iterable[dict[str, Any]]) -> None:
    for indicative in indicatives:
        details = indicative["message"]["details"]
        iov1 = details["source"]
        star1 = find_star1(details.get("memo") or "")
        if star1 is None:
            raise MalformedMemoError(f"No star1 address in memo {details.get('memo')!r} of send from {iov1}.")
        current = iov2star.get(iov1)
        if current and current != star1:
            raise ConflictingIdentityError(iov1, current, star1)
        iov2star[iov1] = star1


def _from_premiums(iov2star: IdentityMap, premiums: Mapping[str, Premium]) -> None:
    for iov1, premium in premiums.items():
        current = iov2star.get(iov1)
        if not current:
            iov2star[iov1] = premium.star1 or False
        elif premium.star1 and premium.star1 != current:
            logger.warning(
                "identity_premium_mismatch",
                iov1=iov1,
                current=current,
                premium=premium.star1,
            )


def map_iov_to_star(
    dumped: dict[str, Any],
    multisigs: Mapping[str, MultisigAccount],
    indicatives: Iterable[dict[str, Any]] = (),
    premiums: Mapping[str, Premium] | None = None,
) -> IdentityMap:
    """Build the iov1 -> star1 | False identity map (see module docstring for precedence)."""
    iov2star: IdentityMap = {}

    _from_usernames(iov2star, dumped.get("username") or [])
    _from_multisigs(iov2star, multisigs)
    _from_indicatives(iov2star, indicatives)
    _from_premiums(iov2star, premiums or {})

    resolved = sum(1 for v in iov2star.values() if v)
    logger.info("map_iov_to_star_done", addresses=len(iov2star), resolved=resolved, unresolved=len(iov2star) - resolved)
    return iov2star
