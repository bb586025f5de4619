"""
Escrow consolidator: merge time-locked escrows, by source, into designated
new-scheme accounts.

Each escrow's own wallet is burned from the dump so its value is counted once,
in the consolidated account. Every escrow is tagged on that account with its
timeout for audit.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from starname_genesis.core.exceptions import UnknownEscrowSourceError
from starname_genesis.genesis_logging import get_logger
from starname_genesis.migration.models import (
    MICRO_PER_WHOLE,
    TAG_IOV,
    TAG_NOTE,
    EscrowTarget,
    add_account_micro,
    coin_to_micro,
    create_account,
    format_micro,
)
from starname_genesis.migration.normalizer import burn_tokens

logger = get_logger(__name__)


def timeout_tag(timeout: int) -> str:
    """//timeout key for an escrow timeout, ISO-8601 with milliseconds like 2029-11-10T00:00:00.000Z."""
    when = datetime.fromtimestamp(int(timeout), tz=timezone.utc)
    return f"//timeout {when.strftime('%Y-%m-%dT%H:%M:%S')}.000Z"


def group_escrows(
    escrows: list[dict[str, Any]],
    source2multisig: Mapping[str, EscrowTarget],
) -> dict[str, list[dict[str, Any]]]:
    """Group escrows by source, failing on the first unknown source."""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for escrow in escrows:
        source = escrow.get("source")
        if source not in source2multisig:
            raise UnknownEscrowSourceError(f"Unknown escrow source {source} in escrow {escrow}")
        grouped.setdefault(source, []).append(escrow)
    return grouped


def consolidate_escrows(
    dumped: dict[str, Any],
    source2multisig: Mapping[str, EscrowTarget],
    denom: str = "uiov",
) -> dict[str, dict[str, Any]]:
    """
    Consolidate dumped["escrow"] into one account per source.

    Precondition: every escrow address has a wallet in dumped["cash"].
    Postcondition: those wallets are gone; the returned accounts (source ->
    account) hold their summed amounts.
    """
    grouped = group_escrows(dumped.get("escrow") or [], source2multisig)
    accounts: dict[str, dict[str, Any]] = {}

    for source, escrows in grouped.items():
        # burn the escrow wallets before crediting the consolidated account
        burn_tokens(dumped, [escrow["address"] for escrow in escrows])

        target = source2multisig[source]
        account = create_account(address=target.star1, micro=0, iov=0, denom=denom, id=target.label)
        account[TAG_NOTE] = f"consolidated escrows with source {source}"

        for escrow in escrows:
            coin = escrow["amount"][0]
            micro = coin_to_micro(coin)
            add_account_micro(account, micro)
            account[timeout_tag(escrow["timeout"])] = (
                f"{escrow['address']} yields {format_micro(micro)} {coin.get('ticker', 'IOV')}"
            )

        total = int(account["value"]["coins"][0]["amount"])
        account["value"]["coins"][0][TAG_IOV] = total / MICRO_PER_WHOLE
        accounts[source] = account
        logger.info(
            "escrow_consolidated",
            source=source,
            star1=target.star1,
            escrows=len(escrows),
            amount=str(total),
        )

    return accounts
