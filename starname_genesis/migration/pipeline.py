"""
Migration pipeline: run every stage, in order, over one set of inputs.

burn flammable -> label accounts -> label multisigs -> fix chain ids ->
fix errors -> map identities -> consolidate escrows -> convert -> audit ->
compose -> patch -> re-audit -> write -> gentx

The dump, indicatives and genesis inside MigrationInputs are mutated in
place. Nothing is written to disk until every in-memory stage succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from starname_genesis.config import MigrationSettings, get_settings
from starname_genesis.core.exceptions import MalformedInputError
from starname_genesis.genesis_logging import bind_stage
from starname_genesis.migration.audit import audit_supply, total_legacy_supply
from starname_genesis.migration.composer import apply_patch, compose_genesis, write_genesis
from starname_genesis.migration.converter import convert_to_cosmos_sdk
from starname_genesis.migration.escrow import consolidate_escrows
from starname_genesis.migration.gentx import add_gentxs
from starname_genesis.migration.identity import map_iov_to_star
from starname_genesis.migration.models import Premium
from starname_genesis.migration.normalizer import (
    burn_tokens,
    fix_chain_ids,
    fix_errors,
    label_accounts,
    label_multisigs,
)
from starname_genesis.migration.patches import get_patch


@dataclass
class MigrationInputs:
    """
    Input documents of one migration run.

    dumped: legacy state dump (cash, username, escrow).
    legacy_genesis: legacy chain genesis, for //id labels.
    genesis: target genesis the converted records are appended to.
    flammable: legacy addresses whose balances are burned outright.
    home: node home; when unset the genesis is only returned, never written.
    gentxs: directory of validator gentxs collected after writing.
    valid_until: expiry of migrated names/premium domains; derived from
        genesis when unset.
    """

    dumped: dict[str, Any]
    legacy_genesis: dict[str, Any]
    genesis: dict[str, Any]
    indicatives: list[dict[str, Any]] = field(default_factory=list)
    premiums: dict[str, Premium] = field(default_factory=dict)
    reserveds: list[str] = field(default_factory=list)
    flammable: list[str] = field(default_factory=list)
    home: Path | None = None
    gentxs: Path | None = None
    valid_until: str | None = None


def _parse_time(value: str) -> datetime:
    # genesis_time is RFC 3339 with a Z suffix and up to nanoseconds
    head, _, _ = value.rstrip("Z").partition(".")
    return datetime.fromisoformat(head + "+00:00")


def derive_valid_until(genesis: dict[str, Any], account_renew: str) -> str:
    """
    Expiry for migrated names: the base genesis "iov" domain's valid_until,
    else genesis_time plus one renewal period.
    """
    for domain in (genesis.get("app_state", {}).get("starname", {}).get("domains") or []):
        if domain.get("name") == "iov" and domain.get("valid_until"):
            return str(domain["valid_until"])
    genesis_time = genesis.get("genesis_time")
    if not genesis_time:
        raise MalformedInputError("Genesis has neither an iov domain nor a genesis_time.")
    return str(int(_parse_time(genesis_time).timestamp()) + int(account_renew))


def migrate(inputs: MigrationInputs, settings: MigrationSettings | None = None) -> dict[str, Any]:
    """Run the whole migration and return the composed genesis."""
    settings = settings or get_settings()
    dumped = inputs.dumped
    genesis = inputs.genesis

    log = bind_stage("normalize")
    original = total_legacy_supply(dumped["cash"], settings.ticker)
    burned = burn_tokens(dumped, inputs.flammable)
    label_accounts(dumped, inputs.legacy_genesis)
    label_multisigs(dumped, settings.multisigs)
    fix_chain_ids(dumped, settings.chain_ids)
    fix_errors(dumped, inputs.indicatives)
    log.info("stage_done", wallets=len(dumped["cash"]), burned=len(burned))

    log = bind_stage("identity")
    iov2star = map_iov_to_star(dumped, settings.multisigs, inputs.indicatives, inputs.premiums)
    log.info("stage_done", addresses=len(iov2star))

    log = bind_stage("escrow")
    escrows = consolidate_escrows(dumped, settings.source2multisig, settings.denom)
    log.info("stage_done", sources=len(escrows))

    log = bind_stage("convert")
    valid_until = inputs.valid_until or derive_valid_until(genesis, settings.account_renew)
    conversion = convert_to_cosmos_sdk(
        dumped,
        iov2star,
        settings.multisigs,
        inputs.premiums,
        inputs.reserveds,
        custodian_iov1=settings.custodian_iov1,
        reservation_admin=settings.reservation_admin,
        releases=settings.releases,
        valid_until=valid_until,
        account_renew=settings.account_renew,
        denom=settings.denom,
    )
    log.info("stage_done", accounts=len(conversion.accounts), valid_until=valid_until)

    log = bind_stage("audit")
    report = audit_supply(
        original,
        conversion.accounts + list(escrows.values()),
        burned,
        denom=settings.denom,
        ticker=settings.ticker,
    )
    report.check()
    log.info("stage_done", original=str(report.original))

    log = bind_stage("compose")
    base_accounts = len(genesis.get("app_state", {}).get("auth", {}).get("accounts") or [])
    compose_genesis(genesis, conversion, escrows)
    custodian_star1 = settings.multisigs[settings.custodian_iov1].star1
    apply_patch(genesis, get_patch(genesis.get("chain_id"), custodian_star1))
    # patches move value between accounts; the composed accounts must still balance
    patched = audit_supply(
        original,
        genesis["app_state"]["auth"]["accounts"][base_accounts:],
        burned,
        denom=settings.denom,
        ticker=settings.ticker,
    )
    patched.check()
    log.info("stage_done", chain_id=genesis.get("chain_id"))

    if inputs.home is None:
        return genesis

    log = bind_stage("write")
    path = write_genesis(genesis, inputs.home)
    gentxs_added = add_gentxs(inputs.gentxs, inputs.home, settings.binary, settings.gentx_timeout)
    log.info("stage_done", path=str(path), gentxs=gentxs_added)
    return genesis
