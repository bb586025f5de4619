"""
Migration settings.

Responsibilities:
- Bundle the static registries and policy constants into one explicit value.
- Pull environment-dependent values (home, binary, chain id, timeouts) from env.py.
- Stages take the fields they need as arguments; nothing reads module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from starname_genesis.config import env, registries
from starname_genesis.migration.models import EscrowTarget, MultisigAccount

# Domain renewal period for migrated domains: 10 years in seconds
ACCOUNT_RENEW = "315576000"
DENOM = "uiov"
TICKER = "IOV"


@dataclass
class MigrationSettings:
    """
    Everything the pipeline needs besides the input documents.

    multisigs / source2multisig / chain_ids: identity and remap registries.
    custodian_iov1: legacy address of the multisig absorbing unresolved value.
    reservation_admin: admin of reserved domains awaiting release.
    releases: ordered release dates for reserved domains (unix seconds).
    """

    multisigs: dict[str, MultisigAccount] = field(default_factory=lambda: dict(registries.MULTISIGS))
    source2multisig: dict[str, EscrowTarget] = field(default_factory=lambda: dict(registries.SOURCE2MULTISIG))
    chain_ids: dict[str, str] = field(default_factory=lambda: dict(registries.CHAIN_IDS))
    custodian_iov1: str = registries.CUSTODIAN_IOV1
    reservation_admin: str = registries.RESERVATION_ADMIN
    releases: tuple[int, ...] = registries.RELEASES
    account_renew: str = ACCOUNT_RENEW
    denom: str = DENOM
    ticker: str = TICKER
    chain_id: str = env.DEFAULT_CHAIN_ID
    home: Path = env.DEFAULT_HOME
    binary: str = env.DEFAULT_BINARY
    gentx_timeout: float = env.DEFAULT_GENTX_TIMEOUT
    request_timeout: float = env.DEFAULT_REQUEST_TIMEOUT


def get_settings() -> MigrationSettings:
    """Return settings with registries defaults and environment overrides applied."""
    return MigrationSettings(
        chain_id=env.get_chain_id(),
        home=env.get_home(),
        binary=env.get_binary(),
        gentx_timeout=env.get_gentx_timeout(),
        request_timeout=env.get_request_timeout(),
    )
