"""
End-to-end tests for migrate(): supply conservation, composed genesis
contents, patch selection and writing to home.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from starname_genesis.core.exceptions import (
    ConflictingIdentityError,
    MalformedInputError,
    SupplyMismatchError,
)
from starname_genesis.migration.audit import (
    SupplyReport,
    audit_supply,
    total_account_supply,
    total_legacy_supply,
)
from starname_genesis.migration.models import create_account
from starname_genesis.migration.pipeline import MigrationInputs, derive_valid_until, migrate
from tests.conftest import (
    BASE_VALID_UNTIL,
    CUSTODIAN_STAR1,
    DAVE,
    DAVE_STAR1,
    GUARANTEED,
    ISABELLA,
    make_dump,
    make_genesis,
)


def _inputs(dumped, legacy_genesis, genesis, indicatives, premiums, **kwargs):
    return MigrationInputs(
        dumped=dumped,
        legacy_genesis=legacy_genesis,
        genesis=genesis,
        indicatives=indicatives,
        premiums=premiums,
        reserveds=kwargs.pop("reserveds", ["dave", "yolo"]),
        flammable=kwargs.pop("flammable", [GUARANTEED]),
        **kwargs,
    )


def test_total_legacy_supply():
    wallets = [
        {"address": "a", "coins": [{"ticker": "IOV", "whole": 1, "fractional": 500000000}]},
        {"address": "b", "coins": [{"ticker": "IOV", "whole": 2}]},
    ]
    assert total_legacy_supply(wallets) == 3500000


def test_total_account_supply_ignores_other_denoms():
    accounts = [create_account(address="x", micro=5), create_account(address="y", micro=7, denom="ustake")]
    assert total_account_supply(accounts) == 5


def test_supply_report_check():
    SupplyReport(original=10, accounts=7, burned=3).check()
    with pytest.raises(SupplyMismatchError, match="delta"):
        SupplyReport(original=10, accounts=8, burned=3).check()


def test_audit_supply_counts_burned_wallets():
    burned = [{"address": "a", "coins": [{"ticker": "IOV", "whole": 10}]}]
    report = audit_supply(15000000, [create_account(address="x", micro=5000000)], burned)
    assert report.burned == 10000000
    assert report.balanced


def test_migrate_conserves_supply(dumped, legacy_genesis, genesis, indicatives, premiums, settings):
    original = total_legacy_supply(dumped["cash"])
    burned = next(w for w in dumped["cash"] if w["address"] == GUARANTEED)
    burned_micro = total_legacy_supply([burned])

    composed = migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)

    accounts = composed["app_state"]["auth"]["accounts"]
    assert total_account_supply(accounts) + burned_micro == original


def test_migrate_composes_genesis(dumped, legacy_genesis, genesis, indicatives, premiums, settings):
    composed = migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)

    accounts = composed["app_state"]["auth"]["accounts"]
    addresses = [a["value"]["address"] for a in accounts]
    # converted accounts first, consolidated escrows last
    assert addresses[-2:] == [settings.source2multisig[GUARANTEED].star1, settings.source2multisig[ISABELLA].star1]
    assert DAVE_STAR1 in addresses
    assert CUSTODIAN_STAR1 in addresses

    domains = composed["app_state"]["starname"]["domains"]
    assert [d["name"] for d in domains] == ["iov", "dave", "hash", "yolo"]
    assert domains[0]["account_renew"] == "3000"

    starnames = composed["app_state"]["starname"]["accounts"]
    assert all(s["valid_until"] == BASE_VALID_UNTIL for s in starnames)
    ledger = next(s for s in starnames if s["name"] == "ledger")
    assert ledger["owner"] == DAVE_STAR1
    assert ledger["//iov1"] == DAVE


def test_migrate_applies_jestnet_patch(dumped, legacy_genesis, indicatives, premiums, settings):
    genesis = make_genesis("jestnet")
    composed = migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)
    assert composed["app_state"]["starname"]["domains"][0]["account_renew"] == "3600"


def test_migrate_writes_home(dumped, legacy_genesis, genesis, indicatives, premiums, settings, tmp_path):
    home = tmp_path / "node"
    with patch("starname_genesis.migration.gentx.subprocess.run") as run:
        composed = migrate(
            _inputs(dumped, legacy_genesis, genesis, indicatives, premiums, home=home, gentxs=tmp_path / "none"),
            settings,
        )
    run.assert_not_called()
    written = json.loads((home / "config" / "genesis.json").read_text(encoding="utf-8"))
    assert written == composed


def test_migrate_without_home_writes_nothing(dumped, legacy_genesis, genesis, indicatives, premiums, settings):
    migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)
    assert not settings.home.exists()


def test_migrate_failure_writes_nothing(legacy_genesis, genesis, premiums, settings, tmp_path):
    """btc13's indicative is only dropped by fix_errors; a second conflicting one aborts the run."""
    from tests.conftest import BTC13, make_indicatives

    indicatives = make_indicatives()
    indicatives.append(
        {"message": {"details": {"source": BTC13, "memo": DAVE_STAR1, "destination": DAVE}}, "block_height": 1}
    )
    home = tmp_path / "node"
    with pytest.raises(ConflictingIdentityError):
        migrate(_inputs(make_dump(), legacy_genesis, genesis, indicatives, premiums, home=home), settings)
    assert not home.exists()


def test_migrate_detects_supply_mismatch(legacy_genesis, genesis, indicatives, premiums, settings):
    """An escrow worth more than its wallet would mint tokens."""
    dumped = make_dump()
    dumped["escrow"][1]["amount"] = [{"ticker": "IOV", "whole": 269560}]
    with pytest.raises(SupplyMismatchError):
        migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)


def test_migrate_audits_after_patch(dumped, legacy_genesis, genesis, indicatives, premiums, settings, tmp_path):
    """A patch that mints a micro-unit is caught before anything is written."""

    def mint(document):
        account = document["app_state"]["auth"]["accounts"][-1]
        coin = account["value"]["coins"][0]
        coin["amount"] = str(int(coin["amount"]) + 1)

    home = tmp_path / "node"
    with patch("starname_genesis.migration.pipeline.get_patch", return_value=mint):
        with pytest.raises(SupplyMismatchError, match="delta 0.000001"):
            migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums, home=home), settings)
    assert not home.exists()


def test_migrate_binds_patch_to_settings_custodian(dumped, legacy_genesis, genesis, indicatives, premiums, settings):
    with patch("starname_genesis.migration.pipeline.get_patch", return_value=None) as get_patch:
        migrate(_inputs(dumped, legacy_genesis, genesis, indicatives, premiums), settings)
    get_patch.assert_called_once_with("starname-test", CUSTODIAN_STAR1)


def test_derive_valid_until_from_iov_domain(genesis):
    assert derive_valid_until(genesis, "315576000") == BASE_VALID_UNTIL


def test_derive_valid_until_from_genesis_time(genesis):
    genesis["app_state"]["starname"]["domains"] = []
    # 2020-10-14T08:30:00Z + 10 years
    assert derive_valid_until(genesis, "315576000") == str(1602664200 + 315576000)


def test_derive_valid_until_needs_a_source():
    with pytest.raises(MalformedInputError):
        derive_valid_until({"app_state": {}}, "315576000")
