"""
Tests for the build_genesis CLI. Inputs are written to tmp files; settings
are patched to the miniature registry and the legacy genesis is always given
on the command line, so nothing touches the network or the chain binary.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from starname_genesis.tools.build_genesis import build_parser, main
from tests.conftest import (
    DAVE,
    DAVE_STAR1,
    GUARANTEED,
    PREMIUM_ONLY,
    make_dump,
    make_genesis,
    make_indicatives,
    make_legacy_genesis,
)

GET_SETTINGS = "starname_genesis.tools.build_genesis.get_settings"


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def inputs(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "premium.csv").write_text(f"{DAVE},,dave\n{PREMIUM_ONLY},,hash\n", encoding="utf-8")
    (data / "reserveds.csv").write_text("domain\nyolo\nab\nBitcoin\n", encoding="utf-8")
    return {
        "dump": _write(data / "dump.json", make_dump()),
        "legacy": _write(data / "osaka.json", {"result": {"genesis": make_legacy_genesis()}}),
        "genesis": _write(data / "genesis.json", make_genesis()),
        "indicatives": _write(data / "indicatives.json", make_indicatives()),
        "premiums": data / "premium.csv",
        "reserveds": data / "reserveds.csv",
    }


def _argv(inputs, home) -> list[str]:
    return [
        "--dump", str(inputs["dump"]),
        "--legacy-genesis", str(inputs["legacy"]),
        "--genesis", str(inputs["genesis"]),
        "--indicatives", str(inputs["indicatives"]),
        "--premiums", str(inputs["premiums"]),
        "--reserveds", str(inputs["reserveds"]),
        "--flammable", GUARANTEED,
        "--home", str(home),
    ]


def test_parser_defaults():
    args = build_parser().parse_args(["--dump", "d", "--genesis", "g", "--indicatives", "i"])
    assert args.legacy_genesis is None
    assert args.flammable == []
    assert args.reserved_pattern == r"^[-_a-z0-9]{4,16}$"


def test_parser_requires_dump():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--genesis", "g", "--indicatives", "i"])


def test_main_writes_genesis(inputs, settings, tmp_path):
    home = tmp_path / "node"
    with patch(GET_SETTINGS, return_value=settings):
        assert main(_argv(inputs, home)) == 0

    genesis = json.loads((home / "config" / "genesis.json").read_text(encoding="utf-8"))
    accounts = {a["value"]["address"]: a for a in genesis["app_state"]["auth"]["accounts"]}
    assert accounts[DAVE_STAR1]["//iov1"] == DAVE
    domains = [d["name"] for d in genesis["app_state"]["starname"]["domains"]]
    # "ab" fails the default pattern; "Bitcoin" is lowercased
    assert "yolo" in domains and "bitcoin" in domains and "ab" not in domains


def test_main_chain_id_override(inputs, settings, tmp_path):
    home = tmp_path / "node"
    with patch(GET_SETTINGS, return_value=settings):
        assert main(_argv(inputs, home) + ["--chain-id", "jestnet"]) == 0

    genesis = json.loads((home / "config" / "genesis.json").read_text(encoding="utf-8"))
    assert genesis["chain_id"] == "jestnet"
    assert genesis["app_state"]["starname"]["domains"][0]["account_renew"] == "3600"


def test_main_failure_writes_nothing(inputs, settings, tmp_path):
    dump = make_dump()
    dump["escrow"][0]["source"] = DAVE
    _write(inputs["dump"], dump)
    home = tmp_path / "node"
    with patch(GET_SETTINGS, return_value=settings):
        assert main(_argv(inputs, home)) == 1
    assert not (home / "config" / "genesis.json").exists()


def test_main_missing_input(inputs, settings, tmp_path):
    inputs["dump"] = tmp_path / "missing.json"
    with patch(GET_SETTINGS, return_value=settings):
        assert main(_argv(inputs, tmp_path / "node")) == 1
