"""
Pytest fixtures for starname-genesis tests: a miniature legacy dump, legacy
genesis, indicative sends, premiums and a base starname genesis.

Every fixture builds fresh dicts since the migration mutates them in place.
"""

from __future__ import annotations

import pytest

from starname_genesis.config.registries import CHAIN_IDS, CUSTODIAN_IOV1, MULTISIGS, SOURCE2MULTISIG
from starname_genesis.config.settings import MigrationSettings
from starname_genesis.migration.models import Premium

# legacy addresses
REWARD = "iov1k0dp2fmdunscuwjjusqtk6mttx5ufk3zpwj90n"
CUSTODIAN = CUSTODIAN_IOV1
GUARANTEED = "iov1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqvnwh0u"
ISABELLA = "iov1w2suyhrfcrv5h4wmq3rk3v4x95cxtu0a03gy6x"
DAVE = "iov1qnpaklxv4n6cam7v99hl0tg0dkmu97sh6007un"
ALPHA = "iov16a42lf29n2h2eurxryspue9fz2d2wnlgpyjv8d"
CONFIO = "iov1j43xew5yq7ap2kesgjnlzru0z22grs94qsyf98"
CORENTIN = "iov1m7qjqjuv4ynhzu40xranun4u0r47d4waxc4wh9"
BTC13 = "iov1yhk8qqp3wsdg7tefd8u457n9zqsny4nqzp6960"
LEDGER = "iov1fpezwaxfnmef8tyyg4t7avz9a2d9gqh3yh8d8n"
SENDER = "iov1a9duw7yyxdfh8mrjxmuc0slu8a48muvxkcxvg8"
PREMIUM_ONLY = "iov1q40tvnph5xy7cjyj3tmqzghukeheykudq246d6"
ESCROW1 = "iov170qvwm0tscn5mza3vmaerkzqllvwc3kykkt7kj"
ESCROW2 = "iov105465l8l3yn06a56h7tqwwvnqq22e8j4nvgf02"
ESCROW3 = "iov17gdpegksje9dlh8h0g6ehgk6d4anz9pkfskunr"
INDICATIVE_RECIPIENT = "iov10v69k57z2v0pr3yvtr60pp8g2jx8tdd7f55sv6"

# new addresses
DAVE_STAR1 = "star1478t4fltj689nqu83vsmhz27quk7uggjwe96yk"
ALPHA_STAR1 = "star1ayxmc4vqshd9j94hj67r55ppg5hsrhqlmy4dvd"
BTC13_STAR1 = "star1qvpth6t72336fjxlej2xv8eu84hrpxdxf5rgzz"
BTC13_MEMO_STAR1 = "star1cnywewxct2p4d5j2fapgkse6yxgh7ecnj4uwpu"
SENDER_STAR1 = "star19m9ufykj5ur67l822fpxvz49p535wp3j0m5v3h"
REWARD_STAR1 = MULTISIGS[REWARD].star1
CUSTODIAN_STAR1 = MULTISIGS[CUSTODIAN].star1

BASE_VALID_UNTIL = "1700000000"


def coins(whole: int, fractional: int = 0) -> list[dict]:
    coin = {"ticker": "IOV", "whole": whole}
    if fractional:
        coin["fractional"] = fractional
    return [coin]


def make_dump() -> dict:
    return {
        "cash": [
            {"address": GUARANTEED, "coins": coins(35384615)},
            {"address": DAVE, "coins": coins(416, 510000000)},
            {"address": REWARD, "coins": coins(37)},
            {"address": CONFIO, "coins": coins(3234710)},
            {"address": ESCROW1, "coins": coins(2347987)},
            {"address": ESCROW2, "coins": coins(269559)},
            {"address": ESCROW3, "coins": coins(269559)},
            {"address": CORENTIN, "coins": coins(26, 500000000)},
            {"address": CUSTODIAN, "coins": coins(1, 123000)},
            {"address": SENDER, "coins": coins(10)},
            {"address": PREMIUM_ONLY, "coins": coins(22171)},
        ],
        "escrow": [
            {
                "address": ESCROW1,
                "amount": coins(2347987),
                "arbiter": REWARD,
                "destination": REWARD,
                "source": GUARANTEED,
                "timeout": 1888963200,
            },
            {
                "address": ESCROW2,
                "amount": coins(269559),
                "arbiter": GUARANTEED,
                "destination": GUARANTEED,
                "source": ISABELLA,
                "timeout": 1575979200,
            },
            {
                "address": ESCROW3,
                "amount": coins(269559),
                "arbiter": GUARANTEED,
                "destination": GUARANTEED,
                "source": ISABELLA,
                "timeout": 1578657600,
            },
        ],
        "username": [
            {
                "Owner": ALPHA,
                "Targets": [
                    {"address": ALPHA, "blockchain_id": "iov-mainnet"},
                    {"address": "0x52dBf411B22Af67f33425bf3fbb6B8CF8FB302cd", "blockchain_id": "ethereum-eip155-1"},
                    {"address": "cosmos15dafemy5pkaru4kf23s3e6mnugfv6et9kg2uz7", "blockchain_id": "cosmos-cosmoshub-3"},
                    {"address": ALPHA_STAR1, "blockchain_id": "starname-migration"},
                ],
                "Username": "alpha*iov",
            },
            {
                "Owner": DAVE,
                "Targets": [
                    {"address": DAVE_STAR1, "blockchain_id": "starname-migration"},
                    {"address": DAVE, "blockchain_id": "iov-mainnet"},
                ],
                "Username": "dave*iov",
            },
            {
                "Owner": CONFIO,
                "Targets": [{"address": CONFIO, "blockchain_id": "iov-mainnet"}],
                "Username": "confio*iov",
            },
            {
                "Owner": CORENTIN,
                "Targets": [
                    {"address": "0x5e415520beb66aa39e00d43cae889f2c5cba7017", "blockchain_id": "ethereum-eip155-1"}
                ],
                "Username": "corentin*iov",
            },
            {
                "Owner": BTC13,
                "Targets": [
                    {"address": BTC13_STAR1, "blockchain_id": "starname-migration"},
                    {"address": BTC13, "blockchain_id": "iov-mainnet"},
                ],
                "Username": "btc13*iov",
            },
            {
                "Owner": LEDGER,
                "Targets": [{"address": LEDGER, "blockchain_id": "iov-mainnet"}],
                "Username": "ledger*iov",
            },
        ],
        "contract": [],
        "height": 12345,
    }


def make_indicatives() -> list[dict]:
    return [
        {
            "block_height": 65609,
            "message": {
                "path": "cash/send",
                "details": {
                    "memo": BTC13_MEMO_STAR1,
                    "amount": {"whole": 1, "ticker": "IOV"},
                    "source": BTC13,
                    "destination": INDICATIVE_RECIPIENT,
                },
            },
        },
        {
            "block_height": 67029,
            "message": {
                "path": "cash/send",
                "details": {
                    "memo": SENDER_STAR1,
                    "amount": {"ticker": "IOV", "fractional": 1},
                    "source": SENDER,
                    "destination": INDICATIVE_RECIPIENT,
                },
            },
        },
    ]


def make_legacy_genesis() -> dict:
    return {
        "chain_id": "iov-mainnet",
        "app_state": {
            "cash": [
                {"address": f"bech32:{DAVE}", "coins": ["416.51 IOV"], "//id": 2165},
                {"address": f"bech32:{CONFIO}", "coins": ["3234710 IOV"], "//id": 1954},
            ],
        },
    }


def make_genesis(chain_id: str = "starname-test") -> dict:
    return {
        "chain_id": chain_id,
        "genesis_time": "2020-10-14T08:30:00Z",
        "app_state": {
            "auth": {"accounts": [], "params": {"max_memo_characters": "256"}},
            "starname": {
                "domains": [
                    {
                        "name": "iov",
                        "admin": "star1ml9muux6m8w69532lwsu40caecc3vmg2s9nrtg",
                        "valid_until": BASE_VALID_UNTIL,
                        "type": "open",
                        "account_renew": "3000",
                        "broker": None,
                    }
                ],
                "accounts": [],
            },
        },
    }


def make_premiums() -> dict[str, Premium]:
    return {
        DAVE: Premium(star1="", starnames=["dave"]),
        PREMIUM_ONLY: Premium(star1="", starnames=["hash"]),
    }


@pytest.fixture
def dumped():
    return make_dump()


@pytest.fixture
def indicatives():
    return make_indicatives()


@pytest.fixture
def legacy_genesis():
    return make_legacy_genesis()


@pytest.fixture
def genesis():
    return make_genesis()


@pytest.fixture
def premiums():
    return make_premiums()


@pytest.fixture
def multisigs():
    """Registry subset whose wallets are all in the miniature dump."""
    return {REWARD: MULTISIGS[REWARD], CUSTODIAN: MULTISIGS[CUSTODIAN]}


@pytest.fixture
def source2multisig():
    return dict(SOURCE2MULTISIG)


@pytest.fixture
def settings(multisigs, tmp_path):
    return MigrationSettings(
        multisigs=multisigs,
        chain_ids=dict(CHAIN_IDS),
        chain_id="starname-test",
        home=tmp_path / "home",
        binary="starnamed",
        gentx_timeout=5.0,
        request_timeout=1.0,
    )
