"""
Static registries consumed by the migration.

These are data, not behaviour: every stage receives the tables it needs as an
argument (see settings.MigrationSettings) so tests can substitute their own.
"""

from __future__ import annotations

from starname_genesis.migration.models import EscrowTarget, MultisigAccount

# Legacy address of the multisig that absorbs every unresolved balance/name
CUSTODIAN_IOV1 = "iov195cpqyk5sjh7qwfz8qlmlnz2vw4ylz394smqvc"

# New-scheme admin of reserved domains pending release to the secondary market
RESERVATION_ADMIN = "star1v794jm5am4qpc52kvgmxxm2j50kgu9mjszcq96"

# Reserved domains become available on one of these dates, round-robin (unix seconds)
RELEASES: tuple[int, ...] = (
    1602664200,  # 2020-10-14T08:30:00Z
    1605083400,  # 2020-11-11T08:30:00Z
    1607502600,  # 2020-12-09T08:30:00Z
    1610526600,  # 2021-01-13T08:30:00Z
    1613529000,  # 2021-02-17T02:30:00Z
    1615986000,  # 2021-03-17T13:00:00Z
    1618961400,  # 2021-04-20T23:30:00Z
    1621418400,  # 2021-05-19T10:00:00Z
)

MULTISIGS: dict[str, MultisigAccount] = {
    "iov1k0dp2fmdunscuwjjusqtk6mttx5ufk3zpwj90n": MultisigAccount(
        name="reward fund",
        cond="cond:gov/rule/0000000000000002",
        star1="star1scfumxscrm53s4dd3rl93py5ja2ypxmxlhs938",
    ),
    "iov1tt3vtpukkzk53ll8vqh2cv6nfzxgtx3t52qxwq": MultisigAccount(
        name="IOV SAS",
        cond="cond:multisig/usage/0000000000000001",
        star1="star1nrnx8mft8mks3l2akduxdjlf8rwqs8r9l36a78",
    ),
    "iov1zd573wa38pxfvn9mxvpkjm6a8vteqvar2dwzs0": MultisigAccount(
        name="IOV SAS employee bonus pool/colloboration appropriation pool",
        cond="cond:multisig/usage/0000000000000002",
        star1="star16tm7scg0c2e04s0exk5rgpmws2wk4xkd84p5md",
    ),
    "iov1ppzrq5gwqlcsnwdvlz7x9mu98fntmp65m9a3mz": MultisigAccount(
        name="IOV SAS pending deals pocket; close deal or burn",
        cond="cond:multisig/usage/0000000000000003",
        star1="star1uyny88het6zaha4pmkwrkdyj9gnqkdfe4uqrwq",
    ),
    "iov1ym3uxcfv9zar2md0xd3hq2vah02u3fm6zn8mnu": MultisigAccount(
        name="IOV SAS bounty fund",
        cond="cond:multisig/usage/0000000000000004",
        star1="star1m7jkafh4gmds8r0w79y2wu2kvayqvrwt7cy7rf",
    ),
    "iov1myq53ry9pa6awl88m0xgp224q0dgwjdvz2dcsw": MultisigAccount(
        name="Unconfirmed contributors/co-founders",
        cond="cond:multisig/usage/0000000000000005",
        star1="star1p0d75y4vpftsx9z35s93eppkky7kdh220vrk8n",
    ),
    CUSTODIAN_IOV1: MultisigAccount(
        name="Custodian of missing star1 accounts",
        cond="cond:multisig/usage/0000000000000006",
        star1="star12uv6k3c650kvm2wpa38wwlq8azayq6tlh75d3y",
    ),
}

# Escrow source (legacy) -> consolidated escrow account (new)
SOURCE2MULTISIG: dict[str, EscrowTarget] = {
    "iov1w2suyhrfcrv5h4wmq3rk3v4x95cxtu0a03gy6x": EscrowTarget(
        label="escrow isabella*iov",
        star1="star1elad203jykd8la6wgfnvk43rzajyqpk0wsme9g",
    ),
    "iov1v9pzqxpywk05xn2paf3nnsjlefsyn5xu3nwgph": EscrowTarget(
        label="escrow kadima*iov",
        star1="star1hjf04872s9rlcdg2wqwvapwttvt3p4gjpp0xmc",
    ),
    "iov149cn0rauw2773lfdp34njyejg3cfz2d56c0m5t": EscrowTarget(
        label="escrow joghurt*iov",
        star1="star15u4kl3lalt8pm2g4m23erlqhylz76rfh50cuv8",
    ),
    "iov1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqvnwh0u": EscrowTarget(
        label="vaildator guaranteed reward fund",
        star1="star17w7fjdkr9laphtyj4wxa32rf0evu94xgywxgl4",
    ),
}

# Legacy blockchain ids -> CAIP-style asset uris used by starname resources
CHAIN_IDS: dict[str, str] = {
    "cosmos-cosmoshub-3": "asset:atom",
    "ethereum-eip155-1": "asset:eth",
    "iov-mainnet": "asset:iov",
    "lisk-ed14889723": "asset:lsk",
    "starname-migration": "asset:iov",
}
