"""
Application-level exceptions.

Every failure of the migration is fatal: stages raise one of these, nothing
catches them below the CLI, and no genesis file is written for a failed run.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base class for all migration failures."""


class NotFoundError(MigrationError):
    """A wallet, address, name or account required by a stage is absent."""


class ConflictingIdentityError(MigrationError):
    """Two authoritative sources map one legacy address to different new addresses."""

    def __init__(self, iov1: str, current: str, claimed: str) -> None:
        super().__init__(f"{iov1} maps to {current} but an indicative send claims {claimed}.")
        self.iov1 = iov1
        self.current = current
        self.claimed = claimed


class MalformedMemoError(MigrationError):
    """An indicative send's memo does not embed a new-scheme address."""


class UnknownEscrowSourceError(MigrationError):
    """An escrow's source has no consolidation target."""


class ExternalToolError(MigrationError):
    """The chain binary failed; output holds everything it printed."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(f"{message}\n{output}" if output else message)
        self.output = output


class NetworkIdentityMismatchError(MigrationError):
    """A network patch was applied to a genesis of another chain."""


class SupplyMismatchError(MigrationError):
    """Migrated balances plus burns do not add up to the legacy supply."""


class MalformedInputError(MigrationError):
    """An input document is missing a section the migration relies on."""
