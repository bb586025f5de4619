"""Address helpers for the legacy (iov1) and new (star1) bech32 schemes."""

from __future__ import annotations

import re

_BECH32_CHARS = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

RE_STAR1 = re.compile(rf"star1[{_BECH32_CHARS}]{{38}}")
RE_IOV1 = re.compile(rf"iov1[{_BECH32_CHARS}]{{38}}")


def is_star1(address: str) -> bool:
    """Return True if address is a well-formed new-scheme address."""
    return bool(RE_STAR1.fullmatch((address or "").strip()))


def is_iov1(address: str) -> bool:
    """Return True if address is a well-formed legacy address."""
    return bool(RE_IOV1.fullmatch((address or "").strip()))


def find_star1(text: str) -> str | None:
    """First new-scheme address embedded in text (e.g. a memo), or None."""
    m = RE_STAR1.search(text or "")
    return m.group(0) if m else None
