"""Duration strings such as ``15m`` or ``7d`` used for token lifetimes."""

from __future__ import annotations

import re
from datetime import timedelta

DEFAULT_EXPIRY = timedelta(minutes=15)

_EXPIRY_RE = re.compile(r"^(\d+)([smhd])$")
_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_expiry(value: str | None) -> timedelta:
    """Parse ``<number><s|m|h|d>`` into a timedelta.

    Anything that does not match falls back to 15 minutes.
    """
    match = _EXPIRY_RE.match((value or "").strip())
    if not match:
        return DEFAULT_EXPIRY
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})
