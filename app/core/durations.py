"""Parse token lifetimes written as a number plus a unit ("90s", "30m", "24h", "7d")."""

import re
from datetime import timedelta

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "wk": 604800,
    "weeks": 604800,
}


def parse_duration(value: str | int | float) -> timedelta:
    """
    Convert a duration such as "24h" or "7d" to a timedelta.

    A bare number (or numeric string) is read as seconds. Raises ValueError for
    unknown units, negative or zero durations, and unparseable input.
    """
    if isinstance(value, bool):
        raise ValueError("Duration must be a number or a string like '24h'")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        match = _DURATION_RE.match(value or "")
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        unit = unit.lower() or "s"
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit {unit!r} in {value!r}")
        seconds = float(amount) * _UNIT_SECONDS[unit]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
