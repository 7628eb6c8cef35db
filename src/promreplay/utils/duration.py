"""Duration parsing utilities.

Durations use the Prometheus notation: a sequence of integer/unit pairs in
decreasing unit order, e.g. ``"1h30m"``, ``"15s"`` or ``"500ms"``.
All functions raise ValueError for invalid input.
"""

from __future__ import annotations

import re
from datetime import timedelta

__all__ = ["parse_duration"]

_DURATION_PATTERN = re.compile(
    r"^(?:(?P<y>\d+)y)?(?:(?P<w>\d+)w)?(?:(?P<d>\d+)d)?(?:(?P<h>\d+)h)?"
    r"(?:(?P<m>\d+)m)?(?:(?P<s>\d+)s)?(?:(?P<ms>\d+)ms)?$"
)

# Unit lengths in milliseconds
_UNIT_MS = {
    "y": 365 * 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "h": 60 * 60 * 1000,
    "m": 60 * 1000,
    "s": 1000,
    "ms": 1,
}


def parse_duration(value: str | int | float | timedelta) -> float:
    """Parse a duration to seconds.

    Args:
        value: Duration in one of:
            - timedelta: converted to seconds
            - int/float: already in seconds
            - str: Prometheus duration string ("0" is accepted)

    Returns:
        float: Duration in seconds.

    Raises:
        ValueError: If the input is empty, negative or has an invalid format.

    Examples:
        >>> parse_duration("1m30s")
        90.0
        >>> parse_duration(2.5)
        2.5
    """
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool):
        raise ValueError("Duration cannot be a boolean")
    elif isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Duration string cannot be empty")
        if text == "0":
            return 0.0

        match = _DURATION_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Invalid duration {value!r}. Expected a value like '15s', '1m30s' or '1d'.")

        total_ms = 0
        for unit, amount in match.groupdict().items():
            if amount is not None:
                total_ms += int(amount) * _UNIT_MS[unit]
        seconds = total_ms / 1000
    else:
        raise ValueError(f"Unsupported duration type: {type(value)}. Expected str, int, float or timedelta.")

    if seconds < 0:
        raise ValueError(f"Duration cannot be negative: {value!r}")
    return seconds
