"""Lenient parsing of numbers typed into the setup panels."""

from __future__ import annotations

import re

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: object, default: int = 0) -> int:
    """Read the leading integer of *value*, or return *default*.

    ``"12abc"`` → 12, ``"  7"`` → 7, ``"abc"``/``None``/``""`` → default.
    Floats are truncated toward zero.  Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group(1))


def positive_or_default(value: object, default: int) -> int:
    """Parse *value*; fall back to *default* unless the result is > 0."""
    parsed = parse_int(value)
    return parsed if parsed > 0 else default
