"""PHP shorthand byte values ("256M", "1G") to absolute byte counts."""

import re

_LEADING_INT = re.compile(r"^[+-]?\d+")

# Suffix -> number of 1024 multiplications (g falls through m and k)
_SUFFIX_RANK = {"k": 1, "m": 2, "g": 3}


def leading_int(value: str) -> int:
    """Integer prefix of ``value``, 0 when there is none (PHP ``(int)`` cast)."""
    match = _LEADING_INT.match(value.strip())
    if not match:
        return 0
    return int(match.group(0))


def to_bytes(value: str | int | None) -> int:
    """Convert a size string to bytes.

    Without a k/m/g suffix the string is taken as bytes already. Malformed
    or empty input never raises; it yields 0.
    """
    if value is None:
        return 0
    text = str(value).strip()
    if not text:
        return 0
    number = leading_int(text)
    rank = _SUFFIX_RANK.get(text[-1].lower(), 0)
    return number * (1024**rank)
