"""
Memory accounting helpers

Parses ini-style memory limits ("64M", "1G", "-1") and formats byte counts.
"""

import re

import psutil

UNITS = ["b", "kb", "mb", "gb", "tb", "pb"]

_MULTIPLIERS = {
    "K": 1024,
    "M": 1024 ** 2,
    "G": 1024 ** 3,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_limit(text) -> int:
    """Convert a memory limit to bytes.

    Only an uppercase K/M/G suffix is converted; anything else is returned
    as its leading integer, so "-1" (unlimited) stays -1.
    """
    text = str(text)
    multiplier = _MULTIPLIERS.get(text[-1:])
    if multiplier is not None:
        return _leading_int(text[:-1]) * multiplier
    return _leading_int(text)


def percentage(usage: int, limit_text) -> float:
    """Share of ``limit_text`` used by ``usage`` bytes, 0.0 when unlimited."""
    limit = parse_limit(limit_text)
    if limit <= 0:
        return 0.0
    return round(usage * 100 / limit, 2)


def _format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def humanize(size: int) -> str:
    if size <= 0:
        return "0b"

    # floor(log1024(size)) without float drift on exact powers
    unit_index = 0
    while unit_index < len(UNITS) - 1 and size >= 1024 ** (unit_index + 1):
        unit_index += 1
    return _format_number(round(size / 1024 ** unit_index, 2)) + UNITS[unit_index]


def summary(usage: int, limit_text) -> str:
    return f"{humanize(usage)} / {limit_text} = {percentage(usage, limit_text)}%"


def current_usage() -> int:
    """Resident set size of this process in bytes."""
    return psutil.Process().memory_info().rss
