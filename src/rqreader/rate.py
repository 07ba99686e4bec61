"""Word-rate parsing and the arithmetic that turns a rate into a dwell time."""
from __future__ import annotations

import re
from typing import Mapping


DEFAULT_RATE = 120  # 2 Hz
RATE_DELTA = 10
MINIMUM_RATE = 1

_MICROSECONDS_PER_MINUTE = 60_000_000
_MICROSECONDS_PER_SECOND = 1_000_000

_PER_MINUTE = 1
_PER_SECOND = 60

UNIT_MULTIPLIERS: Mapping[str, int] = {
    "": _PER_MINUTE,
    "wpm": _PER_MINUTE,
    "w/m": _PER_MINUTE,
    "/m": _PER_MINUTE,
    "wpmin": _PER_MINUTE,
    "w/min": _PER_MINUTE,
    "/min": _PER_MINUTE,
    "wps": _PER_SECOND,
    "w/s": _PER_SECOND,
    "/s": _PER_SECOND,
    "wpsec": _PER_SECOND,
    "w/sec": _PER_SECOND,
    "/sec": _PER_SECOND,
    "hz": _PER_SECOND,
}

_RATE_PATTERN = re.compile(r"([0-9]+)[ \t]*(.*)", re.DOTALL)


def parse_rate_strict(text: str) -> int | None:
    """Return the rate in words per minute described by ``text``.

    ``None`` is returned when ``text`` does not start with a digit, the
    number is zero, or the unit suffix is unknown.
    """

    match = _RATE_PATTERN.fullmatch(text)
    if match is None:
        return None
    value = int(match.group(1))
    if value <= 0:
        return None
    multiplier = UNIT_MULTIPLIERS.get(match.group(2).lower())
    if multiplier is None:
        return None
    return value * multiplier


def parse_rate(text: str | None, *, default: int = DEFAULT_RATE) -> int:
    """Parse ``text`` leniently, falling back to ``default`` on any problem."""

    if not text:
        return default
    rate = parse_rate_strict(text)
    if rate is None:
        return default
    return rate


def clamp_rate(rate: int) -> int:
    """Keep ``rate`` at or above :data:`MINIMUM_RATE`."""

    return rate if rate >= MINIMUM_RATE else MINIMUM_RATE


def adjust_rate(rate: int, delta: int) -> int:
    """Return ``rate`` moved by ``delta`` without dropping below the minimum."""

    return clamp_rate(rate + delta)


def dwell_microseconds(rate: int) -> int:
    """Return how long one word stays on screen at ``rate``, in microseconds.

    The result is at least one microsecond; a zero interval would disarm the
    interval timer rather than fire it.
    """

    return max(1, _MICROSECONDS_PER_MINUTE // clamp_rate(rate))


def dwell_seconds(rate: int) -> float:
    return dwell_microseconds(rate) / _MICROSECONDS_PER_SECOND


__all__ = [
    "DEFAULT_RATE",
    "MINIMUM_RATE",
    "RATE_DELTA",
    "UNIT_MULTIPLIERS",
    "adjust_rate",
    "clamp_rate",
    "dwell_microseconds",
    "dwell_seconds",
    "parse_rate",
    "parse_rate_strict",
]
