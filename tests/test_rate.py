from __future__ import annotations

import pytest

from rqreader.rate import (
    DEFAULT_RATE,
    MINIMUM_RATE,
    adjust_rate,
    dwell_microseconds,
    dwell_seconds,
    parse_rate,
    parse_rate_strict,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("90hz", 5400),
        ("200wpm", 200),
        ("150 /min", 150),
        ("300", 300),
        ("300 ", 300),
        ("2WPS", 120),
        ("5 w/sec", 300),
        ("45w/m", 45),
        ("10/s", 600),
    ],
)
def test_parse_rate_accepts_known_units(text: str, expected: int) -> None:
    assert parse_rate(text) == expected


@pytest.mark.parametrize("text", ["abc", "-5", "", "0", "0hz", " 120", "120 furlongs", "12.5"])
def test_parse_rate_falls_back_to_default(text: str) -> None:
    assert parse_rate(text) == DEFAULT_RATE
    assert parse_rate_strict(text) is None


def test_parse_rate_missing_value_uses_default() -> None:
    assert parse_rate(None) == DEFAULT_RATE
    assert parse_rate(None, default=250) == 250
    assert parse_rate("bogus", default=250) == 250


def test_repeated_decrement_never_drops_below_one() -> None:
    rate = 5
    for _ in range(5):
        rate = adjust_rate(rate, -10)
        assert rate >= MINIMUM_RATE
        assert dwell_microseconds(rate) > 0
    assert rate == 1


def test_dwell_time_follows_rate() -> None:
    assert dwell_seconds(120) == pytest.approx(0.5)
    assert dwell_microseconds(60) == 1_000_000
    assert dwell_microseconds(0) == 60_000_000


def test_dwell_time_never_reaches_zero() -> None:
    assert dwell_microseconds(10**9) == 1
