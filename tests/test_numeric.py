from __future__ import annotations

import pytest

from settlement_pipeline.numeric import (
    parse_or_default,
    parse_percent_or_default,
    percent_change,
    round_half_away,
    to_wan,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", 123.45),
        (" -50 ", -50.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("12.5元", 12.5),
        ("", 0.0),
        ("abc", 0.0),
        ("nan", 0.0),
        (None, 0.0),
    ],
)
def test_parse_or_default(text: str | None, expected: float) -> None:
    assert parse_or_default(text) == expected


def test_parse_percent_strips_trailing_sign() -> None:
    assert parse_percent_or_default("98%") == 98.0
    assert parse_percent_or_default(" 97.5% ") == 97.5
    assert parse_percent_or_default("n/a") == 0.0


def test_round_half_away_from_zero() -> None:
    assert round_half_away(0.125) == 0.13
    assert round_half_away(-0.125) == -0.13
    assert round_half_away(2.5, 0) == 3.0
    assert round_half_away(-2.5, 0) == -3.0
    assert round_half_away(float("inf")) == 0.0


def test_to_wan_scales_and_rounds() -> None:
    assert to_wan(300) == 0.03
    assert to_wan(333000) == 33.3
    assert to_wan(0) == 0.0


def test_percent_change_guards_zero_prior() -> None:
    assert percent_change(110, 100) == 10.0
    assert percent_change(90, 100) == -10.0
    assert percent_change(1, 3) == -66.67
    assert percent_change(5, 0) == 0.0
