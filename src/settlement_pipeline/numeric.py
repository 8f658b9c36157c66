"""Numeric helpers: tolerant cell parsing and currency rounding."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

# Leading decimal number, optional sign and exponent (locale-free)
NUMBER_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

TEN_THOUSAND = 10000
THOUSAND = 1000


def parse_or_default(text: str | None, default: float = 0.0) -> float:
    """Parse the leading decimal number of a cell, falling back to `default`.

    Trailing garbage after the number is ignored ("12.5元" -> 12.5). Empty,
    non-numeric or non-finite input returns `default`; this never raises.
    """
    if text is None:
        return default
    m = NUMBER_PREFIX_RE.match(text)
    if not m:
        return default
    value = float(m.group(1))
    if not math.isfinite(value):
        return default
    return value


def parse_percent_or_default(text: str | None, default: float = 0.0) -> float:
    """Like `parse_or_default` but strips a trailing percent sign first."""
    if text is None:
        return default
    return parse_or_default(text.strip().rstrip("%"), default)


def round_half_away(value: float, places: int = 2) -> float:
    """Round half away from zero to `places` decimals.

    Uses the shortest repr of the float so that values such as 1.005 round
    the way they read.
    """
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def to_wan(raw: float) -> float:
    """Scale a yuan amount to 万 (ten thousand), rounded to 2 decimals."""
    return round_half_away(raw / TEN_THOUSAND)


def percent_change(current: float, prior: float) -> float:
    """Signed percentage change to 2 decimals; 0 when `prior` is not positive."""
    if prior <= 0:
        return 0.0
    return round_half_away((current - prior) / prior * 10000, 0) / 100
