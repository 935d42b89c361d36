"""
src/chart/formatting.py — Number formatting for axis ticks and tooltips
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

SI_PREFIXES = ["y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y"]


def _significant_digits(x: float, precision: int) -> tuple[str, int]:
    """Round |x| to `precision` significant digits: (digit string, decimal exponent)."""
    d = Decimal(repr(x))
    exponent = d.adjusted()
    quantum = Decimal(1).scaleb(-(precision - 1))
    coefficient = d.scaleb(-exponent).quantize(quantum, rounding=ROUND_HALF_UP)
    if coefficient >= 10:  # 9.6 -> 10 at one digit
        exponent += 1
        coefficient = (coefficient / 10).quantize(quantum, rounding=ROUND_HALF_UP)
    return str(coefficient).replace(".", ""), exponent


def format_si(value: float, precision: int = 1, trim: bool = False) -> str:
    """Format with an SI prefix and `precision` significant digits.

    Matches d3.format(".1s"): 2 -> "2", 10 -> "10", 1500 -> "2k", 0.5 -> "500m".
    With trim, trailing zeros after the point are dropped, like d3 "~s".
    """
    if value == 0 or not math.isfinite(value):
        return "0" if value == 0 else str(value)
    sign = "-" if value < 0 else ""
    digits, exponent = _significant_digits(abs(value), precision)
    prefix_exponent = max(-8, min(8, math.floor(exponent / 3)))
    i = exponent - prefix_exponent * 3 + 1
    n = len(digits)
    if i == n:
        body = digits
    elif i > n:
        body = digits + "0" * (i - n)
    else:
        body = digits[:i] + "." + digits[i:]
        if trim:
            body = body.rstrip("0").rstrip(".")
    return f"{sign}{body}{SI_PREFIXES[8 + prefix_exponent]}"


def format_thousands(value: float) -> str:
    """Group thousands with commas, drop trailing zeros: 1234.5 -> "1,234.5", 10.0 -> "10"."""
    return format(value, ",.12g")
