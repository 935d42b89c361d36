"""
src/chart/scales.py — Linear and band scales

Follows d3-scale semantics so ticks, nice bounds and band positions match
what a d3 chart of the same data would draw:

  LinearScale   continuous domain -> continuous range, with nice() and ticks()
  BandScale     discrete domain -> evenly spaced, padded bands
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _js_round(x: float) -> int:
    """Round half up, like Math.round."""
    return math.floor(x + 0.5)


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** (-power) / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10**power * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Step between ticks; negative values mean 1/|step| (exact for fractions)."""
    stop, start, count = float(stop), float(start), float(count)
    if count <= 0 or stop <= start:
        return 0.0
    return _tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float) -> list[float]:
    """Roughly `count` round-numbered values spanning [start, stop]."""
    if count <= 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(n)]
    else:
        values = [(i1 + i) * inc for i in range(n)]
    return values[::-1] if reverse else values


class LinearScale:
    """Maps a numeric domain linearly onto a pixel range."""

    def __init__(self, domain: Sequence[float], range_: Sequence[float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def nice(self, count: int = 10) -> "LinearScale":
        """Extend the domain outward to round numbers. Never shrinks it."""
        start, stop = self.domain
        if stop < start:
            raise ValueError("descending domains are not supported")
        prestep: Optional[float] = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == prestep:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            prestep = step
        self.domain = (start, stop)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


class BandScale:
    """Discrete domain -> bands of equal width.

    `padding` sets both inner and outer padding, as a fraction of the step.
    Bands are centred in the range.
    """

    def __init__(
        self,
        domain: Sequence[str],
        range_: Sequence[float],
        padding: float = 0.0,
        align: float = 0.5,
    ):
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding_inner = padding
        self.padding_outer = padding
        self.align = align
        self._index = {name: i for i, name in enumerate(self.domain)}

        n = len(self.domain)
        r0, r1 = self.range
        self.step = (r1 - r0) / max(1, n - self.padding_inner + self.padding_outer * 2)
        self.start = r0 + (r1 - r0 - self.step * (n - self.padding_inner)) * self.align
        self.bandwidth = self.step * (1 - self.padding_inner)

    def __call__(self, name: str) -> float:
        try:
            i = self._index[name]
        except KeyError:
            raise KeyError(f"{name!r} is not in the band domain") from None
        return self.start + self.step * i

    def center(self, name: str) -> float:
        return self(name) + self.bandwidth / 2
