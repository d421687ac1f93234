# easing.py – normalized easing functions f: [0, 1] → R with f(0)=0, f(1)=1
#
# Same families and constants as d3-ease (Penner's equations), so a curve
# drawn here matches one drawn in the browser.

from __future__ import annotations

from math import asin, cos, pi, sin
from typing import Callable, Literal

EaseFn = Callable[[float], float]
Variation = Literal["in", "out", "in-out"]

VARIATIONS: tuple[str, ...] = ("in", "out", "in-out")

_HALF_PI = pi / 2
_TAU = 2 * pi


def _tpmt(x: float) -> float:
    # 2^(-10x) rescaled so that tpmt(0)=1 and tpmt(1)=0
    return (2.0 ** (-10.0 * x) - 0.0009765625) * 1.0009775171065494


def _in_out(ease_in: EaseFn, ease_out: EaseFn) -> dict[str, EaseFn]:
    def in_out(t: float) -> float:
        t *= 2.0
        if t <= 1.0:
            return ease_in(t) / 2.0
        return (1.0 + ease_out(t - 1.0)) / 2.0

    return {"in": ease_in, "out": ease_out, "in-out": in_out}


def linear(t: float) -> float:
    return t


def poly(variation: Variation = "in", exponent: float = 3.0) -> EaseFn:
    e = float(exponent)
    return _in_out(
        lambda t: t**e,
        lambda t: 1.0 - (1.0 - t) ** e,
    )[variation]


def sinusoidal(variation: Variation = "in") -> EaseFn:
    return _in_out(
        lambda t: 1.0 if t == 1.0 else 1.0 - cos(t * _HALF_PI),
        lambda t: sin(t * _HALF_PI),
    )[variation]


def exponential(variation: Variation = "in") -> EaseFn:
    return _in_out(
        lambda t: _tpmt(1.0 - t),
        lambda t: 1.0 - _tpmt(t),
    )[variation]


def back(variation: Variation = "in", overshoot: float = 1.70158) -> EaseFn:
    s = float(overshoot)

    def ease_in(t: float) -> float:
        return t * t * (s * (t - 1.0) + t)

    def ease_out(t: float) -> float:
        t -= 1.0
        return t * t * ((t + 1.0) * s + t) + 1.0

    return _in_out(ease_in, ease_out)[variation]


_B1, _B2, _B3 = 4 / 11, 6 / 11, 8 / 11
_B4, _B5, _B6 = 3 / 4, 9 / 11, 10 / 11
_B7, _B8, _B9 = 15 / 16, 21 / 22, 63 / 64
_B0 = 1 / _B1 / _B1


def _bounce_out(t: float) -> float:
    if t < _B1:
        return _B0 * t * t
    if t < _B3:
        t -= _B2
        return _B0 * t * t + _B4
    if t < _B6:
        t -= _B5
        return _B0 * t * t + _B7
    t -= _B8
    return _B0 * t * t + _B9


def bounce(variation: Variation = "out") -> EaseFn:
    return _in_out(
        lambda t: 1.0 - _bounce_out(1.0 - t),
        _bounce_out,
    )[variation]


def elastic(
    variation: Variation = "in", amplitude: float = 1.5, period: float = 0.3
) -> EaseFn:
    """
    Damped sinusoid. `amplitude` (≥ 1) scales the overshoot, `period` is the
    oscillation period in units of t.
    """
    a = max(1.0, float(amplitude))
    p = float(period) / _TAU
    s = asin(1.0 / a) * p

    def ease_in(t: float) -> float:
        t -= 1.0
        return a * _tpmt(-t) * sin((s - t) / p)

    def ease_out(t: float) -> float:
        return 1.0 - a * _tpmt(t) * sin((t + s) / p)

    def in_out(t: float) -> float:
        t = t * 2.0 - 1.0
        if t < 0.0:
            return a * _tpmt(-t) * sin((s - t) / p) / 2.0
        return (2.0 - a * _tpmt(t) * sin((s + t) / p)) / 2.0

    return {"in": ease_in, "out": ease_out, "in-out": in_out}[variation]


__all__ = [
    "EaseFn",
    "Variation",
    "VARIATIONS",
    "linear",
    "poly",
    "sinusoidal",
    "exponential",
    "back",
    "bounce",
    "elastic",
]
