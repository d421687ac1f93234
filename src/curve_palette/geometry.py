from __future__ import annotations

from math import atan2, cos, degrees, hypot, sin
from typing import NamedTuple


class Polar(NamedTuple):
    r: float
    theta: float  # radians, (-pi, pi]


def cart_to_polar(x: float, y: float) -> Polar:
    return Polar(hypot(x, y), atan2(y, x))


def polar_to_cart(r: float, theta: float) -> tuple[float, float]:
    return r * cos(theta), r * sin(theta)


def rotate(x: float, y: float, angle: float) -> tuple[float, float]:
    """Rotate (x, y) counter-clockwise about the origin by `angle` radians."""
    c, s = cos(angle), sin(angle)
    return x * c - y * s, x * s + y * c


def hue_degrees(theta: float) -> float:
    """Polar angle → hue in [0, 360)."""
    h = degrees(theta) % 360.0
    # -1e-17 % 360 rounds up to 360.0
    return 0.0 if h >= 360.0 else h


__all__ = ["Polar", "cart_to_polar", "polar_to_cart", "rotate", "hue_degrees"]
