# surfaces.py – the bounded domains a curve lives on
#   - UnitCircle: centre (0, 0), radius 1, used for hue/saturation
#   - UnitSquare: [0, 1] × [0, 1], used for lightness

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Union

from .geometry import cart_to_polar, polar_to_cart

log = logging.getLogger(__name__)

# points this close to the boundary count as inside (float noise from rotation)
_EPS = 1e-9


@dataclass(frozen=True)
class UnitCircle:
    type: ClassVar[str] = "unitCircle"
    cx: float = 0.0
    cy: float = 0.0
    r: float = 1.0

    @property
    def center(self) -> tuple[float, float]:
        return (self.cx, self.cy)

    @property
    def range(self) -> tuple[float, float]:
        return (-1.0, 1.0)

    def out_of_bounds(self, x: float, y: float) -> bool:
        dx, dy = x - self.cx, y - self.cy
        return dx * dx + dy * dy > self.r * self.r

    def clamp(self, x: float, y: float) -> tuple[float, float, bool]:
        """Pull the radius back into [-1, 1], keeping the angle."""
        polar = cart_to_polar(x, y)
        clamped = polar.r > 1.0 + _EPS or polar.r < -1.0 - _EPS
        xc, yc = polar_to_cart(max(-1.0, min(1.0, polar.r)), polar.theta)
        return xc, yc, clamped


@dataclass(frozen=True)
class UnitSquare:
    type: ClassVar[str] = "unitSquare"
    cx: float = 0.5
    cy: float = 0.5

    @property
    def center(self) -> tuple[float, float]:
        return (self.cx, self.cy)

    @property
    def range(self) -> tuple[float, float]:
        return (0.0, 1.0)

    def out_of_bounds(self, x: float, y: float) -> bool:
        return x < 0.0 or x > 1.0 or y < 0.0 or y > 1.0

    def clamp(self, x: float, y: float) -> tuple[float, float, bool]:
        clamped = x < -_EPS or x > 1.0 + _EPS or y < -_EPS or y > 1.0 + _EPS
        return min(1.0, max(0.0, x)), min(1.0, max(0.0, y)), clamped


Surface = Union[UnitCircle, UnitSquare]

SURFACES: dict[str, type] = {
    UnitCircle.type: UnitCircle,
    UnitSquare.type: UnitSquare,
}


def make_surface(surface: Surface | str | None) -> Surface:
    """Accept a surface instance or its type name; unknown names → UnitSquare."""
    if isinstance(surface, (UnitCircle, UnitSquare)):
        return surface
    cls = SURFACES.get(surface or "")
    if cls is None:
        log.warning(
            "Invalid surface type %r. Options are 'unitCircle' (for H/S components) "
            "or 'unitSquare' (for L component). Using unitSquare instead.",
            surface,
        )
        return UnitSquare()
    return cls()


__all__ = ["UnitCircle", "UnitSquare", "Surface", "SURFACES", "make_surface"]
