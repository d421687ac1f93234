from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from . import config
from .curves import Curve

OrientationY = Literal["up", "down"]


@dataclass
class CoordinateSystem:
    """
    Linear map between normalized curve space and canvas pixels.

    The drawable area is the canvas minus `padding` (a fraction of each
    extent) on every side. With `orientation_y="up"` larger normalized y is
    drawn higher on the canvas, i.e. at a smaller pixel y.
    """

    canvas_width: float
    canvas_height: float
    nx_range: tuple[float, float] = (0.0, 1.0)
    ny_range: tuple[float, float] = (0.0, 1.0)
    padding: float = config.CHART_PADDING
    orientation_y: OrientationY = "up"

    # derived, refreshed by resize()
    line_width: float = field(init=False, default=0.0)
    endpoint_line_width: float = field(init=False, default=0.0)
    endpoint_radius: float = field(init=False, default=0.0)
    tick_length: float = field(init=False, default=0.0)
    font_size: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.resize(self.canvas_width, self.canvas_height)

    def resize(self, canvas_width: float, canvas_height: float) -> None:
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)
        w = self.width
        self.line_width = w / 170
        self.endpoint_line_width = w / 80
        self.endpoint_radius = w / 60
        self.tick_length = w / 50
        self.font_size = self.canvas_width * self.padding / 2

    # ---- extents ----

    @property
    def pad_x(self) -> float:
        return self.canvas_width * self.padding

    @property
    def pad_y(self) -> float:
        return self.canvas_height * self.padding

    @property
    def width(self) -> float:
        return self.canvas_width - 2 * self.pad_x

    @property
    def height(self) -> float:
        return self.canvas_height - 2 * self.pad_y

    @property
    def font(self) -> str:
        return f"{self.font_size:g}px Arial"

    @property
    def scale_x(self) -> float:
        """Normalized x units per pixel."""
        return (self.nx_range[1] - self.nx_range[0]) / self.width

    @property
    def scale_y(self) -> float:
        """Normalized y units per pixel (negative when y points up)."""
        s = (self.ny_range[1] - self.ny_range[0]) / self.height
        return -s if self.orientation_y == "up" else s

    # ---- mapping ----

    def nx(self, n: float) -> float:
        lo, hi = self.nx_range
        return self.pad_x + (n - lo) / (hi - lo) * self.width

    def ny(self, n: float) -> float:
        lo, hi = self.ny_range
        offset = (n - lo) / (hi - lo) * self.height
        if self.orientation_y == "up":
            return self.canvas_height - self.pad_y - offset
        return self.pad_y + offset

    def x_to_n(self, px: float) -> float:
        lo, hi = self.nx_range
        return lo + (px - self.pad_x) / self.width * (hi - lo)

    def y_to_n(self, py: float) -> float:
        lo, hi = self.ny_range
        if self.orientation_y == "up":
            offset = self.canvas_height - self.pad_y - py
        else:
            offset = py - self.pad_y
        return lo + offset / self.height * (hi - lo)

    def to_pixels(self, x: float, y: float) -> tuple[float, float]:
        return self.nx(x), self.ny(y)


def for_surface(surface_type: str, canvas_width: float, canvas_height: float) -> CoordinateSystem:
    """Chart coordinates for a surface: [-1, 1]² for the circle, [0, 1]² for the square."""
    rng = (-1.0, 1.0) if surface_type == "unitCircle" else (0.0, 1.0)
    return CoordinateSystem(canvas_width, canvas_height, nx_range=rng, ny_range=rng)


def curve_polyline(
    curve: Curve, coords: CoordinateSystem, segments: int = config.CURVE_RESOLUTION
) -> np.ndarray:
    """(segments + 1, 2) pixel positions along the curve's sampled window."""
    start, end = curve.window()
    ts = start + np.linspace(0.0, 1.0, segments + 1) * (end - start)
    pts = [coords.to_pixels(*curve.coords_at(float(t))[:2]) for t in ts]
    return np.asarray(pts, dtype=float)


def curve_endpoints(
    curve: Curve, coords: CoordinateSystem
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Pixel positions of the start and end markers."""
    start, end = curve.window()
    s, e = curve.coords_at(start), curve.coords_at(end)
    return coords.to_pixels(s.x, s.y), coords.to_pixels(e.x, e.y)


__all__ = [
    "CoordinateSystem",
    "OrientationY",
    "for_surface",
    "curve_polyline",
    "curve_endpoints",
]
