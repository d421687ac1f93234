"""
Chart drawing for a single curve, against a host-provided 2D context.

The context follows the HTML canvas API surface (snake_cased); any object
with these members works, e.g. a thin wrapper around a browser canvas, a
Skia / Cairo surface, or a recording fake in tests.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from math import cos, pi, sin
from typing import Any, Callable, Iterator, Optional, Protocol

from . import config
from .controller import InteractiveController, Region
from .coords import CoordinateSystem, curve_endpoints, curve_polyline, for_surface
from .curves import Curve, apply_param
from .palette import ColorPalette

log = logging.getLogger(__name__)


class Gradient(Protocol):
    def add_color_stop(self, offset: float, color: str) -> None: ...


class RenderContext(Protocol):
    fill_style: Any
    stroke_style: Any
    line_width: float
    font: str
    text_align: str
    text_baseline: str

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def create_radial_gradient(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float
    ) -> Gradient: ...

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> Gradient: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def arc(
        self, x: float, y: float, r: float, start: float, end: float, anticlockwise: bool = False
    ) -> None: ...

    def fill(self) -> None: ...

    def stroke(self) -> None: ...

    def fill_text(self, text: str, x: float, y: float) -> None: ...

    def measure_text(self, text: str) -> float: ...


class ResizeSource(Protocol):
    def subscribe(self, callback: Callable[[float, float], None]) -> Callable[[], None]:
        """Register `callback(width, height)`; the return value unregisters it."""
        ...


# ----------------------------- palette previews ----------------------------


def draw_palette_strip(
    ctx: RenderContext,
    palette: ColorPalette,
    width: float,
    height: float,
    stops: int = config.PALETTE_STOPS,
) -> None:
    """Discrete swatches, left to right."""
    colors = palette.color_stops(stops)
    cell = width / len(colors)
    for i, hex_color in enumerate(colors):
        ctx.fill_style = hex_color
        # slight overdraw hides seams between cells
        ctx.fill_rect(i * cell, 0, cell * 1.1, height)


def draw_palette_gradient(
    ctx: RenderContext,
    palette: ColorPalette,
    width: float,
    height: float,
    resolution: int = config.GRADIENT_RESOLUTION,
) -> None:
    gradient = ctx.create_linear_gradient(0, 0, width, 0)
    for offset, color in palette.gradient_stops(resolution):
        gradient.add_color_stop(offset, color)
    ctx.fill_style = gradient
    ctx.fill_rect(0, 0, width, height)


# ----------------------------- chart ---------------------------------------


class HSLChart:
    """Draws one curve over its HS wheel or L strip and forwards pointer input."""

    def __init__(
        self,
        ctx: RenderContext,
        curve: Curve,
        canvas_width: float,
        canvas_height: float,
        on_change: Optional[Callable[[], None]] = None,
        *,
        wedges: int = config.WHEEL_WEDGES,
    ) -> None:
        self.ctx = ctx
        self.curve = curve
        self.on_change = on_change
        self.wedges = wedges
        self.coords: CoordinateSystem = for_surface(curve.surface.type, canvas_width, canvas_height)
        self.controller = InteractiveController(curve, self.coords, self.handle_param_change)

    # ---- wiring ----

    def set_curve(self, curve: Curve) -> None:
        self.curve = curve
        self.controller.set_curve(curve)
        self.update()

    def handle_param_change(self, name: str, value: Any) -> None:
        """Apply a parameter change, redraw, and tell the owner (e.g. to refresh palettes)."""
        apply_param(self.curve, name, value)
        self.update()
        if self.on_change is not None:
            self.on_change()

    def resize(self, width: float, height: float) -> None:
        log.debug("Resizing %s chart to %sx%s", self.curve.surface.type, width, height)
        self.coords.resize(width, height)
        self.update()

    @contextmanager
    def attach(self, source: ResizeSource) -> Iterator["HSLChart"]:
        """Follow `source` resizes for the duration of the block."""
        unsubscribe = source.subscribe(self.resize)
        try:
            yield self
        finally:
            unsubscribe()

    def pointer_move(self, x: float, y: float) -> None:
        before = self.controller.state
        self.controller.pointer_move(x, y)
        if self.controller.state != before:
            self.update()

    def pointer_down(self, x: float, y: float) -> None:
        self.controller.pointer_down(x, y)
        self.update()

    def pointer_up(self, x: float, y: float) -> None:
        self.controller.pointer_up(x, y)
        self.update()

    # ---- drawing ----

    def update(self) -> None:
        self.draw_background()
        self.draw_curve()
        self.draw_endpoints()
        self.draw_orientation()

    def draw_background(self) -> None:
        if self.curve.surface.type == "unitCircle":
            self.draw_hs_wheel()
        else:
            self.draw_l_strip()

    def draw_hs_wheel(self) -> None:
        ctx, c = self.ctx, self.coords
        ctx.fill_style = "white"
        ctx.fill_rect(0, 0, c.canvas_width, c.canvas_height)

        cx, cy = c.nx(0), c.ny(0)
        r = c.width / 2
        step = -2 * pi / self.wedges

        for i in range(self.wedges):
            hue = 360 * i / self.wedges
            gradient = ctx.create_radial_gradient(cx, cy, 0, cx, cy, r)
            gradient.add_color_stop(0, f"hsl({hue:g}, 0%, 50%)")
            gradient.add_color_stop(1, f"hsl({hue:g}, 100%, 50%)")
            ctx.fill_style = gradient

            a0 = i * step
            # each wedge spans two steps so neighbours overlap without seams
            a1 = a0 + 2 * step
            ctx.begin_path()
            ctx.arc(cx, cy, 0, a0, a1, True)
            ctx.arc(cx, cy, r, a1, a0, False)
            ctx.fill()

    def draw_l_strip(self) -> None:
        ctx, c = self.ctx, self.coords
        ctx.fill_style = "white"
        ctx.fill_rect(0, 0, c.canvas_width, c.canvas_height)

        gradient = ctx.create_linear_gradient(c.nx(0), c.ny(1), c.nx(0), c.ny(0))
        gradient.add_color_stop(0, "hsl(0, 0%, 100%)")
        gradient.add_color_stop(1, "hsl(0, 0%, 0%)")
        ctx.fill_style = gradient
        ctx.fill_rect(c.nx(0), c.ny(0), c.width, -c.height)

    def _stroke_color(self, region: Region) -> str:
        hovering, grabbing = self.controller.flags(region)
        return config.HIGHLIGHT_COLOR if hovering or grabbing else "black"

    def draw_curve(self) -> None:
        ctx = self.ctx
        pts = curve_polyline(self.curve, self.coords)
        ctx.line_width = self.coords.line_width
        ctx.stroke_style = self._stroke_color(Region.CURVE_BODY)
        ctx.begin_path()
        ctx.move_to(float(pts[0, 0]), float(pts[0, 1]))
        for px, py in pts[1:]:
            ctx.line_to(float(px), float(py))
        ctx.stroke()

    def draw_endpoints(self) -> None:
        ctx, c = self.ctx, self.coords
        start, end = curve_endpoints(self.curve, c)
        ctx.line_width = c.endpoint_line_width
        for region, (px, py), color in (
            (Region.START_POINT, start, config.START_POINT_COLOR),
            (Region.END_POINT, end, config.END_POINT_COLOR),
        ):
            ctx.stroke_style = self._stroke_color(region)
            ctx.fill_style = color
            ctx.begin_path()
            ctx.arc(px, py, c.endpoint_radius, 0, 2 * pi)
            ctx.stroke()
            ctx.fill()

    def draw_orientation(self) -> None:
        """Axis ticks labelled ±X / ±Y, turned with the curve's rotation."""
        ctx, c = self.ctx, self.coords
        surface = self.curve.surface
        ox, oy = c.nx(surface.cx), c.ny(surface.cy)
        # pixel y points down, so the on-screen rotation is negated
        sn, cs = sin(-self.curve.rotation), cos(-self.curve.rotation)

        def turn(x: float, y: float) -> tuple[float, float]:
            return (x - ox) * cs - (y - oy) * sn + ox, (x - ox) * sn + (y - oy) * cs + oy

        ctx.fill_style = "black"
        ctx.stroke_style = "black"
        ctx.line_width = c.line_width
        ctx.font = c.font
        ctx.text_align = "center"
        ctx.text_baseline = "middle"

        text = ctx.measure_text("+X")
        tick = c.tick_length
        x_hi, x_lo = c.nx(c.nx_range[1]), c.nx(c.nx_range[0])
        y_hi, y_lo = c.ny(c.ny_range[1]), c.ny(c.ny_range[0])
        ticks = (
            ("+X", (x_hi - tick, oy), (x_hi + tick, oy), (x_hi + text, oy)),
            ("+Y", (ox, y_hi - tick), (ox, y_hi + tick), (ox, y_hi - text)),
            ("-X", (x_lo - tick, oy), (x_lo + tick, oy), (x_lo - text, oy)),
            ("-Y", (ox, y_lo - tick), (ox, y_lo + tick), (ox, y_lo + text)),
        )

        ctx.begin_path()
        for label, p0, p1, p2 in ticks:
            ctx.move_to(*turn(*p0))
            ctx.line_to(*turn(*p1))
            ctx.fill_text(label, *turn(*p2))
        ctx.stroke()


__all__ = [
    "RenderContext",
    "Gradient",
    "ResizeSource",
    "HSLChart",
    "draw_palette_strip",
    "draw_palette_gradient",
]
