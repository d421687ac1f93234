from __future__ import annotations

import json
import logging
from math import isfinite
from typing import Any, Mapping, NamedTuple, Union

import numpy as np

from . import config
from .color import Hex, hsl_to_rgb, print_hsl, print_rgb, rgb_to_hex
from .curves import Curve, make_curve
from .geometry import cart_to_polar, hue_degrees
from .surfaces import UnitCircle, UnitSquare

log = logging.getLogger(__name__)

CurveSpec = Union[Curve, Mapping[str, Any], str, None]

DEFAULT_HS_CURVE = "exponential"
DEFAULT_L_CURVE = "linear"


def _is_finite(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and isfinite(v)


class HSL(NamedTuple):
    h: float  # degrees, [0, 360)
    s: float  # [0, 1]
    l: float  # [0, 1]


class ColorPalette:
    """
    A continuous palette built from two curves laid over HSL space.

    The "hs" curve lives in the unit circle: its polar angle is the hue and
    its radius the saturation. The "l" curve lives in the unit square and its
    y-coordinate is the lightness. `start` / `end` pick the slice of t that
    the palette spans.
    """

    def __init__(
        self,
        hs_curve: CurveSpec = None,
        l_curve: CurveSpec = None,
        *,
        start: float | None = None,
        end: float | None = None,
    ) -> None:
        self.hs_curve: Curve = make_curve(DEFAULT_HS_CURVE, UnitCircle())
        self.l_curve: Curve = make_curve(DEFAULT_L_CURVE, UnitSquare())
        self.start = 0.0
        self.end = 1.0
        self.set_hs_curve(hs_curve)
        self.set_l_curve(l_curve)
        self.set_start(start)
        self.set_end(end)

    @classmethod
    def from_params(
        cls,
        hs: Mapping[str, Any] | None,
        l: Mapping[str, Any] | None,
        palette: Mapping[str, Any] | None = None,
    ) -> "ColorPalette":
        """Rebuild a palette from the three objects written by `export_palette_params`."""
        palette = palette or {}

        def _f(v: Any) -> float | None:
            return None if v is None else float(v)

        return cls(hs, l, start=_f(palette.get("start")), end=_f(palette.get("end")))

    @staticmethod
    def param_set() -> tuple[str, ...]:
        return ("start", "end")

    # ---- curves ----

    def set_hs_curve(self, hs_curve: CurveSpec) -> None:
        if isinstance(hs_curve, Curve):
            if isinstance(hs_curve.surface, UnitCircle):
                self.hs_curve = hs_curve
            else:
                log.error(
                    "Due to the nature of the HSL colorspace, the hs curve is required "
                    "to have a surface of type 'unitCircle'. Keeping the current curve."
                )
        elif isinstance(hs_curve, Mapping):
            opts = dict(hs_curve)
            self.hs_curve = make_curve(opts.pop("type", None), UnitCircle(), **opts)
        elif isinstance(hs_curve, str):
            self.hs_curve = make_curve(hs_curve, UnitCircle())
        else:
            self.hs_curve = make_curve(DEFAULT_HS_CURVE, UnitCircle())

    def set_l_curve(self, l_curve: CurveSpec) -> None:
        if isinstance(l_curve, Curve):
            if isinstance(l_curve.surface, UnitSquare):
                self.l_curve = l_curve
            else:
                log.error(
                    "The l curve is required to have a surface of type 'unitSquare'. "
                    "Keeping the current curve."
                )
        elif isinstance(l_curve, Mapping):
            opts = dict(l_curve)
            self.l_curve = make_curve(opts.pop("type", None), UnitSquare(), **opts)
        elif isinstance(l_curve, str):
            self.l_curve = make_curve(l_curve, UnitSquare())
        else:
            self.l_curve = make_curve(DEFAULT_L_CURVE, UnitSquare())

    # ---- range ----

    def _in_unit_range(self, name: str, value: float) -> float:
        v = float(value)
        if 0.0 <= v <= 1.0:
            return v
        clamped = min(max(v, 0.0), 1.0)
        log.warning("Palette %s must lie in [0, 1], got %r. Using %g.", name, value, clamped)
        return clamped

    def set_start(self, start: float | None) -> None:
        if start is None:
            self.start = 0.0
            return
        if not _is_finite(start):
            log.error("Palette start must be a finite number, got %r", start)
            return
        start = self._in_unit_range("start", start)
        if start > self.end:
            log.warning(
                "Palette start cannot be greater than palette end. "
                "Setting palette start to palette end."
            )
            self.start = self.end
        else:
            self.start = start

    def set_end(self, end: float | None) -> None:
        if end is None:
            self.end = 1.0
            return
        if not _is_finite(end):
            log.error("Palette end must be a finite number, got %r", end)
            return
        end = self._in_unit_range("end", end)
        if end < self.start:
            log.warning(
                "Palette end cannot be less than palette start. "
                "Setting palette end to palette start."
            )
            self.end = self.start
        else:
            self.end = end

    # ---- sampling ----

    def update_curve_clamp_bounds(self) -> None:
        """Refresh clamp bounds; call before a sampling pass if either curve clamps."""
        for curve in (self.hs_curve, self.l_curve):
            if curve.overflow == "clamp":
                curve.set_clamp_bounds()

    def _window(self, curve: Curve) -> tuple[float, float]:
        if curve.overflow == "clamp":
            return max(self.start, curve.clamp_start), min(self.end, curve.clamp_end)
        return self.start, self.end

    def get_color_values(self, n: float) -> HSL:
        hs_start, hs_end = self._window(self.hs_curve)
        l_start, l_end = self._window(self.l_curve)

        hs = self.hs_curve.coords_at(hs_start + n * (hs_end - hs_start))
        polar = cart_to_polar(hs.x, hs.y)
        hue = hue_degrees(polar.theta)
        sat = max(0.0, min(1.0, polar.r))

        lc = self.l_curve.coords_at(l_start + n * (l_end - l_start))
        lightness = max(0.0, min(1.0, lc.y))

        return HSL(hue, sat, lightness)

    def hsl_value_at(self, n: float) -> str:
        return print_hsl(*self.get_color_values(n))

    def rgb_value_at(self, n: float) -> str:
        return print_rgb(*hsl_to_rgb(*self.get_color_values(n)))

    def hex_value_at(self, n: float) -> Hex:
        return rgb_to_hex(*hsl_to_rgb(*self.get_color_values(n)))

    def color_stops(self, count: int = config.PALETTE_STOPS) -> list[Hex]:
        """`count` evenly spaced swatches, each sampled at the centre of its cell."""
        self.update_curve_clamp_bounds()
        count = max(1, int(count))
        return [self.hex_value_at((i + 0.5) / count) for i in range(count)]

    def gradient_stops(self, resolution: int = config.GRADIENT_RESOLUTION) -> list[tuple[float, str]]:
        """(offset, css colour) pairs for a linear gradient across the palette."""
        self.update_curve_clamp_bounds()
        resolution = max(1, int(resolution))
        offsets = np.linspace(0.0, 1.0, resolution + 1)
        return [(float(o), self.hsl_value_at(float(o))) for o in offsets]

    # ---- export ----

    def export_palette_params(self, precision: int | None = None) -> str:
        """
        Three comma-separated JSON objects: hs curve params, l curve params and
        palette params. Numbers are written as fixed-decimal strings.
        """
        p = config.EXPORT_PRECISION if precision is None else int(precision)
        if p < 0:
            log.error(
                "Export precision must be non-negative, got %r. Using %d.",
                precision,
                config.EXPORT_PRECISION,
            )
            p = config.EXPORT_PRECISION

        def digits(x: Any) -> Any:
            if isinstance(x, bool):
                return x
            if isinstance(x, (int, float)):
                return f"{x:.{p}f}"
            if isinstance(x, Mapping):
                return {k: digits(v) for k, v in x.items()}
            return x

        def dump(params: Mapping[str, Any]) -> str:
            defined = {k: digits(v) for k, v in params.items() if v is not None}
            return json.dumps(defined, separators=(",", ":"))

        palette = {name: getattr(self, name) for name in self.param_set()}
        return ", ".join(
            [dump(self.hs_curve.params()), dump(self.l_curve.params()), dump(palette)]
        )


__all__ = ["ColorPalette", "HSL", "CurveSpec"]
