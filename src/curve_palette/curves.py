# curves.py – parametric curves on a bounded surface
#
# A Curve is one shared transform pipeline (reverse → local shape → scale →
# translate → rotate → surface clamp) wrapped around exactly one shape from a
# closed set of variants. Function shapes are easing curves (x, f(x));
# geometry shapes (Arc) produce the local point directly.

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from math import cos, isfinite, pi, sin
from typing import Any, Callable, ClassVar, Mapping, NamedTuple, Union

import numpy as np

from . import config, easing
from .easing import EaseFn
from .geometry import Polar, cart_to_polar, rotate
from .surfaces import Surface, UnitCircle, make_surface

log = logging.getLogger(__name__)

OVERFLOWS: tuple[str, ...] = ("wrap", "clamp")


class Vec2(NamedTuple):
    x: float
    y: float


class CurvePoint(NamedTuple):
    x: float
    y: float
    clamped: bool


# ----------------------------- validation ----------------------------------


def _finite(name: str, value: Any) -> float | None:
    """Return `value` as a float, or log and return None if it isn't a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        log.error("%s must be a number, got %r", name, value)
        return None
    v = float(value)
    if not isfinite(v):
        log.error("%s must be finite, got %r", name, value)
        return None
    return v


def _vec(name: str, value: Any) -> Vec2 | None:
    if isinstance(value, Mapping):
        raw = (value.get("x"), value.get("y"))
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        raw = (value[0], value[1])
    else:
        log.error("%s must be an {x, y} mapping or a pair, got %r", name, value)
        return None
    x, y = _finite(f"{name}.x", raw[0]), _finite(f"{name}.y", raw[1])
    if x is None or y is None:
        return None
    return Vec2(x, y)


def _variation(value: Any, allowed: tuple[str, ...]) -> str | None:
    if value in allowed:
        return value
    log.warning("variation must be one of %s, got %r", ", ".join(allowed), value)
    return None


# ----------------------------- shapes --------------------------------------


@dataclass
class LinearShape:
    type: ClassVar[str] = "linear"
    category: ClassVar[str] = "function"

    def ease(self) -> EaseFn:
        return easing.linear


@dataclass
class PolynomialShape:
    type: ClassVar[str] = "polynomial"
    category: ClassVar[str] = "function"
    exponent: float = 2.0
    variation: str = "in"

    def ease(self) -> EaseFn:
        return easing.poly(self.variation, self.exponent)  # type: ignore[arg-type]


@dataclass
class SinusoidalShape:
    type: ClassVar[str] = "sinusoidal"
    category: ClassVar[str] = "function"
    variation: str = "in"

    def ease(self) -> EaseFn:
        return easing.sinusoidal(self.variation)  # type: ignore[arg-type]


@dataclass
class ExponentialShape:
    type: ClassVar[str] = "exponential"
    category: ClassVar[str] = "function"
    variation: str = "in"

    def ease(self) -> EaseFn:
        return easing.exponential(self.variation)  # type: ignore[arg-type]


@dataclass
class ElasticShape:
    type: ClassVar[str] = "elastic"
    category: ClassVar[str] = "function"
    amplitude: float = 1.5
    period: float = 0.3
    variation: str = "in"

    def ease(self) -> EaseFn:
        return easing.elastic(self.variation, self.amplitude, self.period)  # type: ignore[arg-type]


@dataclass
class BackShape:
    type: ClassVar[str] = "back"
    category: ClassVar[str] = "function"
    overshoot: float = 1.70158
    variation: str = "in"

    def ease(self) -> EaseFn:
        return easing.back(self.variation, self.overshoot)  # type: ignore[arg-type]


@dataclass
class BounceShape:
    type: ClassVar[str] = "bounce"
    category: ClassVar[str] = "function"
    variation: str = "out"

    def ease(self) -> EaseFn:
        return easing.bounce(self.variation)  # type: ignore[arg-type]


ARC_VARIATIONS: tuple[str, ...] = ("linear",) + easing.VARIATIONS


@dataclass
class ArcShape:
    """Point on a circular arc swept from angle_start to angle_end (radians)."""

    type: ClassVar[str] = "arc"
    category: ClassVar[str] = "geometry"
    angle_start: float = 0.0
    angle_end: float = pi
    angle_offset: float = 0.0
    radius: float = 1.0
    variation: str = "linear"

    def point(self, t: float) -> tuple[float, float]:
        g = t if self.variation == "linear" else easing.sinusoidal(self.variation)(t)  # type: ignore[arg-type]
        theta = self.angle_offset + self.angle_start + g * (self.angle_end - self.angle_start)
        return self.radius * cos(theta), self.radius * sin(theta)


Shape = Union[
    LinearShape,
    PolynomialShape,
    SinusoidalShape,
    ExponentialShape,
    ElasticShape,
    BackShape,
    BounceShape,
    ArcShape,
]

SHAPES: dict[str, type] = {
    cls.type: cls
    for cls in (
        ArcShape,
        LinearShape,
        PolynomialShape,
        SinusoidalShape,
        ExponentialShape,
        ElasticShape,
        BackShape,
        BounceShape,
    )
}

# shape attribute → exported / callback name
_SHAPE_PARAMS: dict[str, str] = {
    "angle_start": "angleStart",
    "angle_end": "angleEnd",
    "angle_offset": "angleOffset",
    "radius": "radius",
    "exponent": "exponent",
    "overshoot": "overshoot",
    "amplitude": "amplitude",
    "period": "period",
    "variation": "variation",
}


def default_transform(surface: Surface, category: str) -> tuple[Vec2, Vec2]:
    """(translation, scale) a fresh curve starts from on `surface`."""
    circle = isinstance(surface, UnitCircle)
    if category == "geometry":
        return (Vec2(0.0, 0.0), Vec2(1.0, 1.0)) if circle else (Vec2(0.5, 0.5), Vec2(1.0, 1.0))
    if circle:
        # start on the rim at 9π/8 and sweep through the centre to the far side
        cx, cy = cos(pi * 9 / 8), sin(pi * 9 / 8)
        return Vec2(cx, cy), Vec2(-2.0 * cx, -2.0 * cy)
    return Vec2(0.0, 0.25), Vec2(1.0, 0.5)


# ----------------------------- clamp bounds --------------------------------


def _refine(sample: Callable[[float], CurvePoint], outside: float, inside: float) -> float:
    """Bisect between a clamped and a non-clamped t; return the non-clamped side."""
    for _ in range(config.CLAMP_REFINE_STEPS):
        mid = 0.5 * (outside + inside)
        if sample(mid).clamped:
            outside = mid
        else:
            inside = mid
    return inside


def resolve_clamp_bounds(
    sample: Callable[[float], CurvePoint], resolution: int = config.CLAMP_RESOLUTION
) -> tuple[float, float]:
    """
    Bounds of the first contiguous run of non-clamped samples over t ∈ [0, 1].

    Boundaries between a clamped and a non-clamped sample are refined so that
    `sample(bound).clamped` is False. If every sample is clamped the bounds
    collapse to the midpoint.
    """
    n = max(2, int(resolution))
    ts = np.linspace(0.0, 1.0, n + 1)
    inside = np.array([not sample(float(t)).clamped for t in ts], dtype=bool)
    if not inside.any():
        return 0.5, 0.5

    first = int(np.argmax(inside))
    gaps = np.flatnonzero(~inside[first:])
    last = first + int(gaps[0]) - 1 if gaps.size else n

    start = 0.0 if first == 0 else _refine(sample, float(ts[first - 1]), float(ts[first]))
    end = 1.0 if last == n else _refine(sample, float(ts[last + 1]), float(ts[last]))
    return start, end


# ----------------------------- curve ---------------------------------------


@dataclass
class Curve:
    surface: Surface
    shape: Shape = field(default_factory=LinearShape)
    translation: Vec2 = Vec2(0.0, 0.0)
    scale: Vec2 = Vec2(1.0, 1.0)
    rotation: float = 0.0
    reverse: bool = False
    overflow: str = "clamp"
    clamp_start: float = 0.0
    clamp_end: float = 1.0

    @property
    def type(self) -> str:
        return self.shape.type

    @property
    def category(self) -> str:
        return self.shape.category

    def window(self) -> tuple[float, float]:
        """Sampled t-range: the clamp bounds when clamping, else [0, 1]."""
        if self.overflow == "clamp":
            return self.clamp_start, self.clamp_end
        return 0.0, 1.0

    # ---- evaluation ----

    def local_coords_at(self, t: float) -> tuple[float, float]:
        """Untransformed shape point (reverse applied, t held to [0, 1])."""
        t = min(max(t, 0.0), 1.0)
        u = 1.0 - t if self.reverse else t
        if isinstance(self.shape, ArcShape):
            return self.shape.point(u)
        return u, self.shape.ease()(u)

    def coords_at(self, t: float) -> CurvePoint:
        x, y = self.local_coords_at(t)
        x = x * self.scale.x + self.translation.x
        y = y * self.scale.y + self.translation.y
        x, y = rotate(x, y, self.rotation)
        return CurvePoint(*self.surface.clamp(x, y))

    def polar_coords_at(self, t: float) -> Polar:
        p = self.coords_at(t)
        return cart_to_polar(p.x, p.y)

    def set_clamp_bounds(self) -> None:
        self.clamp_start, self.clamp_end = resolve_clamp_bounds(self.coords_at)

    # ---- transform setters ----

    def set_translation(self, value: Any) -> None:
        v = _vec("translation", value)
        if v is not None:
            self.translation = v

    def set_translate_x(self, value: Any) -> None:
        x = _finite("translateX", value)
        if x is not None:
            self.translation = self.translation._replace(x=x)

    def set_translate_y(self, value: Any) -> None:
        y = _finite("translateY", value)
        if y is not None:
            self.translation = self.translation._replace(y=y)

    def set_scale(self, value: Any) -> None:
        v = _vec("scale", value)
        if v is not None:
            self.scale = v

    def set_scale_x(self, value: Any) -> None:
        x = _finite("scaleX", value)
        if x is not None:
            self.scale = self.scale._replace(x=x)

    def set_scale_y(self, value: Any) -> None:
        y = _finite("scaleY", value)
        if y is not None:
            self.scale = self.scale._replace(y=y)

    def set_rotation(self, value: Any) -> None:
        r = _finite("rotation", value)
        if r is not None:
            self.rotation = r

    def set_reverse(self, value: Any) -> None:
        if isinstance(value, bool):
            self.reverse = value
        else:
            log.error("reverse must be a boolean, got %r", value)

    def set_overflow(self, value: Any) -> None:
        if value not in OVERFLOWS:
            log.error("overflow must be 'wrap' or 'clamp', got %r", value)
            return
        self.overflow = value
        if value == "clamp":
            self.set_clamp_bounds()

    # ---- shape setters ----

    def _shape_has(self, attr: str) -> bool:
        if attr in {f.name for f in fields(self.shape)}:
            return True
        log.warning("%s curves have no %s parameter", self.type, _SHAPE_PARAMS[attr])
        return False

    def _set_shape_number(self, attr: str, value: Any) -> None:
        if self._shape_has(attr):
            v = _finite(_SHAPE_PARAMS[attr], value)
            if v is not None:
                setattr(self.shape, attr, v)

    def set_exponent(self, value: Any) -> None:
        if not self._shape_has("exponent"):
            return
        e = _finite("exponent", value)
        if e is None:
            return
        if e < 0.0:
            log.error("Exponent must be a non-negative number, got %r", value)
            return
        self.shape.exponent = e  # type: ignore[union-attr]

    def set_overshoot(self, value: Any) -> None:
        self._set_shape_number("overshoot", value)

    def set_amplitude(self, value: Any) -> None:
        if not self._shape_has("amplitude"):
            return
        a = _finite("amplitude", value)
        if a is None:
            return
        if a <= 1.0:
            log.error("Amplitude must be a number greater than 1, got %r", value)
            return
        self.shape.amplitude = a  # type: ignore[union-attr]

    def set_period(self, value: Any) -> None:
        if not self._shape_has("period"):
            return
        p = _finite("period", value)
        if p is None:
            return
        if p <= 0.0:
            log.error("Period must be a number greater than 0, got %r", value)
            return
        self.shape.period = p  # type: ignore[union-attr]

    def set_variation(self, value: Any) -> None:
        if not self._shape_has("variation"):
            return
        allowed = ARC_VARIATIONS if isinstance(self.shape, ArcShape) else easing.VARIATIONS
        v = _variation(value, allowed)
        if v is not None:
            self.shape.variation = v  # type: ignore[union-attr]

    def set_angle_start(self, value: Any) -> None:
        self._set_shape_number("angle_start", value)

    def set_angle_end(self, value: Any) -> None:
        self._set_shape_number("angle_end", value)

    def set_angle_offset(self, value: Any) -> None:
        self._set_shape_number("angle_offset", value)

    def set_radius(self, value: Any) -> None:
        self._set_shape_number("radius", value)

    # ---- export ----

    def params(self) -> dict[str, Any]:
        """Flat parameter snapshot, keyed by the external parameter names."""
        out: dict[str, Any] = {
            "type": self.type,
            "surface": self.surface.type,
            "translation": {"x": self.translation.x, "y": self.translation.y},
            "scale": {"x": self.scale.x, "y": self.scale.y},
            "rotation": self.rotation,
            "reverse": self.reverse,
            "overflow": self.overflow,
        }
        for f in fields(self.shape):
            value = getattr(self.shape, f.name)
            if value is not None:
                out[_SHAPE_PARAMS[f.name]] = value
        return out


# ----------------------------- construction --------------------------------

_OPTION_SETTERS: dict[str, str] = {
    "angleStart": "set_angle_start",
    "angleEnd": "set_angle_end",
    "angleOffset": "set_angle_offset",
    "radius": "set_radius",
    "exponent": "set_exponent",
    "overshoot": "set_overshoot",
    "amplitude": "set_amplitude",
    "period": "set_period",
    "variation": "set_variation",
    "translation": "set_translation",
    "scale": "set_scale",
    "rotation": "set_rotation",
    "reverse": "set_reverse",
}


def _number(value: Any) -> Any:
    # exported parameters carry fixed-decimal strings
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    if isinstance(value, Mapping):
        return {k: _number(v) for k, v in value.items()}
    return value


def make_curve(
    curve_type: str | None, surface: Surface | str | None = None, **options: Any
) -> Curve:
    """
    Build a curve of `curve_type` on `surface`.

    Options use the exported parameter names (`translation`, `scale`,
    `rotation`, `reverse`, `overflow`, `angleStart`, `amplitude`, ...).
    Unknown types fall back to a linear curve; unknown options are ignored
    with a warning.
    """
    surf = make_surface(surface if surface is not None else "unitSquare")
    cls = SHAPES.get(curve_type or "")
    if cls is None:
        log.warning("Curve type %r is not supported. Using default (linear) instead.", curve_type)
        cls = LinearShape
    shape = cls()
    translation, scale = default_transform(surf, shape.category)
    if isinstance(shape, ArcShape) and not isinstance(surf, UnitCircle):
        shape.radius = 0.5
    curve = Curve(surface=surf, shape=shape, translation=translation, scale=scale)

    for key, value in options.items():
        if key in ("type", "surface") or value is None:
            continue
        if key == "overflow":
            continue
        setter = _OPTION_SETTERS.get(key)
        if setter is None:
            log.warning("Ignoring unknown curve option %r", key)
            continue
        getattr(curve, setter)(_number(value))

    curve.set_overflow(options.get("overflow") or "clamp")
    return curve


# ----------------------------- parameter dispatch --------------------------

PARAM_SETTERS: dict[str, str] = {
    "angleStart": "set_angle_start",
    "angleEnd": "set_angle_end",
    "angleOffset": "set_angle_offset",
    "variation": "set_variation",
    "translateX": "set_translate_x",
    "translateY": "set_translate_y",
    "scaleX": "set_scale_x",
    "scaleY": "set_scale_y",
    "rotate": "set_rotation",
    "reverse": "set_reverse",
    "radius": "set_radius",
    "overflow": "set_overflow",
    "exponent": "set_exponent",
    "overshoot": "set_overshoot",
    "amplitude": "set_amplitude",
    "period": "set_period",
}


def apply_param(curve: Curve, name: str, value: Any) -> None:
    """Route one parameter-change event to the curve and refresh its clamp bounds."""
    setter = PARAM_SETTERS.get(name)
    if setter is None:
        log.warning("Unknown curve parameter %r", name)
        return
    getattr(curve, setter)(value)
    if curve.overflow == "clamp":
        curve.set_clamp_bounds()


__all__ = [
    "Vec2",
    "CurvePoint",
    "Curve",
    "Shape",
    "SHAPES",
    "LinearShape",
    "PolynomialShape",
    "SinusoidalShape",
    "ExponentialShape",
    "ElasticShape",
    "BackShape",
    "BounceShape",
    "ArcShape",
    "OVERFLOWS",
    "PARAM_SETTERS",
    "apply_param",
    "default_transform",
    "make_curve",
    "resolve_clamp_bounds",
]
