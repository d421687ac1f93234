# controller.py – pointer interaction with a curve drawn on a chart
#
# States: Idle → Hovering(region) → Dragging(region, anchor, snapshot) → Idle.
# Drag deltas are measured against the snapshot taken on pointer-down, so
# every move emits absolute parameter values rather than increments.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Optional, Union

import numpy as np

from . import config
from .coords import CoordinateSystem, curve_endpoints, curve_polyline
from .curves import Curve, Vec2
from .geometry import rotate

log = logging.getLogger(__name__)

ParamChange = Callable[[str, float], None]


class Region(str, Enum):
    CURVE_BODY = "curveBody"
    START_POINT = "startPoint"
    END_POINT = "endPoint"


class TransformSnapshot(NamedTuple):
    translation: Vec2
    scale: Vec2
    rotation: float

    @classmethod
    def of(cls, curve: Curve) -> "TransformSnapshot":
        return cls(curve.translation, curve.scale, curve.rotation)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Hovering:
    region: Region


@dataclass(frozen=True)
class Dragging:
    region: Region
    anchor: tuple[float, float]
    snapshot: TransformSnapshot


State = Union[Idle, Hovering, Dragging]


class RegionFlags(NamedTuple):
    hovering: bool
    grabbing: bool


class InteractiveController:
    """Hit-testing and drag handling for one curve on one chart."""

    def __init__(
        self,
        curve: Curve,
        coords: CoordinateSystem,
        on_param_change: ParamChange,
        *,
        tolerance: float = config.HIT_TOLERANCE_PX,
        segments: int = config.CURVE_RESOLUTION,
    ) -> None:
        self.curve = curve
        self.coords = coords
        self.on_param_change = on_param_change
        self.tolerance = tolerance
        self.segments = segments
        self.state: State = Idle()

    def set_curve(self, curve: Curve) -> None:
        self.curve = curve
        self.state = Idle()

    def flags(self, region: Region) -> RegionFlags:
        state = self.state
        if isinstance(state, Hovering):
            return RegionFlags(state.region is region, False)
        if isinstance(state, Dragging):
            return RegionFlags(state.region is region, state.region is region)
        return RegionFlags(False, False)

    # ---- hit-testing ----

    def is_curve_over(self, x: float, y: float) -> bool:
        pts = curve_polyline(self.curve, self.coords, self.segments)
        near = (np.abs(pts[:, 0] - x) <= self.tolerance) & (np.abs(pts[:, 1] - y) <= self.tolerance)
        return bool(near.any())

    def _near_marker(self, marker: tuple[float, float], x: float, y: float) -> bool:
        r = self.coords.endpoint_radius
        dx, dy = marker[0] - x, marker[1] - y
        return dx * dx + dy * dy <= r * r

    def hit_test(self, x: float, y: float) -> Optional[Region]:
        """Region under (x, y); endpoints win over the curve body."""
        start, end = curve_endpoints(self.curve, self.coords)
        if self._near_marker(start, x, y):
            return Region.START_POINT
        if self._near_marker(end, x, y):
            return Region.END_POINT
        if self.is_curve_over(x, y):
            return Region.CURVE_BODY
        return None

    # ---- pointer events ----

    def pointer_move(self, x: float, y: float) -> State:
        if isinstance(self.state, Dragging):
            self._drag(self.state, x, y)
        else:
            region = self.hit_test(x, y)
            self.state = Hovering(region) if region is not None else Idle()
        return self.state

    def pointer_down(self, x: float, y: float) -> State:
        if isinstance(self.state, Dragging):
            return self.state
        region = self.hit_test(x, y)
        if region is None:
            self.state = Idle()
        else:
            self.state = Dragging(region, (x, y), TransformSnapshot.of(self.curve))
            log.debug("drag start on %s at (%.1f, %.1f)", region.value, x, y)
        return self.state

    def pointer_up(self, x: float, y: float) -> State:
        # hover is recomputed on the next move
        self.state = Idle()
        return self.state

    # ---- drag math ----

    def curve_delta(self, anchor: tuple[float, float], x: float, y: float) -> tuple[float, float]:
        """Pixel drag → normalized delta in the curve's unrotated frame."""
        dx = (x - anchor[0]) * self.coords.scale_x
        dy = (y - anchor[1]) * self.coords.scale_y
        # translation is applied before rotation, so undo the current rotation
        return rotate(dx, dy, -self.curve.rotation)

    def _drag(self, state: Dragging, x: float, y: float) -> None:
        dx, dy = self.curve_delta(state.anchor, x, y)
        snap = state.snapshot
        emit = self.on_param_change
        scalable = self.curve.category != "geometry"

        if state.region is Region.START_POINT:
            if scalable:
                emit("scaleX", snap.scale.x - dx)
                emit("scaleY", snap.scale.y - dy)
                emit("translateX", snap.translation.x + dx)
                emit("translateY", snap.translation.y + dy)
        elif state.region is Region.END_POINT:
            if scalable:
                emit("scaleX", snap.scale.x + dx)
                emit("scaleY", snap.scale.y + dy)
        else:
            emit("translateX", snap.translation.x + dx)
            emit("translateY", snap.translation.y + dy)


__all__ = [
    "InteractiveController",
    "Region",
    "RegionFlags",
    "TransformSnapshot",
    "Idle",
    "Hovering",
    "Dragging",
    "State",
    "ParamChange",
]
