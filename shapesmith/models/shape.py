"""Shape contract: the host editor's shape, seen through typed accessors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from shapesmith.engine.config import DEFAULT_CONFIG
from shapesmith.engine.path_data import BezierPoint, coerce_points

# Types whose geometry is a closed point list when no explicit points exist
POLYGON_TYPES = {"polygon", "triangle", "rectangle"}
# Types whose stored points form an open stroke
STROKE_TYPES = {"line", "draw", "sine-wave", "custom-line", "custom-draw", "arrow"}


class Shape(BaseModel):
    """A host shape: id, type tag, corner-anchored transform and a property bag."""

    id: str
    type: str
    x: float = 0.0
    y: float = 0.0
    rotation: float = Field(default=0.0, description="Radians, pivot at the top-left corner")
    props: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class VisualBounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@runtime_checkable
class BoundsOracle(Protocol):
    """Host-side source of rotation-aware bounding boxes."""

    def get_visual_bounds(self, shape_id: str) -> VisualBounds | None: ...


# ── Geometry variant ──


@dataclass(frozen=True)
class RectGeometry:
    w: float
    h: float


@dataclass(frozen=True)
class CircleGeometry:
    r: float


@dataclass(frozen=True)
class PointListGeometry:
    points: NDArray[np.float64]
    closed: bool
    w: float
    h: float


@dataclass(frozen=True)
class BezierGeometry:
    points: tuple[BezierPoint, ...]
    closed: bool
    w: float
    h: float


ShapeGeometry = Union[RectGeometry, CircleGeometry, PointListGeometry, BezierGeometry]


def _number(props: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = props.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def prop_width(shape: Shape) -> float | None:
    return _number(shape.props, "w", "width")


def prop_height(shape: Shape) -> float | None:
    return _number(shape.props, "h", "height")


def prop_radius(shape: Shape) -> float | None:
    return _number(shape.props, "r", "radius")


def prop_sides(shape: Shape) -> int | None:
    sides = _number(shape.props, "sides")
    return int(sides) if sides is not None else None


def prop_points(shape: Shape) -> NDArray[np.float64] | None:
    raw = shape.props.get("points")
    if not raw:
        return None
    pts = coerce_points(raw)
    return pts if len(pts) else None


def prop_control_points(shape: Shape) -> list[Any]:
    """Raw bezier records, stored under ``points`` or ``controlPoints``."""
    for key in ("points", "controlPoints"):
        raw = shape.props.get(key)
        if raw:
            return list(raw)
    return []


def prop_closed(shape: Shape, default: bool = False) -> bool:
    for key in ("isClosed", "closed"):
        if key in shape.props:
            return bool(shape.props[key])
    return default


def shape_dimensions(shape: Shape) -> tuple[float, float]:
    """Unscaled (width, height). Circles without w/h use 2r."""
    if shape.type == "circle" and prop_width(shape) is None:
        r = prop_radius(shape)
        r = DEFAULT_CONFIG.default_radius if r is None else r
        return (2 * r, 2 * r)
    w = prop_width(shape)
    h = prop_height(shape)
    return (
        DEFAULT_CONFIG.default_width if w is None else w,
        DEFAULT_CONFIG.default_height if h is None else h,
    )


def shape_geometry(shape: Shape) -> ShapeGeometry:
    """Classify a shape's property bag into one geometry variant."""
    w, h = shape_dimensions(shape)

    if shape.type == "bezier":
        raw = prop_control_points(shape)
        bps = tuple(p if isinstance(p, BezierPoint) else BezierPoint.from_dict(p) for p in raw)
        return BezierGeometry(points=bps, closed=prop_closed(shape), w=w, h=h)

    if shape.type == "circle" and prop_width(shape) is None:
        r = prop_radius(shape)
        return CircleGeometry(r=DEFAULT_CONFIG.default_radius if r is None else r)

    pts = prop_points(shape)
    if pts is not None:
        default_closed = shape.type in POLYGON_TYPES
        return PointListGeometry(points=pts, closed=prop_closed(shape, default_closed), w=w, h=h)

    return RectGeometry(w=w, h=h)


def approximate_area(shape: Shape) -> float:
    """w*h for box-like shapes, pi*r^2 for circles."""
    geom = shape_geometry(shape)
    if isinstance(geom, CircleGeometry):
        return float(np.pi * geom.r**2)
    w, h = shape_dimensions(shape)
    return w * h
