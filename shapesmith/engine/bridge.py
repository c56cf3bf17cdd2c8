"""Shape <-> PathData bridging.

Path data lives in the shape's local space (origin at the unrotated top-left
corner). Writing a modified path back rebases its points to the origin and
moves the shape by the same amount, so nothing jumps on screen.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from shapesmith.engine.config import DEFAULT_CONFIG, EngineConfig
from shapesmith.engine.context import ShapeInstance, Transform
from shapesmith.engine.path_data import (
    BezierPoint,
    Bounds,
    PathData,
    PathKind,
    PathModificationResult,
)
from shapesmith.models.shape import (
    POLYGON_TYPES,
    STROKE_TYPES,
    Shape,
    prop_closed,
    prop_control_points,
    prop_points,
    prop_sides,
    shape_dimensions,
)
from shapesmith.utils.geometry import ellipse_points, regular_polygon
from shapesmith.utils.transform_math import rotate_around_pivot

logger = logging.getLogger(__name__)

# Shape type -> native path representation. Types missing here have no path.
PATH_CAPABILITIES: dict[str, PathKind] = {
    "polygon": PathKind.POINTS,
    "triangle": PathKind.POINTS,
    "rectangle": PathKind.POINTS,
    "circle": PathKind.POINTS,
    "line": PathKind.POINTS,
    "draw": PathKind.POINTS,
    "arrow": PathKind.POINTS,
    "sine-wave": PathKind.POINTS,
    "custom-line": PathKind.POINTS,
    "custom-draw": PathKind.POINTS,
    "bezier": PathKind.BEZIER,
    "geo": PathKind.SVG,
}

# Style props carried over when a shape is upgraded to a bezier shape
_STYLE_KEYS = ("color", "fillColor", "strokeWidth", "fill", "dash", "size")

_SINE_WAVE_SAMPLES = 64


def path_capability(shape_type: str) -> PathKind | None:
    if shape_type in PATH_CAPABILITIES:
        return PATH_CAPABILITIES[shape_type]
    if shape_type.startswith("custom-"):
        return PathKind.POINTS
    return None


def _sine_wave(shape: Shape, w: float, h: float) -> np.ndarray:
    waves = float(shape.props.get("waves", shape.props.get("frequency", 1)) or 1)
    t = np.linspace(0.0, 1.0, _SINE_WAVE_SAMPLES)
    return np.column_stack([t * w, h / 2 + (h / 2) * np.sin(2 * math.pi * waves * t)])


def shape_to_path(shape: Shape, config: EngineConfig = DEFAULT_CONFIG) -> PathData | None:
    """Extract a shape's outline or skeleton as PathData. None if not path-capable."""
    kind = path_capability(shape.type)
    if kind is None:
        return None

    w, h = shape_dimensions(shape)

    if kind == PathKind.BEZIER:
        raw = prop_control_points(shape)
        return PathData.from_bezier(raw, prop_closed(shape))

    if kind == PathKind.SVG:
        return PathData.from_svg(f"M0,0 L{w},0 L{w},{h} L0,{h} Z", True)

    override = shape.props.get("renderAsPath")
    if shape.type in POLYGON_TYPES and override:
        return PathData.from_points(override, True)

    pts = prop_points(shape)
    if pts is not None:
        return PathData.from_points(pts, prop_closed(shape, shape.type in POLYGON_TYPES))

    if shape.type == "polygon":
        sides = prop_sides(shape) or config.default_polygon_sides
        return PathData.from_points(regular_polygon(sides, w, h), True)
    if shape.type == "triangle":
        return PathData.from_points([(w / 2, 0.0), (0.0, h), (w, h)], True)
    if shape.type == "rectangle":
        return PathData.from_points([(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)], True)
    if shape.type == "circle":
        return PathData.from_points(
            ellipse_points(w / 2, h / 2, w / 2, h / 2, config.circle_path_segments), True
        )
    if shape.type == "sine-wave":
        return PathData.from_points(_sine_wave(shape, w, h), False)

    # Stroke without stored points: a horizontal segment through the middle
    return PathData.from_points([(0.0, h / 2), (w, h / 2)], False)


def needs_curve_upgrade(shape: Shape, path: PathData) -> bool:
    """Whether writing ``path`` back requires turning ``shape`` into a bezier shape.

    Bezier shapes and open strokes store their data natively; every other
    shape is a parametric primitive whose props can't hold arbitrary points.
    """
    if path.kind == PathKind.SVG or shape.type == "bezier":
        return False
    if path.kind == PathKind.BEZIER:
        return True
    return shape.type not in STROKE_TYPES and not shape.type.startswith("custom-")


def _rebased(path: PathData, bounds: Bounds) -> list[Any]:
    """Path points shifted so the bounds start at the origin, as prop dicts."""
    if path.kind == PathKind.POINTS:
        return [{"x": float(x) - bounds.x, "y": float(y) - bounds.y} for x, y in path.data]

    def shift(cp: tuple[float, float] | None) -> tuple[float, float] | None:
        return None if cp is None else (cp[0] - bounds.x, cp[1] - bounds.y)

    return [
        BezierPoint(p.x - bounds.x, p.y - bounds.y, shift(p.cp1), shift(p.cp2)).to_dict()
        for p in path.data
    ]


def path_to_shape(path: PathData, shape: Shape) -> Shape:
    """New shape carrying ``path`` (rebased to its bounds), upgraded if needed.

    Position is left untouched; callers shift it by the bounds origin.
    """
    bounds = path.current_bounds()
    if path.kind == PathKind.SVG or bounds is None:
        return shape.model_copy(deep=True)

    points = _rebased(path, bounds)
    w = max(bounds.w, 1.0)
    h = max(bounds.h, 1.0)

    if needs_curve_upgrade(shape, path):
        props: dict[str, Any] = {k: shape.props[k] for k in _STYLE_KEYS if k in shape.props}
        props.update({"w": w, "h": h, "points": points, "isClosed": path.is_closed})
        meta = dict(shape.meta)
        meta["convertedFromType"] = shape.type
        meta["pathModified"] = True
        logger.debug("Upgraded %s (%s) to bezier", shape.id, shape.type)
        return shape.model_copy(update={"type": "bezier", "props": props, "meta": meta}, deep=True)

    props = dict(shape.props)
    props.update({"w": w, "h": h, "points": points, "isClosed": path.is_closed})
    props.pop("width", None)
    props.pop("height", None)
    props.pop("renderAsPath", None)
    return shape.model_copy(update={"props": props}, deep=True)


def apply_path_result(
    inst: ShapeInstance,
    original: PathData,
    result: PathModificationResult,
) -> ShapeInstance:
    """Write a modified path back into an instance.

    The local origin moves to the new bounds' top-left, so the transform moves
    by that offset turned by the instance rotation.
    """
    new_bounds = result.new_bounds or result.path_data.current_bounds()
    if new_bounds is None:
        return inst

    t = inst.transform
    dx, dy = rotate_around_pivot(
        (new_bounds.x * t.scale_x, new_bounds.y * t.scale_y), (0.0, 0.0), t.rotation
    )
    transform = Transform(
        x=t.x + dx,
        y=t.y + dy,
        rotation=t.rotation,
        scale_x=t.scale_x,
        scale_y=t.scale_y,
    )
    shape = path_to_shape(result.path_data, inst.shape)
    shape = shape.model_copy(update={"x": transform.x, "y": transform.y})

    old_bounds = original.current_bounds()
    return inst.derive(
        transform,
        {
            "pathModified": True,
            "originalPathBounds": old_bounds.to_dict() if old_bounds else None,
            "newPathBounds": new_bounds.to_dict(),
        },
        shape=shape,
    )
