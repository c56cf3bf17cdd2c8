"""Boolean geometry engine: shapes to polygon rings, shapely clipping, outline rebuild.

Polygon coordinates use the nested ring format
``polygons -> rings -> points``, every ring closed (first == last), first
ring exterior, the rest holes. Everything is tuples so cached values can be
shared safely.
"""

from __future__ import annotations

import enum
import json
import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.validation import make_valid

from shapesmith.engine.config import DEFAULT_CONFIG, EngineConfig
from shapesmith.engine.context import CollectiveBounds, ShapeState, collective_bounds
from shapesmith.engine.errors import BooleanOperationError, MaterializationError
from shapesmith.engine.path_data import BezierPoint, coerce_points
from shapesmith.models.shape import (
    BezierGeometry,
    BoundsOracle,
    PointListGeometry,
    Shape,
    approximate_area,
    prop_sides,
    shape_dimensions,
    shape_geometry,
)
from shapesmith.utils.geometry import bbox, ellipse_points, regular_polygon
from shapesmith.utils.transform_math import rotate_around_pivot

logger = logging.getLogger(__name__)

Ring = tuple[tuple[float, float], ...]
PolygonCoordinates = tuple[tuple[Ring, ...], ...]


class BooleanOperation(str, enum.Enum):
    UNION = "union"
    SUBTRACT = "subtract"
    INTERSECT = "intersect"
    EXCLUDE = "exclude"


# ── Cache ──


def shape_fingerprint(shape: Shape) -> str:
    """Cache key: identity, type, position, rotation and every property."""
    props = json.dumps(shape.props, sort_keys=True, default=str)
    return f"{shape.id}-{shape.type}-{shape.x}-{shape.y}-{shape.rotation}-{props}"


class PolygonCache:
    """Bounded LRU map of shape fingerprint -> polygon coordinates.

    Keys only change when tracked props change; callers must ``invalidate``
    or ``clear`` after editing geometry the props don't describe.
    """

    def __init__(self, capacity: int = DEFAULT_CONFIG.polygon_cache_capacity) -> None:
        self.capacity = max(1, capacity)
        # key -> (shape id, polygon)
        self._entries: OrderedDict[str, tuple[str, PolygonCoordinates]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> PolygonCoordinates | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            self._entries.move_to_end(key)
            return entry[1]

    def put(self, key: str, value: PolygonCoordinates, shape_id: str = "") -> None:
        with self._lock:
            self._entries[key] = (shape_id, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                self._entries.popitem(last=False)

    def invalidate(self, shape_id: str) -> int:
        """Drop every entry for ``shape_id``. Returns the number removed."""
        with self._lock:
            stale = [k for k, (owner, _) in self._entries.items() if owner == shape_id]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def clear(self) -> int:
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
        return n

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return self.size


# ── Shapely conversion ──


def _close(points: np.ndarray) -> Ring:
    ring = [(float(x), float(y)) for x, y in points]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return tuple(ring)


def _polygonal_parts(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if hasattr(geom, "geoms"):
        parts: list[Polygon] = []
        for g in geom.geoms:
            parts.extend(_polygonal_parts(g))
        return parts
    return []


def to_shapely(coords: PolygonCoordinates) -> BaseGeometry:
    polys = []
    for poly in coords:
        if not poly or len(poly[0]) < 4:
            continue
        p = Polygon(poly[0], list(poly[1:]))
        if not p.is_valid:
            p = make_valid(p)
        polys.extend(_polygonal_parts(p))
    if not polys:
        return Polygon()
    return unary_union(polys)


def from_shapely(geom: BaseGeometry) -> PolygonCoordinates:
    """Ring coordinates of every polygonal part, largest area first."""
    parts = sorted(_polygonal_parts(geom), key=lambda p: p.area, reverse=True)
    out = []
    for p in parts:
        if p.area <= 0:
            continue
        rings = [_close(np.asarray(p.exterior.coords))]
        rings.extend(_close(np.asarray(r.coords)) for r in p.interiors)
        out.append(tuple(rings))
    return tuple(out)


def _apply_op(a: BaseGeometry, b: BaseGeometry, op: BooleanOperation) -> BaseGeometry:
    if op == BooleanOperation.UNION:
        return a.union(b)
    if op == BooleanOperation.SUBTRACT:
        return a.difference(b)
    if op == BooleanOperation.INTERSECT:
        return a.intersection(b)
    return a.symmetric_difference(b)


# ── Style ──


def select_style_source_shape(shapes: list[Shape], op: BooleanOperation | str) -> Shape | None:
    """Shape whose style the boolean result inherits.

    union / exclude: largest approximate area (first wins ties).
    subtract / intersect: the first shape.
    """
    if not shapes:
        return None
    if len(shapes) == 1:
        return shapes[0]
    op = BooleanOperation(op)
    if op in (BooleanOperation.SUBTRACT, BooleanOperation.INTERSECT):
        return shapes[0]
    best = shapes[0]
    best_area = approximate_area(best)
    for s in shapes[1:]:
        area = approximate_area(s)
        if area > best_area:
            best, best_area = s, area
    return best


def extract_style(shape: Shape | None, config: EngineConfig = DEFAULT_CONFIG) -> dict[str, Any]:
    props = shape.props if shape is not None else {}
    color = props.get("color", config.default_color)
    return {
        "color": color,
        "fillColor": props.get("fillColor", color),
        "strokeWidth": props.get("strokeWidth", config.default_stroke_width),
        "fill": props.get("fill", True),
        "dash": props.get("dash", config.default_dash),
    }


@dataclass
class BooleanResult:
    shape: Shape
    polygon: PolygonCoordinates
    operation: BooleanOperation
    style_source_id: str | None = None
    source_ids: list[str] = field(default_factory=list)


class BooleanEngine:
    """Owns the polygon cache; converts, clips and rebuilds shapes."""

    def __init__(
        self,
        oracle: BoundsOracle | None = None,
        cache: PolygonCache | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.oracle = oracle
        self.cache = cache if cache is not None else PolygonCache(self.config.polygon_cache_capacity)

    # ── Shape -> polygon ──

    def shape_to_polygon(self, shape: Shape) -> PolygonCoordinates:
        key = shape_fingerprint(shape)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        polygon = self._convert(shape)
        self.cache.put(key, polygon, shape.id)
        return polygon

    def _local_outline(self, shape: Shape) -> tuple[np.ndarray, tuple[float, float]]:
        """Outline in world space before rotation, plus the rotation center."""
        cfg = self.config
        x, y = shape.x, shape.y
        w, h = shape_dimensions(shape)
        center = (x + w / 2, y + h / 2)

        if shape.type == "circle" or (shape.type == "geo" and shape.props.get("geo") == "ellipse"):
            return ellipse_points(center[0], center[1], w / 2, h / 2, cfg.ellipse_segments), center

        geom = shape_geometry(shape)
        if isinstance(geom, BezierGeometry) and len(geom.points) >= 3:
            anchors = np.array([(p.x, p.y) for p in geom.points], dtype=np.float64)
            return anchors + (x, y), center
        if isinstance(geom, PointListGeometry) and len(geom.points) >= 3:
            return geom.points + (x, y), center

        if shape.type == "polygon":
            sides = prop_sides(shape) or cfg.default_polygon_sides
            return regular_polygon(sides, w, h) + (x, y), center
        if shape.type == "triangle":
            return np.array([(x + w / 2, y), (x, y + h), (x + w, y + h)]), center

        # Rectangles, geo boxes and anything unknown: the bounding box
        return np.array([(x, y), (x + w, y), (x + w, y + h), (x, y + h)], dtype=np.float64), center

    def _convert(self, shape: Shape) -> PolygonCoordinates:
        points, center = self._local_outline(shape)
        if shape.rotation:
            points = np.array(
                [rotate_around_pivot((float(px), float(py)), center, shape.rotation) for px, py in points]
            )
        return ((_close(points),),)

    # ── Clipping ──

    def perform_boolean_operation(
        self,
        shapes: list[Shape],
        op: BooleanOperation | str,
    ) -> PolygonCoordinates:
        """Left fold of ``op`` over the shapes' polygons."""
        op = BooleanOperation(op)
        if not shapes:
            return ()
        first = self.shape_to_polygon(shapes[0])
        if len(shapes) == 1:
            return first

        result = to_shapely(first)
        for shape in shapes[1:]:
            result = _apply_op(result, to_shapely(self.shape_to_polygon(shape)), op)
            if not result.is_valid:
                result = make_valid(result)
        polygon = from_shapely(result)
        logger.debug("%s over %d shapes -> %d polygons", op.value, len(shapes), len(polygon))
        return polygon

    # ── Polygon -> outline shape ──

    def polygon_to_outline_shape(
        self,
        polygon: PolygonCoordinates,
        original: Shape,
        position_context: CollectiveBounds | None = None,
        style_source: Shape | None = None,
        result_id: str | None = None,
    ) -> Shape:
        """Closed bezier outline from the first ring of the first polygon.

        Holes and further polygons are dropped. Placement: collective-bounds
        center, else the oracle's visual box of ``original``, else the
        polygon's own position.
        """
        style = extract_style(style_source or original, self.config)
        shape_id = result_id or f"{original.id}:boolean"

        ring = np.array(polygon[0][0], dtype=np.float64) if polygon and polygon[0] else np.zeros((0, 2))
        if len(ring) > 1 and np.array_equal(ring[0], ring[-1]):
            ring = ring[:-1]

        if len(ring) < 3:
            logger.warning("Boolean result for %s is empty; keeping original placement", original.id)
            w, h = shape_dimensions(original)
            return Shape(
                id=shape_id,
                type="bezier",
                x=original.x,
                y=original.y,
                rotation=0.0,
                props={"w": w, "h": h, "points": [], "isClosed": True, **style},
                meta={"isBooleanResult": True, "booleanEmpty": True},
            )

        xmin, ymin, xmax, ymax = bbox(ring)
        w, h = xmax - xmin, ymax - ymin

        if position_context is not None:
            cx, cy = position_context.center
            x, y = cx - w / 2, cy - h / 2
        else:
            x, y = xmin, ymin
            visual = self.oracle.get_visual_bounds(original.id) if self.oracle else None
            if visual is not None:
                ow, oh = shape_dimensions(original)
                vcx, vcy = visual.center
                x += vcx - (original.x + ow / 2)
                y += vcy - (original.y + oh / 2)

        local = ring - (xmin, ymin)
        return Shape(
            id=shape_id,
            type="bezier",
            x=float(x),
            y=float(y),
            rotation=0.0,
            props={
                "w": float(w),
                "h": float(h),
                "points": [{"x": float(px), "y": float(py)} for px, py in local],
                "isClosed": True,
                **style,
            },
            meta={"isBooleanResult": True},
        )

    # ── Convenience ──

    def combine(
        self,
        shapes: list[Shape],
        op: BooleanOperation | str,
        position_context: CollectiveBounds | None = None,
    ) -> BooleanResult:
        """Clip ``shapes`` and rebuild one outline that replaces the first shape."""
        if not shapes:
            raise BooleanOperationError("Boolean operation needs at least one shape")
        op = BooleanOperation(op)
        try:
            polygon = self.perform_boolean_operation(shapes, op)
        except (GEOSException, ValueError) as e:
            raise BooleanOperationError(f"{op.value} failed: {e}") from e

        style_source = select_style_source_shape(shapes, op)
        outline = self.polygon_to_outline_shape(polygon, shapes[0], position_context, style_source)
        outline.meta["booleanOperation"] = op.value
        outline.meta["sourceShapeIds"] = [s.id for s in shapes]
        return BooleanResult(
            shape=outline,
            polygon=polygon,
            operation=op,
            style_source_id=style_source.id if style_source else None,
            source_ids=[s.id for s in shapes],
        )

    def combine_state(
        self,
        state: ShapeState,
        op: BooleanOperation | str,
        preserve_collective_position: bool = False,
    ) -> BooleanResult:
        """Combine every instance of an array result into one outline."""
        shapes = materialize_instances(state)
        context = collective_bounds(state) if preserve_collective_position else None
        return self.combine(shapes, op, context)


def materialize_instances(state: ShapeState) -> list[Shape]:
    """Standalone shapes for every instance, with scale baked into the props.

    Positions are re-anchored so the box center matches the instance's visual
    center, which is the pivot ``shape_to_polygon`` rotates around.
    """
    shapes: list[Shape] = []
    for inst in state.instances:
        t = inst.transform
        if t.scale_x <= 0 or t.scale_y <= 0 or not (math.isfinite(t.x) and math.isfinite(t.y)):
            raise MaterializationError(f"Instance {inst.index} has an unusable transform")

        props = dict(inst.shape.props)
        w, h = inst.size
        props["w"], props["h"] = w, h
        for key in ("width", "height", "r", "radius"):
            props.pop(key, None)
        raw_points = props.get("points")
        if raw_points and inst.shape.type != "bezier":
            pts = coerce_points(raw_points) * (t.scale_x, t.scale_y)
            props["points"] = [{"x": float(px), "y": float(py)} for px, py in pts]
        elif raw_points:
            props["points"] = [_scale_bezier(p, t.scale_x, t.scale_y) for p in raw_points]

        cx, cy = inst.center
        shapes.append(inst.shape.model_copy(
            update={
                "id": f"{inst.shape.id}-{inst.index}",
                "x": cx - w / 2,
                "y": cy - h / 2,
                "rotation": t.rotation,
                "props": props,
            },
            deep=True,
        ))
    return shapes


def _scale_bezier(raw: Any, sx: float, sy: float) -> dict[str, Any]:
    p = raw if isinstance(raw, BezierPoint) else BezierPoint.from_dict(raw)
    return BezierPoint(
        p.x * sx,
        p.y * sy,
        None if p.cp1 is None else (p.cp1[0] * sx, p.cp1[1] * sy),
        None if p.cp2 is None else (p.cp2[0] * sx, p.cp2[1] * sy),
    ).to_dict()
