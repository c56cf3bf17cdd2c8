"""Path data model: tagged point / bezier / opaque-svg representations."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray

from shapesmith.utils.geometry import bbox


class PathKind(str, enum.Enum):
    POINTS = "points"
    BEZIER = "bezier"
    SVG = "svg"


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    w: float
    h: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass(frozen=True)
class BezierPoint:
    """Anchor with optional incoming (cp1) and outgoing (cp2) handles."""

    x: float
    y: float
    cp1: tuple[float, float] | None = None
    cp2: tuple[float, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"x": self.x, "y": self.y}
        if self.cp1 is not None:
            out["cp1"] = {"x": self.cp1[0], "y": self.cp1[1]}
        if self.cp2 is not None:
            out["cp2"] = {"x": self.cp2[0], "y": self.cp2[1]}
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BezierPoint:
        return cls(
            x=float(raw["x"]),
            y=float(raw["y"]),
            cp1=_coerce_xy(raw.get("cp1")),
            cp2=_coerce_xy(raw.get("cp2")),
        )


PathPayload = Union[NDArray[np.float64], tuple[BezierPoint, ...], str]


def _coerce_xy(raw: Any) -> tuple[float, float] | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return (float(raw["x"]), float(raw["y"]))
    return (float(raw[0]), float(raw[1]))


def coerce_points(raw: Any) -> NDArray[np.float64]:
    """Accept [[x, y], ...], [{"x":, "y":}, ...] or an array; return a fresh Nx2 array."""
    if isinstance(raw, np.ndarray):
        arr = np.array(raw, dtype=np.float64)
    else:
        rows = [_coerce_xy(p) for p in raw or []]
        arr = np.array([r for r in rows if r is not None], dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return arr.reshape(-1, 2)


def compute_bounds(kind: PathKind, data: PathPayload) -> Bounds | None:
    """Tight bounds over the path data, bezier handles included. None for svg."""
    if kind == PathKind.SVG:
        return None
    if kind == PathKind.POINTS:
        pts = data
    else:
        coords: list[tuple[float, float]] = []
        for bp in data:
            coords.append((bp.x, bp.y))
            if bp.cp1 is not None:
                coords.append(bp.cp1)
            if bp.cp2 is not None:
                coords.append(bp.cp2)
        pts = np.array(coords, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return None
    xmin, ymin, xmax, ymax = bbox(pts)
    return Bounds(x=xmin, y=ymin, w=xmax - xmin, h=ymax - ymin)


@dataclass(frozen=True, eq=False)
class PathData:
    """One path in one of three representations.

    Point payloads are stored as read-only float64 arrays and bezier payloads
    as tuples, so modifiers cannot edit their input in place.
    """

    kind: PathKind
    data: PathPayload
    is_closed: bool = False
    bounds: Bounds | None = field(default=None)

    def __post_init__(self) -> None:
        if self.kind == PathKind.POINTS:
            arr = coerce_points(self.data)
            arr.setflags(write=False)
            object.__setattr__(self, "data", arr)
        elif self.kind == PathKind.BEZIER:
            object.__setattr__(self, "data", tuple(self.data))

    @classmethod
    def from_points(cls, points: Any, is_closed: bool = False) -> PathData:
        arr = coerce_points(points)
        return cls(PathKind.POINTS, arr, is_closed, compute_bounds(PathKind.POINTS, arr))

    @classmethod
    def from_bezier(cls, points: Any, is_closed: bool = False) -> PathData:
        bps = tuple(
            p if isinstance(p, BezierPoint) else BezierPoint.from_dict(p) for p in points
        )
        return cls(PathKind.BEZIER, bps, is_closed, compute_bounds(PathKind.BEZIER, bps))

    @classmethod
    def from_svg(cls, d: str, is_closed: bool = False) -> PathData:
        return cls(PathKind.SVG, d, is_closed, None)

    @property
    def point_count(self) -> int:
        if self.kind == PathKind.SVG:
            return 0
        return len(self.data)

    def anchors(self) -> NDArray[np.float64]:
        """Nx2 anchor positions (bezier handles excluded)."""
        if self.kind == PathKind.POINTS:
            return np.array(self.data, dtype=np.float64)
        if self.kind == PathKind.BEZIER:
            return np.array([(p.x, p.y) for p in self.data], dtype=np.float64).reshape(-1, 2)
        return np.zeros((0, 2), dtype=np.float64)

    def current_bounds(self) -> Bounds | None:
        return self.bounds if self.bounds is not None else compute_bounds(self.kind, self.data)

    def to_dict(self) -> dict[str, Any]:
        if self.kind == PathKind.POINTS:
            data: Any = [[float(x), float(y)] for x, y in self.data]
        elif self.kind == PathKind.BEZIER:
            data = [p.to_dict() for p in self.data]
        else:
            data = self.data
        return {
            "type": self.kind.value,
            "data": data,
            "isClosed": self.is_closed,
            "bounds": self.bounds.to_dict() if self.bounds else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PathData:
        kind = PathKind(raw.get("type", "points"))
        closed = bool(raw.get("isClosed", False))
        if kind == PathKind.POINTS:
            return cls.from_points(raw.get("data", []), closed)
        if kind == PathKind.BEZIER:
            return cls.from_bezier(raw.get("data", []), closed)
        return cls.from_svg(str(raw.get("data", "")), closed)


def is_valid_path_data(path: PathData) -> bool:
    """Structural check: finite coordinates, non-empty svg string."""
    if path.kind == PathKind.SVG:
        return isinstance(path.data, str) and len(path.data) > 0
    if path.kind == PathKind.POINTS:
        return bool(np.all(np.isfinite(path.data)))
    return all(math.isfinite(p.x) and math.isfinite(p.y) for p in path.data)


@dataclass(frozen=True, eq=False)
class PathModificationResult:
    path_data: PathData
    bounds_changed: bool = False
    new_bounds: Bounds | None = None

    @classmethod
    def unchanged(cls, path: PathData) -> PathModificationResult:
        return cls(path_data=path, bounds_changed=False, new_bounds=None)
