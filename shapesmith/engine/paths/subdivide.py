"""Subdivide: insert interpolated points between neighbors."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from shapesmith.engine.context import GroupContext, ShapeState
from shapesmith.engine.path_data import BezierPoint, PathData, PathKind
from shapesmith.engine.paths.base import PathModifier
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import SubdivideSettings


def _lerp(a: tuple[float, float], b: tuple[float, float], t: float) -> tuple[float, float]:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def _subdivide_points(points: NDArray[np.float64], closed: bool, t: float) -> NDArray[np.float64]:
    nxt = np.roll(points, -1, axis=0)
    inserted = points + (nxt - points) * t
    out = np.empty((len(points) * 2, 2), dtype=np.float64)
    out[0::2] = points
    out[1::2] = inserted
    # Open paths have no wrap segment
    return out if closed else out[:-1]


def _subdivide_bezier(
    points: tuple[BezierPoint, ...],
    closed: bool,
    t: float,
) -> list[BezierPoint]:
    n = len(points)
    segments = n if closed else n - 1
    out: list[BezierPoint] = []
    for i in range(n):
        p1 = points[i]
        out.append(p1)
        if i >= segments:
            continue
        p2 = points[(i + 1) % n]
        cp1 = None
        if p1.cp2 is not None and p2.cp1 is not None:
            cp1 = _lerp(p1.cp2, p2.cp1, t)
        x, y = _lerp((p1.x, p1.y), (p2.x, p2.y), t)
        out.append(BezierPoint(x, y, cp1, None))
    return out


def _smooth_points(points: NDArray[np.float64], closed: bool) -> NDArray[np.float64]:
    """(prev + 2*cur + next) / 4; open endpoints stay where they are."""
    prev = np.roll(points, 1, axis=0)
    nxt = np.roll(points, -1, axis=0)
    out = (prev + 2 * points + nxt) / 4
    if not closed:
        out[0] = points[0]
        out[-1] = points[-1]
    return out


def _smooth_bezier(points: list[BezierPoint], closed: bool) -> list[BezierPoint]:
    anchors = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    moved = _smooth_points(anchors, closed)
    out: list[BezierPoint] = []
    for p, (x, y) in zip(points, moved):
        dx, dy = float(x) - p.x, float(y) - p.y
        out.append(BezierPoint(
            float(x),
            float(y),
            None if p.cp1 is None else (p.cp1[0] + dx, p.cp1[1] + dy),
            None if p.cp2 is None else (p.cp2[0] + dx, p.cp2[1] + dy),
        ))
    return out


class SubdivideModifier(PathModifier):
    id = "subdivide"
    settings_model = SubdivideSettings
    min_points = 2

    def apply(self, path: PathData, cfg: SubdivideSettings) -> PathData:
        if path.kind == PathKind.POINTS:
            pts = np.array(path.data, dtype=np.float64)
            for _ in range(cfg.iterations):
                pts = _subdivide_points(pts, path.is_closed, cfg.factor)
                if cfg.smooth:
                    pts = _smooth_points(pts, path.is_closed)
            return PathData(PathKind.POINTS, pts, path.is_closed)

        bps = list(path.data)
        for _ in range(cfg.iterations):
            bps = _subdivide_bezier(tuple(bps), path.is_closed, cfg.factor)
            if cfg.smooth:
                bps = _smooth_bezier(bps, path.is_closed)
        return PathData(PathKind.BEZIER, bps, path.is_closed)


SUBDIVIDE = SubdivideModifier()


@modifier(
    id="subdivide",
    kind=ModifierKind.PATH,
    settings=SubdivideSettings,
    description="Insert interpolated points on every segment",
)
def subdivide(
    state: ShapeState,
    settings: SubdivideSettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    return SUBDIVIDE.process(state, settings)
