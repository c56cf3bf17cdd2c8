"""Smooth: Laplacian relaxation toward the neighbor average."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from shapesmith.engine.context import GroupContext, ShapeState
from shapesmith.engine.path_data import BezierPoint, PathData, PathKind
from shapesmith.engine.paths.base import PathModifier
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import SmoothSettings
from shapesmith.utils.geometry import turn_angle


def _corner_mask(points: NDArray[np.float64], closed: bool, threshold: float) -> NDArray[np.bool_]:
    """True where a point is a corner (turn angle below threshold, or degenerate)."""
    n = len(points)
    mask = np.zeros(n, dtype=bool)
    for i in range(n):
        if not closed and (i == 0 or i == n - 1):
            mask[i] = True
            continue
        angle = turn_angle(points[(i - 1) % n], points[i], points[(i + 1) % n])
        mask[i] = angle is None or angle < threshold
    return mask


def _relax(points: NDArray[np.float64], closed: bool, factor: float) -> NDArray[np.float64]:
    prev = np.roll(points, 1, axis=0)
    nxt = np.roll(points, -1, axis=0)
    out = points * (1 - factor) + (prev + nxt) * (factor / 2)
    if not closed:
        out[0] = points[0]
        out[-1] = points[-1]
    return out


class SmoothModifier(PathModifier):
    id = "smooth"
    settings_model = SmoothSettings
    min_points = 3

    def apply(self, path: PathData, cfg: SmoothSettings) -> PathData:
        closed = path.is_closed
        if path.kind == PathKind.POINTS:
            pts = np.array(path.data, dtype=np.float64)
            for _ in range(cfg.iterations):
                relaxed = _relax(pts, closed, cfg.factor)
                if cfg.preserve_corners:
                    keep = _corner_mask(pts, closed, cfg.corner_threshold)
                    relaxed[keep] = pts[keep]
                pts = relaxed
            return PathData(PathKind.POINTS, pts, closed)

        bps = list(path.data)
        n = len(bps)
        handle_weight = cfg.factor * 0.5
        for _ in range(cfg.iterations):
            anchors = np.array([(p.x, p.y) for p in bps], dtype=np.float64)
            relaxed = _relax(anchors, closed, cfg.factor)
            out: list[BezierPoint] = []
            for i, p in enumerate(bps):
                has_prev = closed or i > 0
                has_next = closed or i < n - 1
                cp1 = p.cp1
                cp2 = p.cp2
                if cp1 is not None and has_prev:
                    prev = bps[(i - 1) % n]
                    cp1 = (cp1[0] + (prev.x - cp1[0]) * handle_weight,
                           cp1[1] + (prev.y - cp1[1]) * handle_weight)
                if cp2 is not None and has_next:
                    nxt = bps[(i + 1) % n]
                    cp2 = (cp2[0] + (nxt.x - cp2[0]) * handle_weight,
                           cp2[1] + (nxt.y - cp2[1]) * handle_weight)
                out.append(BezierPoint(float(relaxed[i][0]), float(relaxed[i][1]), cp1, cp2))
            bps = out
        return PathData(PathKind.BEZIER, bps, closed)


SMOOTH = SmoothModifier()


@modifier(
    id="smooth",
    kind=ModifierKind.PATH,
    settings=SmoothSettings,
    description="Relax points toward their neighbors",
)
def smooth(
    state: ShapeState,
    settings: SmoothSettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    return SMOOTH.process(state, settings)
