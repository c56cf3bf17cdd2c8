"""Simplify: Douglas-Peucker point reduction, closed-path aware."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from shapesmith.engine.config import DEFAULT_CONFIG
from shapesmith.engine.context import GroupContext, ShapeState
from shapesmith.engine.path_data import PathData, PathKind
from shapesmith.engine.paths.base import PathModifier
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import SimplifySettings
from shapesmith.utils.contour import rdp_indices
from shapesmith.utils.geometry import triangle_area, turn_angle

logger = logging.getLogger(__name__)


def _closed_start(points: NDArray[np.float64]) -> int:
    """Index of the point forming the largest triangle with its neighbors."""
    n = len(points)
    areas = [
        triangle_area(points[(i - 1) % n], points[i], points[(i + 1) % n]) for i in range(n)
    ]
    return int(np.argmax(areas))


def simplify_indices(points: NDArray[np.float64], closed: bool, tolerance: float) -> list[int]:
    """Kept indices (ascending) after Douglas-Peucker.

    Closed paths start at the most prominent vertex and get a duplicated
    closing point so the wrap segment is considered too.
    """
    if not closed:
        return rdp_indices(points, tolerance)

    n = len(points)
    start = _closed_start(points)
    order = [(start + k) % n for k in range(n)] + [start]
    kept = rdp_indices(points[order], tolerance)
    # Drop the duplicated closing point, map back to original indices
    return sorted(order[k] for k in kept if k != n)


def _corner_indices(points: NDArray[np.float64], closed: bool, threshold: float) -> list[int]:
    n = len(points)
    corners: list[int] = []
    for i in range(n):
        if not closed and (i == 0 or i == n - 1):
            continue
        angle = turn_angle(points[(i - 1) % n], points[i], points[(i + 1) % n])
        if angle is not None and angle < threshold:
            corners.append(i)
    return corners


class SimplifyModifier(PathModifier):
    id = "simplify"
    settings_model = SimplifySettings
    min_points = 3

    def apply(self, path: PathData, cfg: SimplifySettings) -> PathData | None:
        anchors = path.anchors()
        n = len(anchors)
        if n <= cfg.min_points or (path.is_closed and n <= 3):
            return None

        kept = simplify_indices(anchors, path.is_closed, cfg.tolerance)

        if cfg.preserve_corners:
            retained = anchors[kept]
            extra = []
            for i in _corner_indices(anchors, path.is_closed, DEFAULT_CONFIG.simplify_corner_angle):
                if i in kept:
                    continue
                distances = np.linalg.norm(retained - anchors[i], axis=1)
                if not np.any(distances <= cfg.tolerance):
                    extra.append(i)
            kept = sorted(set(kept) | set(extra))

        if len(kept) < cfg.min_points:
            logger.debug("simplify: %d -> %d is below minPoints, keeping original", n, len(kept))
            return None

        if path.kind == PathKind.POINTS:
            return PathData(PathKind.POINTS, anchors[kept], path.is_closed)
        return PathData(PathKind.BEZIER, [path.data[i] for i in kept], path.is_closed)


SIMPLIFY = SimplifyModifier()


@modifier(
    id="simplify",
    kind=ModifierKind.PATH,
    settings=SimplifySettings,
    description="Douglas-Peucker point reduction",
)
def simplify(
    state: ShapeState,
    settings: SimplifySettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    return SIMPLIFY.process(state, settings)
