"""Polyline simplification — Ramer-Douglas-Peucker."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def _segment_distances(
    points: NDArray[np.float64],
    start: NDArray[np.float64],
    end: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Distance from each point to segment start-end, projection clamped to [0, 1]."""
    seg = end - start
    seg_len_sq = float(np.dot(seg, seg))
    if seg_len_sq < 1e-20:
        return np.linalg.norm(points - start, axis=1)
    t = np.clip(np.dot(points - start, seg) / seg_len_sq, 0.0, 1.0)
    closest = start + np.outer(t, seg)
    return np.linalg.norm(points - closest, axis=1)


def rdp_indices(
    points: NDArray[np.float64],
    epsilon: float,
) -> list[int]:
    """Ramer-Douglas-Peucker over an open polyline, returning kept indices.

    The farthest point (first one on ties) splits the run when its distance
    exceeds ``epsilon``. Endpoints are always kept. Uses an explicit stack so
    long paths don't hit the recursion limit.
    """
    n = len(points)
    if n <= 2:
        return list(range(n))

    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        inner = points[first + 1 : last]
        distances = _segment_distances(inner, points[first], points[last])
        max_idx = int(np.argmax(distances))
        if distances[max_idx] > epsilon:
            split = first + 1 + max_idx
            keep[split] = True
            stack.append((first, split))
            stack.append((split, last))

    return [int(i) for i in np.flatnonzero(keep)]

