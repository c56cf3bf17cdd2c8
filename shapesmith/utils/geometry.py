"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def triangle_area(
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    c: NDArray[np.float64],
) -> float:
    """Unsigned area of triangle abc."""
    return abs(float((b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1]))) / 2


def point_segment_distance(
    p: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
) -> float:
    """Distance from p to segment ab (projection clamped to the segment)."""
    seg = b - a
    seg_len_sq = float(np.dot(seg, seg))
    if seg_len_sq < 1e-20:
        return float(np.linalg.norm(p - a))
    t = float(np.dot(p - a, seg)) / seg_len_sq
    t = max(0.0, min(1.0, t))
    closest = a + t * seg
    return float(np.linalg.norm(p - closest))


def turn_angle(
    prev_pt: NDArray[np.float64],
    pt: NDArray[np.float64],
    next_pt: NDArray[np.float64],
) -> float | None:
    """Angle in degrees between the vectors pt->prev and pt->next.

    180 means straight, small values mean a sharp corner. Returns None when
    either vector has zero length.
    """
    v1 = prev_pt - pt
    v2 = next_pt - pt
    len1 = float(np.linalg.norm(v1))
    len2 = float(np.linalg.norm(v2))
    if len1 < 1e-12 or len2 < 1e-12:
        return None
    cos_a = float(np.dot(v1, v2)) / (len1 * len2)
    cos_a = max(-1.0, min(1.0, cos_a))
    return math.degrees(math.acos(cos_a))


def regular_polygon(
    sides: int,
    width: float,
    height: float,
) -> NDArray[np.float64]:
    """N-gon inscribed in a width x height box, first vertex at the top."""
    sides = max(3, int(sides))
    angles = np.arange(sides) * (2 * math.pi / sides) - math.pi / 2
    cx, cy = width / 2, height / 2
    return np.column_stack([
        cx + (width / 2) * np.cos(angles),
        cy + (height / 2) * np.sin(angles),
    ])


def ellipse_points(
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    segments: int,
) -> NDArray[np.float64]:
    """Vertices of an ellipse approximation, starting at angle 0."""
    angles = np.arange(segments) * (2 * math.pi / segments)
    return np.column_stack([
        cx + rx * np.cos(angles),
        cy + ry * np.sin(angles),
    ])
