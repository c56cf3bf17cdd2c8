"""Rotation helpers for corner-anchored shapes. No engine imports.

Host shapes rotate around their top-left corner. Processors reason about
visual centers, so every center-based target goes through
``corner_from_center`` before it is written to a transform.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def degrees_to_radians(deg: float) -> float:
    return deg * math.pi / 180.0


def radians_to_degrees(rad: float) -> float:
    return rad * 180.0 / math.pi


def rotate_around_pivot(
    point: tuple[float, float],
    pivot: tuple[float, float],
    angle: float,
) -> tuple[float, float]:
    """Rotate ``point`` by ``angle`` radians around ``pivot``."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - pivot[0]
    dy = point[1] - pivot[1]
    return (
        pivot[0] + dx * cos_a - dy * sin_a,
        pivot[1] + dx * sin_a + dy * cos_a,
    )


def compensate_corner_anchored_rotation(
    width: float,
    height: float,
    rotation: float,
) -> tuple[float, float]:
    """Offset of the visual center caused by rotating around the top-left corner.

    Rotating a ``width`` x ``height`` box by ``rotation`` around its corner
    moves its center by ``(dx, dy)`` relative to an unrotated box. Subtract it
    from the corner to make the rotation look center-pivoted.
    """
    half_w = width / 2
    half_h = height / 2
    cos_t = math.cos(rotation)
    sin_t = math.sin(rotation)
    dx = half_w * (cos_t - 1) - half_h * sin_t
    dy = half_w * sin_t + half_h * (cos_t - 1)
    return (dx, dy)


def corner_from_center(
    center: tuple[float, float],
    width: float,
    height: float,
    rotation: float,
) -> tuple[float, float]:
    """Corner position that puts the visual center of a rotated box at ``center``."""
    dx, dy = compensate_corner_anchored_rotation(width, height, rotation)
    return (
        center[0] - width / 2 - dx,
        center[1] - height / 2 - dy,
    )


def center_from_corner(
    corner: tuple[float, float],
    width: float,
    height: float,
    rotation: float,
) -> tuple[float, float]:
    """Visual center of a box rotated by ``rotation`` around ``corner``."""
    dx, dy = compensate_corner_anchored_rotation(width, height, rotation)
    return (
        corner[0] + width / 2 + dx,
        corner[1] + height / 2 + dy,
    )


def _unit(vx: float, vy: float) -> tuple[float, float]:
    length = math.hypot(vx, vy)
    if length < 1e-12:
        return (1.0, 0.0)
    return (vx / length, vy / length)


def tangent(
    points: NDArray[np.float64],
    index: int,
    is_closed: bool,
) -> tuple[float, float]:
    """Unit tangent at ``points[index]`` by finite difference.

    Centered difference in the interior (and everywhere on closed paths,
    using wraparound neighbors); one-sided at open endpoints.
    """
    n = len(points)
    if n < 2:
        return (1.0, 0.0)

    if is_closed:
        prev_pt = points[(index - 1) % n]
        next_pt = points[(index + 1) % n]
    elif index == 0:
        prev_pt = points[0]
        next_pt = points[1]
    elif index == n - 1:
        prev_pt = points[n - 2]
        next_pt = points[n - 1]
    else:
        prev_pt = points[index - 1]
        next_pt = points[index + 1]

    return _unit(float(next_pt[0] - prev_pt[0]), float(next_pt[1] - prev_pt[1]))


def normal(
    points: NDArray[np.float64],
    index: int,
    is_closed: bool,
) -> tuple[float, float]:
    """Unit normal at ``points[index]``: the tangent turned by +90 degrees."""
    tx, ty = tangent(points, index, is_closed)
    return (-ty, tx)
