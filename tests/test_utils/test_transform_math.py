"""Tests for rotation and corner-anchor helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from shapesmith.utils.transform_math import (
    center_from_corner,
    compensate_corner_anchored_rotation,
    corner_from_center,
    degrees_to_radians,
    normal,
    radians_to_degrees,
    rotate_around_pivot,
    tangent,
)


def test_rotate_around_pivot_quarter_turn():
    x, y = rotate_around_pivot((10, 0), (0, 0), math.pi / 2)
    assert x == pytest.approx(0, abs=1e-12)
    assert y == pytest.approx(10)


def test_rotate_around_offset_pivot():
    x, y = rotate_around_pivot((20, 10), (10, 10), math.pi)
    assert (x, y) == pytest.approx((0, 10))


def test_compensation_zero_rotation_is_zero():
    assert compensate_corner_anchored_rotation(100, 60, 0.0) == pytest.approx((0.0, 0.0))


def test_compensation_half_turn():
    # Rotating 180 degrees around the corner swings the center by (-w, -h)
    dx, dy = compensate_corner_anchored_rotation(100, 60, math.pi)
    assert dx == pytest.approx(-100)
    assert dy == pytest.approx(-60)


def test_corner_from_center_matches_rotated_box():
    w, h, theta = 80.0, 40.0, 0.7
    corner = corner_from_center((200.0, 150.0), w, h, theta)
    # Rotate the box's local center around the corner, as the host does
    cx, cy = rotate_around_pivot((corner[0] + w / 2, corner[1] + h / 2), corner, theta)
    assert (cx, cy) == pytest.approx((200.0, 150.0))


@pytest.mark.parametrize("w,h,theta", [
    (100, 100, 0.0),
    (100, 50, math.pi / 3),
    (10, 300, -2.1),
    (1, 1, 5.5),
])
def test_compensation_round_trip(w, h, theta):
    corner = (37.0, -12.5)
    center = center_from_corner(corner, w, h, theta)
    assert corner_from_center(center, w, h, theta) == pytest.approx(corner)


def test_degree_conversion():
    assert degrees_to_radians(180) == pytest.approx(math.pi)
    assert radians_to_degrees(math.pi / 2) == pytest.approx(90)


def test_tangent_interior_uses_centered_difference():
    pts = np.array([(0, 0), (10, 0), (20, 10)], dtype=np.float64)
    tx, ty = tangent(pts, 1, False)
    assert (tx, ty) == pytest.approx((20 / math.hypot(20, 10), 10 / math.hypot(20, 10)))


def test_tangent_open_endpoints_one_sided():
    pts = np.array([(0, 0), (0, 10), (10, 10)], dtype=np.float64)
    assert tangent(pts, 0, False) == pytest.approx((0, 1))
    assert tangent(pts, 2, False) == pytest.approx((1, 0))


def test_tangent_closed_wraps():
    pts = np.array([(0, 0), (10, 0), (10, 10), (0, 10)], dtype=np.float64)
    # Neighbors of index 0 are (0, 10) and (10, 0)
    tx, ty = tangent(pts, 0, True)
    assert (tx, ty) == pytest.approx((1 / math.sqrt(2), -1 / math.sqrt(2)))


def test_tangent_degenerate_defaults():
    pts = np.array([(5, 5), (5, 5), (5, 5)], dtype=np.float64)
    assert tangent(pts, 1, False) == (1.0, 0.0)


def test_normal_is_perpendicular():
    pts = np.array([(0, 0), (10, 0), (20, 0)], dtype=np.float64)
    assert normal(pts, 1, False) == pytest.approx((0, 1))
