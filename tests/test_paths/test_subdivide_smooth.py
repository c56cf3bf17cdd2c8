"""Tests for the subdivide and smooth path modifiers."""

import numpy as np
import pytest

from shapesmith.engine.path_data import BezierPoint, PathData, PathKind
from shapesmith.engine.paths.smooth import SMOOTH
from shapesmith.engine.paths.subdivide import SUBDIVIDE
from tests.conftest import SQUARE_RING, WAVY_OPEN


# ── Subdivide ──


def test_subdivide_open_inserts_between_neighbors():
    path = PathData.from_points([[0, 0], [10, 0], [10, 10]])
    result = SUBDIVIDE.modify(path, {"iterations": 1})
    assert result.bounds_changed
    assert result.path_data.data.tolist() == [[0, 0], [5, 0], [10, 0], [10, 5], [10, 10]]


def test_subdivide_closed_includes_wrap_segment():
    path = PathData.from_points([[0, 0], [10, 0], [10, 10]], is_closed=True)
    result = SUBDIVIDE.modify(path, {"iterations": 1})
    assert result.path_data.point_count == 6
    assert result.path_data.data[-1].tolist() == [5, 5]


@pytest.mark.parametrize("iterations,expected", [(0, 4), (1, 7), (2, 13), (3, 25)])
def test_subdivide_open_counts(iterations, expected):
    path = PathData.from_points([[0, 0], [1, 0], [2, 0], [3, 0]])
    assert SUBDIVIDE.modify(path, {"iterations": iterations}).path_data.point_count == expected


def test_subdivide_factor():
    path = PathData.from_points([[0, 0], [10, 0]])
    result = SUBDIVIDE.modify(path, {"factor": 0.25})
    assert result.path_data.data[1].tolist() == [2.5, 0]


def test_subdivide_smooth_keeps_open_endpoints():
    path = PathData.from_points(WAVY_OPEN)
    out = SUBDIVIDE.modify(path, {"iterations": 2, "smooth": True}).path_data.data
    assert out[0].tolist() == WAVY_OPEN[0].tolist()
    assert out[-1].tolist() == WAVY_OPEN[-1].tolist()


def test_subdivide_bezier_interpolates_handles():
    path = PathData.from_bezier([
        {"x": 0, "y": 0, "cp2": {"x": 0, "y": 10}},
        {"x": 20, "y": 0, "cp1": {"x": 20, "y": 10}},
    ])
    out = SUBDIVIDE.modify(path, {}).path_data
    assert out.kind == PathKind.BEZIER
    assert out.data[1] == BezierPoint(10.0, 0.0, (10.0, 10.0), None)


def test_subdivide_factor_out_of_range_is_noop():
    path = PathData.from_points([[0, 0], [10, 0]])
    result = SUBDIVIDE.modify(path, {"factor": 1.5})
    assert not result.bounds_changed
    assert result.path_data is path


def test_svg_passes_through():
    path = PathData.from_svg("M0,0 L10,0")
    result = SUBDIVIDE.modify(path, {})
    assert result.path_data is path
    assert result.new_bounds is None


def test_input_path_untouched():
    path = PathData.from_points(SQUARE_RING, is_closed=True)
    before = path.data.copy()
    SUBDIVIDE.modify(path, {"iterations": 3, "smooth": True})
    SMOOTH.modify(path, {"iterations": 5, "factor": 1})
    assert np.array_equal(path.data, before)


# ── Smooth ──


def test_smooth_open_converges_to_chord():
    zigzag = PathData.from_points([[i * 10, 10 * (i % 2)] for i in range(7)])
    path = zigzag
    for _ in range(20):
        path = SMOOTH.modify(path, {"iterations": 10, "factor": 1, "preserveCorners": False}).path_data
    # Endpoints are pinned at y=0, so every point relaxes onto that line
    assert np.allclose(path.data[:, 1], 0.0, atol=1e-6)
    assert np.allclose(path.data[:, 0], zigzag.data[:, 0])


def test_smooth_factor_zero_keeps_points():
    path = PathData.from_points(WAVY_OPEN)
    out = SMOOTH.modify(path, {"factor": 0}).path_data
    assert np.array_equal(out.data, path.data)


def test_smooth_preserve_corners_pins_square():
    path = PathData.from_points(SQUARE_RING, is_closed=True)
    out = SMOOTH.modify(path, {"factor": 1, "preserveCorners": True, "cornerThreshold": 100}).path_data
    # Corners turn 90 degrees, edge midpoints are straight (180)
    assert out.data[0].tolist() == [0, 0]
    assert out.data[2].tolist() == [100, 0]


def test_smooth_shrinks_closed_square():
    path = PathData.from_points(SQUARE_RING, is_closed=True)
    out = SMOOTH.modify(path, {"factor": 0.5, "iterations": 3})
    assert out.bounds_changed
    assert out.new_bounds.w < 100


def test_smooth_needs_three_points():
    path = PathData.from_points([[0, 0], [10, 10]])
    assert SMOOTH.modify(path, {}).path_data is path


def test_smooth_bezier_moves_handles_toward_neighbors():
    path = PathData.from_bezier([
        {"x": 0, "y": 0},
        {"x": 10, "y": 10, "cp1": {"x": 5, "y": 10}, "cp2": {"x": 15, "y": 10}},
        {"x": 20, "y": 0},
    ])
    out = SMOOTH.modify(path, {"factor": 1}).path_data
    mid = out.data[1]
    assert (mid.x, mid.y) == pytest.approx((10, 0))
    # Handles pulled halfway toward the previous / next anchors
    assert mid.cp1 == pytest.approx((2.5, 5))
    assert mid.cp2 == pytest.approx((17.5, 5))
