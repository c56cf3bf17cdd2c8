"""Tests for the simplify and noise-offset path modifiers."""

import numpy as np
import pytest

from shapesmith.engine.path_data import PathData, PathKind
from shapesmith.engine.paths.noise_offset import NOISE_OFFSET
from shapesmith.engine.paths.simplify import SIMPLIFY, simplify_indices
from tests.conftest import SQUARE_RING, WAVY_OPEN


# ── Simplify ──


def test_simplify_closed_square_to_corners():
    path = PathData.from_points(SQUARE_RING, is_closed=True)
    result = SIMPLIFY.modify(path, {"tolerance": 5})
    assert result.bounds_changed
    assert result.path_data.data.tolist() == [[0, 0], [100, 0], [100, 100], [0, 100]]


def test_simplify_collinear_open():
    path = PathData.from_points([[i, 0] for i in range(20)])
    out = SIMPLIFY.modify(path, {"tolerance": 0.5, "minPoints": 2}).path_data
    assert out.data.tolist() == [[0, 0], [19, 0]]


def test_simplify_is_idempotent():
    path = PathData.from_points(WAVY_OPEN)
    settings = {"tolerance": 2, "minPoints": 2}
    once = SIMPLIFY.modify(path, settings).path_data
    twice = SIMPLIFY.modify(once, settings).path_data
    assert np.array_equal(once.data, twice.data)


def test_simplify_monotonic_in_tolerance():
    path = PathData.from_points(WAVY_OPEN)
    counts = [
        SIMPLIFY.modify(path, {"tolerance": tol, "minPoints": 2}).path_data.point_count
        for tol in (0, 0.5, 1, 2, 5, 10, 50)
    ]
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 2


def test_simplify_respects_min_points():
    path = PathData.from_points([[i, 0] for i in range(20)])
    result = SIMPLIFY.modify(path, {"tolerance": 1, "minPoints": 3})
    assert not result.bounds_changed
    assert result.path_data is path


def test_simplify_small_closed_path_untouched():
    path = PathData.from_points([[0, 0], [10, 0], [5, 5]], is_closed=True)
    assert SIMPLIFY.modify(path, {"minPoints": 2}).path_data is path


def test_simplify_preserve_corners_restores_sharp_vertex():
    # A shallow spike that Douglas-Peucker drops at this tolerance
    pts = np.array([(0, 0), (10, 0), (20, 0), (21, 4), (22, 0), (30, 0), (40, 0)], dtype=np.float64)
    path = PathData.from_points(pts)
    plain = SIMPLIFY.modify(path, {"tolerance": 5, "minPoints": 2}).path_data
    kept = SIMPLIFY.modify(path, {"tolerance": 5, "minPoints": 2, "preserveCorners": True}).path_data
    assert [21, 4] not in plain.data.tolist()
    assert [21, 4] in kept.data.tolist()


def test_simplify_bezier_keeps_records():
    raw = [{"x": i * 10, "y": 0, "cp1": {"x": i * 10 - 2, "y": 1}} for i in range(6)]
    path = PathData.from_bezier(raw)
    out = SIMPLIFY.modify(path, {"tolerance": 1, "minPoints": 2}).path_data
    assert out.kind == PathKind.BEZIER
    assert out.data == (path.data[0], path.data[-1])


def test_simplify_indices_closed_drops_wrap_duplicate():
    idx = simplify_indices(SQUARE_RING, True, 5)
    assert idx == [0, 2, 4, 6]


# ── Noise offset ──


def test_noise_is_bit_identical_across_calls():
    path = PathData.from_points(WAVY_OPEN)
    settings = {"amplitude": 8, "frequency": 2, "octaves": 4, "seed": 3}
    a = NOISE_OFFSET.modify(path, settings).path_data
    b = NOISE_OFFSET.modify(path, settings).path_data
    assert np.array_equal(a.data, b.data)


def test_noise_seed_changes_output():
    path = PathData.from_points(WAVY_OPEN)
    a = NOISE_OFFSET.modify(path, {"seed": 1}).path_data
    b = NOISE_OFFSET.modify(path, {"seed": 2}).path_data
    assert not np.array_equal(a.data, b.data)


def test_noise_displacement_bounded_by_amplitude():
    path = PathData.from_points(WAVY_OPEN)
    out = NOISE_OFFSET.modify(path, {"amplitude": 6, "frequency": 3}).path_data
    moved = np.linalg.norm(out.data - path.data, axis=1)
    assert np.all(moved <= 6 + 1e-9)


def test_noise_zero_amplitude_is_identity():
    path = PathData.from_points(SQUARE_RING, is_closed=True)
    out = NOISE_OFFSET.modify(path, {"amplitude": 0}).path_data
    assert np.array_equal(out.data, path.data)


def test_noise_normal_direction():
    path = PathData.from_points([[x, 0] for x in range(0, 50, 5)])
    out = NOISE_OFFSET.modify(path, {"amplitude": 5, "direction": "normal"}).path_data
    # Normal of a horizontal line is vertical
    assert np.allclose(out.data[:, 0], path.data[:, 0])


def test_noise_tangent_direction():
    path = PathData.from_points([[x, 0] for x in range(0, 50, 5)])
    out = NOISE_OFFSET.modify(path, {"amplitude": 5, "direction": "tangent"}).path_data
    assert np.allclose(out.data[:, 1], 0.0)


def test_noise_bezier_moves_handles_less():
    path = PathData.from_bezier([
        {"x": 0, "y": 0, "cp2": {"x": 10, "y": 0}},
        {"x": 40, "y": 30, "cp1": {"x": 30, "y": 30}},
    ])
    out = NOISE_OFFSET.modify(path, {"amplitude": 10, "seed": 4}).path_data
    for before, after in zip(path.data, out.data):
        for cp_before, cp_after in ((before.cp1, after.cp1), (before.cp2, after.cp2)):
            if cp_before is None:
                assert cp_after is None
                continue
            assert np.hypot(cp_after[0] - cp_before[0], cp_after[1] - cp_before[1]) <= 3 + 1e-9


def test_noise_rejects_bad_direction():
    path = PathData.from_points(WAVY_OPEN)
    assert NOISE_OFFSET.modify(path, {"direction": "sideways"}).path_data is path


def test_noise_svg_untouched():
    path = PathData.from_svg("M0,0 L1,1")
    result = NOISE_OFFSET.modify(path, {})
    assert result.path_data is path
    assert not result.bounds_changed


@pytest.mark.parametrize("octaves", [1, 3, 8])
def test_noise_all_points_finite(octaves):
    path = PathData.from_points(WAVY_OPEN)
    out = NOISE_OFFSET.modify(path, {"octaves": octaves}).path_data
    assert np.all(np.isfinite(out.data))
