"""Tests for the modifier stack and the instance-state containers."""

import math

import pytest

from shapesmith.engine.context import (
    GroupContext,
    ShapeState,
    Transform,
    collective_bounds,
)
from shapesmith.engine.pipeline import ModifierStack, ModifierStep
from shapesmith.engine.registry import ModifierKind, ModifierRegistry, ModifierSpec
from shapesmith.main import register_modifiers
from shapesmith.models.settings import LinearArraySettings
from tests.conftest import ROTATED_RECT, SQUARE, WIDE_RECT


register_modifiers()


def _explode(state, settings, group=None):
    raise RuntimeError("boom")


def test_state_reindexes():
    state = ShapeState.from_shapes([SQUARE, WIDE_RECT])
    assert [inst.index for inst in state.instances] == [0, 1]
    assert state.instances[1].transform == Transform(x=50, y=20)


def test_state_owns_shape_copies():
    state = ShapeState.from_shapes([SQUARE])
    state.instances[0].shape.props["color"] = "purple"
    assert SQUARE.props["color"] == "blue"


def test_instance_center_accounts_for_rotation():
    inst = ShapeState.from_shapes([ROTATED_RECT]).instances[0]
    cx, cy = inst.center
    # Box center rotated about the top-left corner
    lx, ly = 40.0, 20.0
    c, s = math.cos(math.pi / 6), math.sin(math.pi / 6)
    assert (cx, cy) == pytest.approx((10 + lx * c - ly * s, 30 + lx * s + ly * c))


def test_collective_bounds_spans_instances():
    b = collective_bounds(ShapeState.from_shapes([SQUARE, WIDE_RECT]))
    assert (b.x, b.y, b.width, b.height) == pytest.approx((0, 0, 250, 100))
    assert b.center == pytest.approx((125, 50))


def test_group_context_from_state():
    group = GroupContext.from_state(ShapeState.from_shapes([SQUARE, WIDE_RECT]))
    assert group.group_top_left == pytest.approx((0, 0))
    assert group.center == pytest.approx((125, 50))


def test_stack_runs_in_order(square_state):
    stack = ModifierStack()
    result = stack.run(square_state, [
        ModifierStep("linear-array", {"count": 3}),
        ModifierStep("mirror-array", {"axis": "y", "offset": 200}),
    ])
    assert result.completed == ["0:linear-array", "1:mirror-array"]
    assert len(result.state) == 6
    assert result.errors == {}
    assert result.processing_time_ms >= 0


def test_stack_skips_disabled_and_invalid(square_state):
    result = ModifierStack().run(square_state, [
        ModifierStep("linear-array", {"count": 5}, enabled=False),
        ModifierStep("linear-array", {"count": -1}),
    ])
    assert result.skipped == ["0:linear-array", "1:linear-array"]
    assert result.state is square_state


def test_stack_records_unknown_modifier(square_state):
    result = ModifierStack().run(square_state, [
        ModifierStep("does-not-exist", {}),
        ModifierStep("linear-array", {"count": 2}),
    ])
    assert "0:does-not-exist" in result.errors
    assert result.completed == ["1:linear-array"]
    assert len(result.state) == 2


def test_stack_isolates_failing_modifier(square_state):
    reg = ModifierRegistry()
    reg.register(ModifierSpec(id="explode", kind=ModifierKind.ARRAY, fn=_explode, settings_model=LinearArraySettings))
    result = ModifierStack(reg).run(square_state, [ModifierStep("explode", {})])
    assert "boom" in result.errors["0:explode"]
    assert result.state is square_state


def test_stack_group_applies_to_first_step_only(two_shape_state):
    group = GroupContext.from_state(two_shape_state)
    result = ModifierStack().run(two_shape_state, [
        ModifierStep("linear-array", {"count": 2}),
        ModifierStep("linear-array", {"count": 2}),
    ], group=group)
    # First step duplicates the group; second step copies each instance
    assert len(result.state) == 8
    first_pass = [inst for inst in result.state.instances if inst.metadata.get("isGroupClone")]
    assert first_pass


def test_stack_group_survives_path_step(two_shape_state):
    group = GroupContext.from_state(two_shape_state)
    result = ModifierStack().run(two_shape_state, [
        ModifierStep("subdivide", {"iterations": 1}),
        ModifierStep("linear-array", {"count": 2}),
    ], group=group)
    assert result.completed == ["0:subdivide", "1:linear-array"]
    assert len(result.state) == 4
    assert [inst.metadata.get("isGroupClone") for inst in result.state.instances] == [False, False, True, True]
