"""Shared placement helpers for array processors."""

from __future__ import annotations

from typing import Any

from shapesmith.engine.context import GroupContext, ShapeInstance, Transform
from shapesmith.models.shape import shape_dimensions
from shapesmith.utils.transform_math import corner_from_center, rotate_around_pivot

Point = tuple[float, float]


def emit(
    source: ShapeInstance,
    center: Point,
    rotation: float,
    scale_x: float,
    scale_y: float,
    metadata: dict[str, Any],
) -> ShapeInstance:
    """Clone ``source`` so its visual center lands on ``center``.

    The center is converted to a corner-anchored position for the clone's own
    rotation and scaled size.
    """
    base_w, base_h = shape_dimensions(source.shape)
    w, h = base_w * scale_x, base_h * scale_y
    x, y = corner_from_center(center, w, h, rotation)
    transform = Transform(x=x, y=y, rotation=rotation, scale_x=scale_x, scale_y=scale_y)
    return source.derive(transform, metadata)


def clone_metadata(source: ShapeInstance, array_index: int, **extra: Any) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "arrayIndex": array_index,
        "sourceInstance": source.index,
        "isFirstClone": array_index == 0,
    }
    meta.update(extra)
    return meta


def place_in_formation(
    member: ShapeInstance,
    source_center: Point,
    target_center: Point,
    rotation: float,
    scale: float = 1.0,
) -> tuple[Point, float]:
    """Move ``member`` with its group: rigid rotation and uniform scale of the
    member's offset from ``source_center``, re-anchored at ``target_center``.

    Returns the member's new visual center and rotation.
    """
    mx, my = member.center
    rx, ry = rotate_around_pivot(
        (source_center[0] + (mx - source_center[0]) * scale,
         source_center[1] + (my - source_center[1]) * scale),
        source_center,
        rotation,
    )
    return (
        (target_center[0] + rx - source_center[0], target_center[1] + ry - source_center[1]),
        member.transform.rotation + rotation,
    )


def apply_group_transform(
    center: Point,
    rotation: float,
    group: GroupContext | None,
) -> tuple[Point, float]:
    """Re-express a clone relative to the group's live placement.

    The clone's offset from the source group center is rotated by the group's
    rotation and added to the group's current center.
    """
    if group is None or group.group_transform is None:
        return center, rotation

    gt = group.group_transform
    src_cx, src_cy = group.center
    cur_cx = gt.x + group.group_width / 2
    cur_cy = gt.y + group.group_height / 2
    rx, ry = rotate_around_pivot(center, (src_cx, src_cy), gt.rotation)
    return (
        (cur_cx + rx - src_cx, cur_cy + ry - src_cy),
        rotation + gt.rotation,
    )


def step_scale(scale_step: float, step: int, steps: int) -> float:
    """Linear scale ramp reaching ``scale_step`` percent at the last step."""
    if steps <= 1:
        return 1.0
    return 1.0 + (scale_step / 100.0 - 1.0) * step / (steps - 1)
