"""Linear array: copies stepped along a fixed offset."""

from __future__ import annotations

import logging

from shapesmith.engine.arrays.base import (
    apply_group_transform,
    clone_metadata,
    emit,
    place_in_formation,
    step_scale,
)
from shapesmith.engine.context import GroupContext, ShapeInstance, ShapeState
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import LinearArraySettings, coerce_settings
from shapesmith.utils.transform_math import degrees_to_radians, rotate_around_pivot

logger = logging.getLogger(__name__)


@modifier(
    id="linear-array",
    kind=ModifierKind.ARRAY,
    settings=LinearArraySettings,
    description="Copies along a straight line with optional per-step rotation and scale",
)
def linear_array(
    state: ShapeState,
    settings: LinearArraySettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    cfg = coerce_settings(LinearArraySettings, settings)
    if cfg is None:
        return state
    if group is not None:
        return _linear_group(state, cfg, group)

    out: list[ShapeInstance] = []
    for inst in state.instances:
        w, h = inst.size
        step = (cfg.offset_x / 100.0 * w, cfg.offset_y / 100.0 * h)
        cx, cy = inst.center
        base_rotation = inst.transform.rotation

        for i in range(cfg.count):
            # Offsets follow the source's own orientation
            dx, dy = rotate_around_pivot((step[0] * i, step[1] * i), (0.0, 0.0), base_rotation)
            factor = step_scale(cfg.scale_step, i, cfg.count)
            rotation = (
                base_rotation
                + degrees_to_radians(cfg.rotate_all)
                + degrees_to_radians(cfg.rotate_each) * i
            )
            out.append(emit(
                inst,
                (cx + dx, cy + dy),
                rotation,
                inst.transform.scale_x * factor,
                inst.transform.scale_y * factor,
                clone_metadata(inst, i),
            ))

    logger.debug("linear-array: %d -> %d instances", len(state), len(out))
    return ShapeState.of(out)


def _linear_group(
    state: ShapeState,
    cfg: LinearArraySettings,
    group: GroupContext,
) -> ShapeState:
    step = (cfg.offset_x / 100.0 * group.group_width, cfg.offset_y / 100.0 * group.group_height)
    gx, gy = group.center

    out: list[ShapeInstance] = []
    for i in range(cfg.count):
        factor = step_scale(cfg.scale_step, i, cfg.count)
        formation_rotation = (
            degrees_to_radians(cfg.rotate_all) + degrees_to_radians(cfg.rotate_each) * i
        )
        target = (gx + step[0] * i, gy + step[1] * i)
        for member in state.instances:
            center, rotation = place_in_formation(
                member, (gx, gy), target, formation_rotation, factor
            )
            center, rotation = apply_group_transform(center, rotation, group)
            out.append(emit(
                member,
                center,
                rotation,
                member.transform.scale_x * factor,
                member.transform.scale_y * factor,
                clone_metadata(member, i, isGroupClone=i > 0),
            ))

    logger.debug("linear-array (group): %d -> %d instances", len(state), len(out))
    return ShapeState.of(out)
