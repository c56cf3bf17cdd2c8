"""Circular array: copies swept around a circle that passes through the source.

The circle center is pulled back from the source by one radius along the
start angle, so copy 0 sits exactly where the source already is.
"""

from __future__ import annotations

import logging
import math

from shapesmith.engine.arrays.base import (
    apply_group_transform,
    clone_metadata,
    emit,
    place_in_formation,
)
from shapesmith.engine.context import GroupContext, ShapeInstance, ShapeState
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import CircularArraySettings, coerce_settings
from shapesmith.utils.transform_math import degrees_to_radians, radians_to_degrees

logger = logging.getLogger(__name__)


def circle_angles(cfg: CircularArraySettings) -> list[float]:
    """Angles (radians) of every copy, from start to end.

    A sweep of a full turn or more is split into ``count`` steps so the last
    copy does not land on the first.
    """
    start = degrees_to_radians(cfg.start_angle)
    total = cfg.end_angle - cfg.start_angle
    if cfg.count <= 1:
        step = 0.0
    elif abs(total) >= 360:
        step = degrees_to_radians(total) / cfg.count
    else:
        step = degrees_to_radians(total) / (cfg.count - 1)
    return [start + step * i for i in range(cfg.count)]


def circle_center(
    reference: tuple[float, float],
    cfg: CircularArraySettings,
) -> tuple[float, float]:
    """Center of the sweep circle for a source centered at ``reference``."""
    start = degrees_to_radians(cfg.start_angle)
    return (
        reference[0] + cfg.center_x - cfg.radius * math.cos(start),
        reference[1] + cfg.center_y - cfg.radius * math.sin(start),
    )


@modifier(
    id="circular-array",
    kind=ModifierKind.ARRAY,
    settings=CircularArraySettings,
    description="Copies around a circle, optionally aligned to the tangent",
)
def circular_array(
    state: ShapeState,
    settings: CircularArraySettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    cfg = coerce_settings(CircularArraySettings, settings)
    if cfg is None:
        return state
    if group is not None:
        return _circular_group(state, cfg, group)

    angles = circle_angles(cfg)
    rotate_all = degrees_to_radians(cfg.rotate_all)
    rotate_each = degrees_to_radians(cfg.rotate_each)

    out: list[ShapeInstance] = []
    for inst in state.instances:
        ccx, ccy = circle_center(inst.center, cfg)
        for i, angle in enumerate(angles):
            center = (ccx + cfg.radius * math.cos(angle), ccy + cfg.radius * math.sin(angle))
            base = angle + math.pi / 2 if cfg.align_to_tangent else inst.transform.rotation
            rotation = base + rotate_all + rotate_each * i
            out.append(emit(
                inst,
                center,
                rotation,
                inst.transform.scale_x,
                inst.transform.scale_y,
                clone_metadata(inst, i, circularAngle=radians_to_degrees(angle)),
            ))

    logger.debug("circular-array: %d -> %d instances", len(state), len(out))
    return ShapeState.of(out)


def _circular_group(
    state: ShapeState,
    cfg: CircularArraySettings,
    group: GroupContext,
) -> ShapeState:
    gx, gy = group.center
    ccx, ccy = circle_center((gx, gy), cfg)
    angles = circle_angles(cfg)
    rotate_all = degrees_to_radians(cfg.rotate_all)
    rotate_each = degrees_to_radians(cfg.rotate_each)

    out: list[ShapeInstance] = []
    for i, angle in enumerate(angles):
        target = (ccx + cfg.radius * math.cos(angle), ccy + cfg.radius * math.sin(angle))
        formation_rotation = rotate_all + rotate_each * i
        if cfg.align_to_tangent:
            formation_rotation += angle - angles[0]
        for member in state.instances:
            center, rotation = place_in_formation(member, (gx, gy), target, formation_rotation)
            center, rotation = apply_group_transform(center, rotation, group)
            out.append(emit(
                member,
                center,
                rotation,
                member.transform.scale_x,
                member.transform.scale_y,
                clone_metadata(
                    member,
                    i,
                    circularAngle=radians_to_degrees(angle),
                    isGroupClone=i > 0,
                ),
            ))

    logger.debug("circular-array (group): %d -> %d instances", len(state), len(out))
    return ShapeState.of(out)
