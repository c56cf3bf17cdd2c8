"""Mirror array: reflect instances across a line or through a point."""

from __future__ import annotations

import logging
import math

from shapesmith.engine.arrays.base import apply_group_transform, clone_metadata, emit
from shapesmith.engine.context import GroupContext, ShapeInstance, ShapeState
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import MirrorSettings, coerce_settings

logger = logging.getLogger(__name__)


def reflect(
    center: tuple[float, float],
    rotation: float,
    cfg: MirrorSettings,
) -> tuple[tuple[float, float], float, bool, bool]:
    """Reflect a visual center and rotation.

    Returns (center, rotation, toggles_flip_x, toggles_flip_y).
    """
    x, y = center
    if cfg.axis == "x":
        # Vertical line x = offset
        return (2 * cfg.offset - x, y), -rotation, True, False
    if cfg.axis == "y":
        # Horizontal line y = offset
        return (x, 2 * cfg.offset - y), -rotation, False, True
    if cfg.axis == "diagonal":
        # Line y = x + offset
        return (y - cfg.offset, x + cfg.offset), math.pi / 2 - rotation, False, True
    # Point reflection is a half turn
    return (2 * cfg.point_x - x, 2 * cfg.point_y - y), rotation + math.pi, False, False


@modifier(
    id="mirror-array",
    kind=ModifierKind.ARRAY,
    settings=MirrorSettings,
    description="Reflection across an axis line or through a point",
)
def mirror_array(
    state: ShapeState,
    settings: MirrorSettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    cfg = coerce_settings(MirrorSettings, settings)
    if cfg is None:
        return state

    out: list[ShapeInstance] = []
    for inst in state.instances:
        sx, sy = inst.transform.scale_x, inst.transform.scale_y
        if cfg.include_source:
            center, rotation = apply_group_transform(inst.center, inst.transform.rotation, group)
            out.append(emit(inst, center, rotation, sx, sy, clone_metadata(inst, 0)))

        center, rotation, flip_x, flip_y = reflect(inst.center, inst.transform.rotation, cfg)
        center, rotation = apply_group_transform(center, rotation, group)
        meta = clone_metadata(
            inst,
            1 if cfg.include_source else 0,
            isMirrored=True,
            mirrorAxis=cfg.axis,
            isFlippedX=bool(inst.metadata.get("isFlippedX", False)) != flip_x,
            isFlippedY=bool(inst.metadata.get("isFlippedY", False)) != flip_y,
        )
        if group is not None:
            meta["isGroupClone"] = True
        out.append(emit(inst, center, rotation, sx, sy, meta))

    logger.debug("mirror-array (%s): %d -> %d instances", cfg.axis, len(state), len(out))
    return ShapeState.of(out)
