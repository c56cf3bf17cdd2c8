"""Grid array: rows x columns of copies at fixed pixel spacing."""

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
from shapesmith.models.settings import GridArraySettings, coerce_settings
from shapesmith.utils.transform_math import degrees_to_radians

logger = logging.getLogger(__name__)


def _cells(cfg: GridArraySettings):
    """Yield (row, col, cell_index, (dx, dy)) in row-major order."""
    for row in range(cfg.rows):
        for col in range(cfg.columns):
            yield (
                row,
                col,
                row * cfg.columns + col,
                (cfg.offset_x + col * cfg.spacing_x, cfg.offset_y + row * cfg.spacing_y),
            )


@modifier(
    id="grid-array",
    kind=ModifierKind.ARRAY,
    settings=GridArraySettings,
    description="Rows and columns of copies",
)
def grid_array(
    state: ShapeState,
    settings: GridArraySettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    cfg = coerce_settings(GridArraySettings, settings)
    if cfg is None:
        return state

    total = cfg.rows * cfg.columns
    out: list[ShapeInstance] = []

    if group is not None:
        gx, gy = group.center
        for row, col, cell, (dx, dy) in _cells(cfg):
            factor = step_scale(cfg.scale_step, cell, total)
            formation_rotation = degrees_to_radians(cfg.rotate_each) * cell
            for member in state.instances:
                center, rotation = place_in_formation(
                    member, (gx, gy), (gx + dx, gy + dy), formation_rotation, factor
                )
                center, rotation = apply_group_transform(center, rotation, group)
                out.append(emit(
                    member,
                    center,
                    rotation,
                    member.transform.scale_x * factor,
                    member.transform.scale_y * factor,
                    clone_metadata(
                        member,
                        cell,
                        gridPosition={"row": row, "col": col},
                        gridIndex=cell,
                        isGroupClone=cell > 0,
                    ),
                ))
        logger.debug("grid-array (group): %d -> %d instances", len(state), len(out))
        return ShapeState.of(out)

    for inst in state.instances:
        cx, cy = inst.center
        for row, col, cell, (dx, dy) in _cells(cfg):
            factor = step_scale(cfg.scale_step, cell, total)
            rotation = inst.transform.rotation + degrees_to_radians(cfg.rotate_each) * cell
            out.append(emit(
                inst,
                (cx + dx, cy + dy),
                rotation,
                inst.transform.scale_x * factor,
                inst.transform.scale_y * factor,
                clone_metadata(inst, cell, gridPosition={"row": row, "col": col}, gridIndex=cell),
            ))

    logger.debug("grid-array: %d -> %d instances", len(state), len(out))
    return ShapeState.of(out)
