"""L-system array: turtle-graphics branching growth from each source.

Each step advances the turtle, drops a clone centered on the new position and
branches. Randomness comes from an LCG reseeded per recursion level, so a seed
always reproduces the same tree.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from shapesmith.engine.arrays.base import emit
from shapesmith.engine.config import DEFAULT_CONFIG
from shapesmith.engine.context import GroupContext, ShapeInstance, ShapeState
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import LSystemSettings, coerce_settings
from shapesmith.utils.math_helpers import Lcg
from shapesmith.utils.transform_math import degrees_to_radians

logger = logging.getLogger(__name__)


def _grow(
    source: ShapeInstance,
    position: tuple[float, float],
    heading: float,
    length: float,
    depth: int,
    level: int,
    cfg: LSystemSettings,
    branch_angles: list[float],
) -> list[ShapeInstance]:
    """Clones produced from one turtle state, depth first."""
    if depth <= 0:
        return []

    x = position[0] + length * math.cos(heading)
    y = position[1] + length * math.sin(heading)
    factor = cfg.scale_per_iteration**level

    grown = [emit(
        source,
        (x, y),
        heading + math.pi / 2,
        source.transform.scale_x * factor,
        source.transform.scale_y * factor,
        {"lsystem": True, "lsystemDepth": level, "sourceInstance": source.index},
    )]

    rng = Lcg(cfg.seed + level * DEFAULT_CONFIG.lsystem_level_seed_stride)
    for branch in branch_angles:
        taken = True
        if cfg.branch_probability < 1:
            taken = rng.next() < cfg.branch_probability
        jitter = rng.uniform(-cfg.angle_jitter, cfg.angle_jitter) if cfg.angle_jitter > 0 else 0.0
        if not taken:
            continue
        grown.extend(_grow(
            source,
            (x, y),
            heading + degrees_to_radians(branch + jitter),
            length * cfg.length_decay,
            depth - 1,
            level + 1,
            cfg,
            branch_angles,
        ))
    return grown


@modifier(
    id="lsystem",
    kind=ModifierKind.ARRAY,
    settings=LSystemSettings,
    description="Fractal branching growth (turtle graphics)",
)
def lsystem_array(
    state: ShapeState,
    settings: LSystemSettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    cfg = coerce_settings(LSystemSettings, settings)
    if cfg is None:
        return state

    branch_angles = list(cfg.branches) if cfg.branches is not None else [cfg.angle, -cfg.angle]

    children: list[ShapeInstance] = []
    for inst in state.instances:
        w, h = inst.size
        # Heading "up" for an upright shape; clones add 90 degrees back
        heading = inst.transform.rotation - math.pi / 2
        grown = _grow(
            inst,
            inst.center,
            heading,
            max(w, h) * cfg.step_percent / 100.0,
            cfg.iterations,
            0,
            cfg,
            branch_angles,
        )
        for i, clone in enumerate(grown):
            meta: dict[str, Any] = dict(clone.metadata)
            meta["arrayIndex"] = i + 1
            meta["isFirstClone"] = False
            clone.metadata = meta
        children.extend(grown)

    logger.debug("lsystem: %d sources, %d clones", len(state), len(children))
    return ShapeState.of(list(state.instances) + children)
