"""Noise offset: deterministic fractal-noise displacement of points."""

from __future__ import annotations

import math

import numpy as np

from shapesmith.engine.config import DEFAULT_CONFIG
from shapesmith.engine.context import GroupContext, ShapeState
from shapesmith.engine.path_data import BezierPoint, PathData, PathKind
from shapesmith.engine.paths.base import PathModifier
from shapesmith.engine.registry import ModifierKind, modifier
from shapesmith.models.settings import NoiseOffsetSettings
from shapesmith.utils.math_helpers import fractal_noise
from shapesmith.utils.transform_math import normal, tangent


def _direction(
    anchors: np.ndarray,
    index: int,
    closed: bool,
    mode: str,
    noise_value: float,
) -> tuple[float, float]:
    if mode == "normal":
        return normal(anchors, index, closed)
    if mode == "tangent":
        return tangent(anchors, index, closed)
    angle = noise_value * 2 * math.pi
    return (math.cos(angle), math.sin(angle))


class NoiseOffsetModifier(PathModifier):
    id = "noise-offset"
    settings_model = NoiseOffsetSettings
    min_points = 2

    def apply(self, path: PathData, cfg: NoiseOffsetSettings) -> PathData:
        anchors = path.anchors()
        bounds = path.current_bounds()
        bx, by = bounds.x, bounds.y
        bw = max(bounds.w, 1.0)
        bh = max(bounds.h, 1.0)

        def sample(x: float, y: float, seed: float) -> float:
            nx = (x - bx) / bw * cfg.frequency
            ny = (y - by) / bh * cfg.frequency
            return fractal_noise(nx, ny, cfg.octaves, seed)

        if path.kind == PathKind.POINTS:
            out = np.empty_like(anchors)
            for i, (x, y) in enumerate(anchors):
                n = sample(float(x), float(y), cfg.seed + i)
                ux, uy = _direction(anchors, i, path.is_closed, cfg.direction, n)
                out[i] = (x + ux * cfg.amplitude * n, y + uy * cfg.amplitude * n)
            return PathData(PathKind.POINTS, out, path.is_closed)

        handle_amp = cfg.amplitude * DEFAULT_CONFIG.noise_handle_factor
        bps: list[BezierPoint] = []
        for i, p in enumerate(path.data):
            n = sample(p.x, p.y, cfg.seed + i)
            ux, uy = _direction(anchors, i, path.is_closed, cfg.direction, n)
            cp1 = p.cp1
            cp2 = p.cp2
            if cp1 is not None:
                n1 = sample(cp1[0], cp1[1], cfg.seed + i + DEFAULT_CONFIG.noise_cp1_seed_offset)
                cp1 = (cp1[0] + ux * handle_amp * n1, cp1[1] + uy * handle_amp * n1)
            if cp2 is not None:
                n2 = sample(cp2[0], cp2[1], cfg.seed + i + DEFAULT_CONFIG.noise_cp2_seed_offset)
                cp2 = (cp2[0] + ux * handle_amp * n2, cp2[1] + uy * handle_amp * n2)
            bps.append(BezierPoint(
                p.x + ux * cfg.amplitude * n,
                p.y + uy * cfg.amplitude * n,
                cp1,
                cp2,
            ))
        return PathData(PathKind.BEZIER, bps, path.is_closed)


NOISE_OFFSET = NoiseOffsetModifier()


@modifier(
    id="noise-offset",
    kind=ModifierKind.PATH,
    settings=NoiseOffsetSettings,
    description="Seeded fractal-noise displacement",
)
def noise_offset(
    state: ShapeState,
    settings: NoiseOffsetSettings | dict,
    group: GroupContext | None = None,
) -> ShapeState:
    return NOISE_OFFSET.process(state, settings)
