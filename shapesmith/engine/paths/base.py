"""PathModifier base: shared validation, early returns and bounds bookkeeping."""

from __future__ import annotations

import logging
from typing import Any

from shapesmith.engine.bridge import apply_path_result, shape_to_path
from shapesmith.engine.context import ShapeInstance, ShapeState
from shapesmith.engine.path_data import (
    PathData,
    PathKind,
    PathModificationResult,
    compute_bounds,
    is_valid_path_data,
)
from shapesmith.models.settings import ModifierSettings, coerce_settings

logger = logging.getLogger(__name__)


class PathModifier:
    """Rewrites one PathData. Subclasses implement ``apply``.

    ``modify`` never raises on bad settings, degenerate geometry or opaque svg
    data; it hands the input back with ``bounds_changed=False`` instead.
    """

    id: str = ""
    settings_model: type[ModifierSettings] = ModifierSettings
    # Fewer points than this is degenerate for the algorithm
    min_points: int = 2

    def apply(self, path: PathData, cfg: Any) -> PathData | None:
        raise NotImplementedError

    def modify(self, path: PathData, settings: Any) -> PathModificationResult:
        cfg = coerce_settings(self.settings_model, settings)
        if cfg is None:
            return PathModificationResult.unchanged(path)
        if path.kind == PathKind.SVG:
            logger.debug("%s: svg path data passed through", self.id)
            return PathModificationResult.unchanged(path)
        if not is_valid_path_data(path) or path.point_count < self.min_points:
            logger.debug("%s: %d points, nothing to do", self.id, path.point_count)
            return PathModificationResult.unchanged(path)

        modified = self.apply(path, cfg)
        if modified is None:
            return PathModificationResult.unchanged(path)

        bounds = compute_bounds(modified.kind, modified.data)
        return PathModificationResult(
            path_data=PathData(modified.kind, modified.data, modified.is_closed, bounds),
            bounds_changed=True,
            new_bounds=bounds,
        )

    def process(self, state: ShapeState, settings: Any) -> ShapeState:
        """Apply the modifier to every path-capable instance of ``state``."""
        out: list[ShapeInstance] = []
        for inst in state.instances:
            path = shape_to_path(inst.shape)
            if path is None:
                out.append(inst)
                continue
            result = self.modify(path, settings)
            if not result.bounds_changed:
                out.append(inst)
                continue
            out.append(apply_path_result(inst, path, result))
        return ShapeState.of(out)
