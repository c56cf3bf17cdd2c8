"""Modifier settings records.

Wire format is camelCase (``rotateEach``, ``alignToTangent``); attributes are
snake_case. Angles are degrees; processors convert to radians at use.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Upper bound on clones one L-system source may grow
MAX_LSYSTEM_CLONES = 10_000


class ModifierSettings(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
        extra="ignore",
    )


# ── Array processors ──


class LinearArraySettings(ModifierSettings):
    count: int = Field(default=3, ge=1, le=1000)
    offset_x: float = Field(default=100.0, description="Step as percent of instance width")
    offset_y: float = Field(default=0.0, description="Step as percent of instance height")
    rotate_each: float = Field(default=0.0, description="Degrees added per step")
    rotate_all: float = Field(default=0.0, description="Degrees added to every copy")
    scale_step: float = Field(default=100.0, gt=0, description="Percent scale at the last copy")


class GridArraySettings(ModifierSettings):
    rows: int = Field(default=3, ge=1, le=200)
    columns: int = Field(default=3, ge=1, le=200)
    spacing_x: float = Field(default=120.0, description="Pixels between columns")
    spacing_y: float = Field(default=120.0, description="Pixels between rows")
    offset_x: float = 0.0
    offset_y: float = 0.0
    rotate_each: float = Field(default=0.0, description="Degrees added per cell index")
    scale_step: float = Field(default=100.0, gt=0, description="Percent scale at the last cell")


class CircularArraySettings(ModifierSettings):
    count: int = Field(default=8, ge=1, le=1000)
    radius: float = Field(default=100.0, ge=0)
    start_angle: float = 0.0
    end_angle: float = 360.0
    center_x: float = Field(default=0.0, description="Circle center offset from the source center")
    center_y: float = 0.0
    rotate_all: float = 0.0
    rotate_each: float = 0.0
    align_to_tangent: bool = False


class MirrorSettings(ModifierSettings):
    axis: Literal["x", "y", "diagonal", "point"] = "x"
    offset: float = Field(default=0.0, description="Line position for x / y / diagonal axes")
    point_x: float = 0.0
    point_y: float = 0.0
    include_source: bool = True


class LSystemSettings(ModifierSettings):
    iterations: int = Field(default=3, ge=0, le=10)
    angle: float = Field(default=25.0, description="Branch angle in degrees")
    step_percent: float = Field(default=100.0, gt=0, description="Step length as percent of max(w, h)")
    length_decay: float = Field(default=0.75, gt=0)
    scale_per_iteration: float = Field(default=1.0, gt=0)
    branches: list[float] | None = Field(
        default=None, max_length=8, description="Relative branch angles in degrees"
    )
    branch_probability: float = Field(default=1.0, ge=0, le=1)
    angle_jitter: float = Field(default=0.0, ge=0)
    seed: int = 0

    @property
    def max_clones(self) -> int:
        """Clones per source when every branch is taken: sum of k^d, d < iterations."""
        k = len(self.branches) if self.branches is not None else 2
        if k == 1:
            return self.iterations
        return (k**self.iterations - 1) // (k - 1) if k else min(self.iterations, 1)

    @model_validator(mode="after")
    def _bound_growth(self) -> LSystemSettings:
        if self.max_clones > MAX_LSYSTEM_CLONES:
            raise ValueError(
                f"{self.max_clones} clones per source exceeds the limit of {MAX_LSYSTEM_CLONES}"
            )
        return self


# ── Path modifiers ──


class SubdivideSettings(ModifierSettings):
    iterations: int = Field(default=1, ge=0, le=10)
    factor: float = Field(default=0.5, gt=0, lt=1)
    smooth: bool = False


class SmoothSettings(ModifierSettings):
    iterations: int = Field(default=1, ge=1, le=10)
    factor: float = Field(default=0.5, ge=0, le=1)
    preserve_corners: bool = False
    corner_threshold: float = Field(default=90.0, ge=0, le=180)


class SimplifySettings(ModifierSettings):
    tolerance: float = Field(default=5.0, ge=0)
    preserve_corners: bool = False
    min_points: int = Field(default=3, ge=2)


class NoiseOffsetSettings(ModifierSettings):
    amplitude: float = Field(default=10.0, ge=0)
    frequency: float = Field(default=0.1, gt=0)
    octaves: int = Field(default=3, ge=1, le=8)
    seed: float = 0.0
    direction: Literal["both", "normal", "tangent"] = "both"


S = TypeVar("S", bound=ModifierSettings)


def coerce_settings(model: type[S], raw: Any) -> S | None:
    """Validate ``raw`` into ``model``. Returns None (and logs) when it can't."""
    if raw is None:
        logger.warning("%s: settings missing", model.__name__)
        return None
    if isinstance(raw, model):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning("%s rejected: %s", model.__name__, e.errors(include_url=False))
        return None
