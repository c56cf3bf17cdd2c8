"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from shapesmith.engine.boolean import BooleanOperation
from shapesmith.models.shape import Shape


class TransformModel(BaseModel):
    x: float = 0.0
    y: float = 0.0
    rotation: float = Field(default=0.0, description="Radians")
    scale_x: float = 1.0
    scale_y: float = 1.0


class ModifierStepModel(BaseModel):
    id: str = Field(..., description="Registered modifier id, e.g. circular-array")
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Settings record (camelCase keys); omitted keys take defaults",
    )
    enabled: bool = True


class GroupRequest(BaseModel):
    """Treat all input shapes as one rigid group.

    Bounds default to the collective box of the inputs.
    """

    group_top_left: tuple[float, float] | None = None
    group_width: float | None = None
    group_height: float | None = None
    group_transform: TransformModel | None = Field(
        default=None,
        description="Current placement of the group, if it moved since the array was built",
    )


class ModifyRequest(BaseModel):
    shapes: list[Shape] = Field(..., description="Source shapes")
    steps: list[ModifierStepModel] = Field(default_factory=list, description="Modifier stack, applied in order")
    group: GroupRequest | None = None


class PathModifyRequest(BaseModel):
    modifier: str = Field(..., description="Path modifier id (subdivide, smooth, simplify, noise-offset)")
    settings: dict[str, Any] = Field(default_factory=dict)
    path: dict[str, Any] | None = Field(
        default=None,
        description="Path data: {type, data, isClosed}",
    )
    shape: Shape | None = Field(default=None, description="Shape to extract the path from when no path is given")


class BooleanRequest(BaseModel):
    shapes: list[Shape] = Field(..., min_length=1)
    operation: BooleanOperation = BooleanOperation.UNION
    preserve_collective_position: bool = Field(
        default=False,
        description="Center the result on the inputs' collective bounds",
    )
