"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from shapesmith.models.shape import Shape


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    modifiers_registered: int = 0


class ModifierInfo(BaseModel):
    id: str
    kind: str
    description: str = ""
    settings_schema: dict[str, Any] = Field(default_factory=dict)


class InstanceModel(BaseModel):
    index: int
    shape: Shape
    transform: dict[str, float]
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModifyResponse(BaseModel):
    instances: list[InstanceModel] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    steps_completed: int = 0
    steps_skipped: int = 0
    steps_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)


class PathModifyResponse(BaseModel):
    path: dict[str, Any]
    bounds_changed: bool = False
    new_bounds: dict[str, float] | None = None
    shape: Shape | None = None


class BooleanResponse(BaseModel):
    shape: Shape
    operation: str
    polygon: list[Any] = Field(default_factory=list)
    style_source_id: str | None = None
    cache_size: int = 0


class CacheClearResponse(BaseModel):
    cleared: int = 0
