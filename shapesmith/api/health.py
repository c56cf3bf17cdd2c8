"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from shapesmith.engine.registry import get_registry
from shapesmith.models.responses import HealthResponse, ModifierInfo

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        modifiers_registered=get_registry().count,
    )


@router.get("/modifiers", response_model=list[ModifierInfo])
async def modifiers() -> list[ModifierInfo]:
    return [
        ModifierInfo(
            id=spec.id,
            kind=spec.kind.value,
            description=spec.description,
            settings_schema=spec.settings_model.model_json_schema(by_alias=True),
        )
        for spec in get_registry().all()
    ]
