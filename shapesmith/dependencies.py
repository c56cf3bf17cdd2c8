"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from shapesmith.config import settings
from shapesmith.engine.boolean import BooleanEngine, PolygonCache
from shapesmith.engine.pipeline import ModifierStack


def get_settings():
    return settings


@lru_cache(maxsize=1)
def get_boolean_engine() -> BooleanEngine:
    """One engine (and polygon cache) per process."""
    return BooleanEngine(cache=PolygonCache(settings.polygon_cache_size))


def get_modifier_stack() -> ModifierStack:
    return ModifierStack()
