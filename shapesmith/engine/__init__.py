"""Shapesmith procedural geometry engine."""

from shapesmith.engine.registry import ModifierKind, get_registry, modifier

__all__ = [
    "modifier",
    "ModifierKind",
    "get_registry",
]
