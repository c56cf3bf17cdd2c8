"""Modifier registry — every modifier is a standalone function registered via decorator.

Usage:
    @modifier(id="circular-array", kind=ModifierKind.ARRAY, settings=CircularArraySettings)
    def circular_array(state: ShapeState, settings: CircularArraySettings,
                       group: GroupContext | None = None) -> ShapeState:
        ...

Adding a new modifier = creating one file under engine/arrays or engine/paths
with the decorator. Nothing else changes.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from shapesmith.engine.errors import UnknownModifierError
from shapesmith.models.settings import ModifierSettings, coerce_settings

if TYPE_CHECKING:
    from shapesmith.engine.context import GroupContext, ShapeState

logger = logging.getLogger(__name__)

ModifierFn = Callable[["ShapeState", Any, Optional["GroupContext"]], "ShapeState"]


class ModifierKind(str, enum.Enum):
    ARRAY = "array"
    PATH = "path"


@dataclass
class ModifierSpec:
    id: str
    kind: ModifierKind
    fn: ModifierFn
    settings_model: type[ModifierSettings]
    description: str = ""

    def coerce(self, raw: Any) -> ModifierSettings | None:
        return coerce_settings(self.settings_model, raw)


class ModifierRegistry:
    """Singleton registry of all modifiers."""

    def __init__(self) -> None:
        self._modifiers: dict[str, ModifierSpec] = {}

    def register(self, spec: ModifierSpec) -> None:
        if spec.id in self._modifiers:
            raise ValueError(f"Duplicate modifier ID: {spec.id}")
        self._modifiers[spec.id] = spec
        logger.debug("Registered modifier %s (%s)", spec.id, spec.kind.value)

    def get(self, modifier_id: str) -> ModifierSpec:
        try:
            return self._modifiers[modifier_id]
        except KeyError:
            raise UnknownModifierError(modifier_id) from None

    def get_kind(self, kind: ModifierKind) -> list[ModifierSpec]:
        specs = [s for s in self._modifiers.values() if s.kind == kind]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[ModifierSpec]:
        return sorted(self._modifiers.values(), key=lambda s: (s.kind.value, s.id))

    def __contains__(self, modifier_id: str) -> bool:
        return modifier_id in self._modifiers

    @property
    def count(self) -> int:
        return len(self._modifiers)


# Module-level singleton
_registry = ModifierRegistry()


def get_registry() -> ModifierRegistry:
    return _registry


def modifier(
    *,
    id: str,
    kind: ModifierKind,
    settings: type[ModifierSettings],
    description: str = "",
):
    """Decorator to register a modifier function."""

    def decorator(fn: ModifierFn):
        spec = ModifierSpec(
            id=id,
            kind=kind,
            fn=fn,
            settings_model=settings,
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
